"""Tile catalogue construction: built-in defaults or a JSON definition file."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List

from mosaic.components.tile_catalogue import TileCatalogue, TileSpec
from mosaic.systems.pool_ops import InvalidCatalogue

# Three stock tile images: S0.png, S1.png, S2.png.
DEFAULT_TILE_SPECS: List[TileSpec] = [
    TileSpec(name="S0", image="S0.png", unit_price=5, color=(196, 92, 62)),
    TileSpec(name="S1", image="S1.png", unit_price=10, color=(62, 120, 186)),
    TileSpec(name="S2", image="S2.png", unit_price=8, color=(222, 196, 92)),
]


def default_catalogue() -> TileCatalogue:
    return TileCatalogue(entries=list(DEFAULT_TILE_SPECS))


def _parse_color(raw: Any) -> tuple[int, int, int]:
    if raw is None:
        return (160, 160, 160)
    try:
        r, g, b = (int(channel) for channel in raw)
    except (TypeError, ValueError) as exc:
        raise InvalidCatalogue(f"Invalid color {raw!r}") from exc
    return (r, g, b)


def catalogue_from_entries(entries: Iterable[dict]) -> TileCatalogue:
    specs: List[TileSpec] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidCatalogue(f"Catalogue entry {index} is not an object")
        try:
            name = str(entry["name"])
            price = float(entry["unit_price"])
        except KeyError as exc:
            raise InvalidCatalogue(f"Catalogue entry {index} is missing {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidCatalogue(f"Catalogue entry {index} has a non-numeric unit_price") from exc
        if price < 0:
            raise InvalidCatalogue(f"Catalogue entry {index} has a negative unit_price")
        specs.append(
            TileSpec(
                name=name,
                image=str(entry.get("image", f"{name}.png")),
                unit_price=price,
                color=_parse_color(entry.get("color")),
            )
        )
    if not specs:
        raise InvalidCatalogue("Catalogue must contain at least one tile type")
    return TileCatalogue(entries=specs)


def load_catalogue(path: str | Path) -> TileCatalogue:
    """Read a catalogue file: either a list of entries or {"tiles": [...]}."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise InvalidCatalogue(f"Catalogue file {path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("tiles", [])
    if not isinstance(payload, list):
        raise InvalidCatalogue(f"Catalogue file {path} must hold a list of tiles")
    return catalogue_from_entries(payload)
