from __future__ import annotations

import random
from typing import Callable, Optional, Tuple

from mosaic.components.tile import Tile
from mosaic.components.tile_pool import TilePool
from mosaic.constants import ROTATIONS, SEED_MARGIN

Point = Tuple[float, float]
LayoutFn = Callable[[int, random.Random], Point]


class InvalidCatalogue(ValueError):
    """Raised when tiles are requested from an empty or malformed catalogue."""


def new_tile(pool: TilePool, catalogue_size: int, rng: random.Random, position: Point = (0.0, 0.0)) -> Tile:
    """Mint a tile with a fresh id, uniform random type and rotation. Not added to the pool."""
    if catalogue_size <= 0:
        raise InvalidCatalogue(f"Catalogue must contain at least one tile type, got {catalogue_size}")
    return Tile(
        id=pool.mint_id(),
        type_index=rng.randrange(catalogue_size),
        rotation=rng.choice(ROTATIONS),
        x=float(position[0]),
        y=float(position[1]),
    )


def seed(
    catalogue_size: int,
    count: int,
    layout_fn: LayoutFn,
    rng: random.Random,
    *,
    first_serial: int = 0,
) -> TilePool:
    """Create a pool of ``count`` random tiles positioned by ``layout_fn(index, rng)``.

    first_serial lets a reseeded pool continue numbering after the tiles it replaces.
    """
    if catalogue_size <= 0:
        raise InvalidCatalogue(f"Catalogue must contain at least one tile type, got {catalogue_size}")
    pool = TilePool(next_serial=first_serial)
    for index in range(max(0, count)):
        tile = new_tile(pool, catalogue_size, rng)
        tile.x, tile.y = (float(v) for v in layout_fn(index, rng))
        pool.add(tile)
    return pool


def remove_by_id(pool: TilePool, tile_id: str) -> Optional[Tile]:
    return pool.pop(tile_id)


def spawn_replacement(pool: TilePool, near_position: Point, catalogue_size: int, rng: random.Random) -> Tile:
    """Add one fresh tile at the coordinates a placed tile just vacated."""
    tile = new_tile(pool, catalogue_size, rng, near_position)
    pool.add(tile)
    return tile


def reposition(pool: TilePool, tile_id: str, new_position: Point) -> bool:
    tile = pool.get(tile_id)
    if tile is None:
        return False
    tile.x = float(new_position[0])
    tile.y = float(new_position[1])
    return True


def rotate_tile(pool: TilePool, tile_id: str) -> Optional[int]:
    tile = pool.get(tile_id)
    if tile is None:
        return None
    return tile.rotate()


def scatter_layout(width: float, height: float, margin: float = SEED_MARGIN) -> LayoutFn:
    """Uniform random scatter inside the viewport, keeping ``margin`` clear at the right and bottom."""
    span_x = max(0.0, float(width) - margin)
    span_y = max(0.0, float(height) - margin)

    def layout(index: int, rng: random.Random) -> Point:
        return (rng.random() * span_x, rng.random() * span_y)

    return layout


def lattice_layout(center: Point, spacing: float, columns: int) -> LayoutFn:
    """Sparse lattice of rows ``columns`` wide, each row centred on center[0], growing downward."""
    columns = max(1, int(columns))

    def layout(index: int, rng: random.Random) -> Point:
        row, col = divmod(index, columns)
        x = center[0] + (col - (columns - 1) / 2) * spacing
        y = center[1] + row * spacing
        return (x, y)

    return layout
