"""Immutable views of the session handed to the presentation layer and collaborators."""
from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Optional, Tuple

from esper import World

from mosaic.components.aggregate_summary import AggregateSummary
from mosaic.components.session_state import SessionMode
from mosaic.components.tile import Tile
from mosaic.utils.session import get_grid, get_pool, get_session_state, get_summary


@dataclass(frozen=True, slots=True)
class TileSnapshot:
    id: str
    type_index: int
    rotation: int
    x: float
    y: float

    @classmethod
    def of(cls, tile: Tile) -> "TileSnapshot":
        return cls(id=tile.id, type_index=tile.type_index, rotation=tile.rotation, x=tile.x, y=tile.y)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    mode: SessionMode
    rows: int
    cols: int
    grid: Tuple[Tuple[Optional[TileSnapshot], ...], ...]
    pool: Tuple[TileSnapshot, ...]
    summary: AggregateSummary

    def cell(self, row: int, col: int) -> Optional[TileSnapshot]:
        return self.grid[row][col]

    def grid_tile_ids(self) -> Tuple[str, ...]:
        return tuple(tile.id for row in self.grid for tile in row if tile is not None)

    def pool_tile_ids(self) -> Tuple[str, ...]:
        return tuple(tile.id for tile in self.pool)


def _detached_summary(summary: AggregateSummary) -> AggregateSummary:
    return replace(summary, counts=MappingProxyType(dict(summary.counts)))


def build_snapshot(world: World) -> SessionSnapshot:
    lock = getattr(world, "mutation_lock")
    with lock:
        grid = get_grid(world)
        cells: Tuple[Tuple[Optional[TileSnapshot], ...], ...] = ()
        rows = cols = 0
        if grid is not None:
            rows, cols = grid.rows, grid.cols
            cells = tuple(
                tuple(TileSnapshot.of(tile) if tile is not None else None for tile in row)
                for row in grid.cells
            )
        return SessionSnapshot(
            mode=get_session_state(world).mode,
            rows=rows,
            cols=cols,
            grid=cells,
            pool=tuple(TileSnapshot.of(tile) for tile in get_pool(world)),
            summary=_detached_summary(get_summary(world)),
        )
