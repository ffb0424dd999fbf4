from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple

from esper import World

from mosaic.components.grid import Grid
from mosaic.components.tile_pool import TilePool
from mosaic.events.bus import (
    EventBus,
    EVENT_GRID_CELL_CLICK,
    EVENT_GRID_CELL_DOUBLE_CLICK,
    EVENT_GRID_CHANGED,
    EVENT_OWNERSHIP_VIOLATION,
    EVENT_PLACEMENT_REJECTED,
    EVENT_POOL_CHANGED,
    EVENT_POOL_TILE_ROTATE,
    EVENT_TILE_DOUBLE_ACTIVATE,
    EVENT_TILE_DROP,
    EVENT_TILE_PLACED,
    EVENT_TILE_REMOVED,
    EVENT_TILE_ROTATED,
)
from mosaic.systems import grid_ops, pool_ops
from mosaic.ui.layout import OUTSIDE, map_to_cell, zone_at_point
from mosaic.utils.session import get_catalogue, get_geometry, get_grid, get_pool

logger = logging.getLogger(__name__)


class PlacementOutcome(Enum):
    PLACED = auto()
    OCCUPIED = auto()
    REPOSITIONED = auto()
    SNAPPED_BACK = auto()
    GRID_FULL = auto()
    UNKNOWN_TILE = auto()
    NO_GRID = auto()
    OUTSIDE = auto()
    REMOVED = auto()
    ROTATED = auto()
    EMPTY_CELL = auto()


@dataclass(frozen=True, slots=True)
class PendingSpawn:
    """Replacement request produced by a committed placement.

    The caller executes it right after the commit, so the fresh tile can never be
    confused with the one that was just dragged.
    """
    vacated_position: Tuple[float, float]
    placed_tile_id: str


def commit_placement(pool: TilePool, grid: Grid, tile_id: str, row: int, col: int) -> PendingSpawn | None:
    """Move a pool tile into an empty grid cell; first phase of a placement.

    Returns None (and changes nothing) if the tile is not in the pool or the
    cell cannot take it.
    """
    tile = pool.get(tile_id)
    if tile is None:
        return None
    if not grid_ops.try_place(grid, row, col, tile):
        return None
    pool_ops.remove_by_id(pool, tile_id)
    return PendingSpawn(vacated_position=tile.position, placed_tile_id=tile_id)


class PlacementSystem:
    """Orchestrates every grid/pool mutation triggered by pointer gestures.

    Each public operation is total: bad coordinates or stale ids come back as a
    PlacementOutcome, never as an exception. All mutations hold the world's
    mutation lock, including the commit-then-spawn sequence of a placement.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self._lock = getattr(world, "mutation_lock")
        self.event_bus.subscribe(EVENT_TILE_DROP, self.on_tile_drop)
        self.event_bus.subscribe(EVENT_TILE_DOUBLE_ACTIVATE, self.on_tile_double_activate)
        self.event_bus.subscribe(EVENT_GRID_CELL_CLICK, self.on_grid_cell_click)
        self.event_bus.subscribe(EVENT_GRID_CELL_DOUBLE_CLICK, self.on_grid_cell_double_click)
        self.event_bus.subscribe(EVENT_POOL_TILE_ROTATE, self.on_pool_tile_rotate)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_tile_drop(self, sender, **kwargs):
        tile_id = kwargs.get('tile_id')
        x = kwargs.get('x')
        y = kwargs.get('y')
        if tile_id is None or x is None or y is None:
            return
        grab_offset = (kwargs.get('offset_x', 0.0), kwargs.get('offset_y', 0.0))
        self.place_by_drag(tile_id, x, y, grab_offset=grab_offset)

    def on_tile_double_activate(self, sender, **kwargs):
        tile_id = kwargs.get('tile_id')
        if tile_id is None:
            return
        self.place_first_empty(tile_id)

    def on_grid_cell_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.rotate_grid_tile(row, col)

    def on_grid_cell_double_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.remove_from_grid(row, col)

    def on_pool_tile_rotate(self, sender, **kwargs):
        tile_id = kwargs.get('tile_id')
        if tile_id is None:
            return
        self.rotate_pool_tile(tile_id)

    # ------------------------------------------------------------------
    # Placement protocols
    # ------------------------------------------------------------------
    def place_by_drag(
        self,
        tile_id: str,
        pointer_x: float,
        pointer_y: float,
        *,
        grab_offset: Tuple[float, float] = (0.0, 0.0),
    ) -> PlacementOutcome:
        """Resolve a drop. The pointer picks the cell; off the grid the tile's
        top-left lands at the pointer minus grab_offset, so it does not jump.
        """
        with self._lock:
            pool = get_pool(self.world)
            if tile_id not in pool:
                return self._unknown_tile(tile_id, "place_by_drag")
            try:
                pointer_x = float(pointer_x)
                pointer_y = float(pointer_y)
            except (TypeError, ValueError):
                return PlacementOutcome.SNAPPED_BACK
            if not (math.isfinite(pointer_x) and math.isfinite(pointer_y)):
                return PlacementOutcome.SNAPPED_BACK
            geometry = get_geometry(self.world)
            if zone_at_point(pointer_x, pointer_y, geometry.reserved_zones) is not None:
                logger.debug("Drop of %s inside reserved zone; snapping back", tile_id)
                return PlacementOutcome.SNAPPED_BACK
            grid = get_grid(self.world)
            cell = OUTSIDE
            if grid is not None:
                cell = map_to_cell(
                    pointer_x,
                    pointer_y,
                    (geometry.origin_x, geometry.origin_y),
                    geometry.cell_size,
                    grid.rows,
                    grid.cols,
                )
            if cell is OUTSIDE:
                offset_x, offset_y = _finite_offset(grab_offset)
                pool_ops.reposition(pool, tile_id, (pointer_x - offset_x, pointer_y - offset_y))
                self.event_bus.emit(EVENT_POOL_CHANGED, reason="reposition", tile_ids=[tile_id])
                return PlacementOutcome.REPOSITIONED
            row, col = cell
            if grid.cells[row][col] is not None:
                self.event_bus.emit(
                    EVENT_PLACEMENT_REJECTED,
                    tile_id=tile_id,
                    outcome=PlacementOutcome.OCCUPIED,
                    row=row,
                    col=col,
                )
                return PlacementOutcome.OCCUPIED
            return self._place(pool, grid, tile_id, row, col, via="drag")

    def place_first_empty(self, tile_id: str) -> PlacementOutcome:
        with self._lock:
            pool = get_pool(self.world)
            if tile_id not in pool:
                return self._unknown_tile(tile_id, "place_first_empty")
            grid = get_grid(self.world)
            if grid is None:
                return PlacementOutcome.NO_GRID
            target = grid_ops.first_empty_cell(grid)
            if target is None:
                self.event_bus.emit(
                    EVENT_PLACEMENT_REJECTED,
                    tile_id=tile_id,
                    outcome=PlacementOutcome.GRID_FULL,
                    row=None,
                    col=None,
                )
                return PlacementOutcome.GRID_FULL
            return self._place(pool, grid, tile_id, target[0], target[1], via="fill_first")

    def _place(self, pool: TilePool, grid: Grid, tile_id: str, row: int, col: int, *, via: str) -> PlacementOutcome:
        pending = commit_placement(pool, grid, tile_id, row, col)
        if pending is None:
            return PlacementOutcome.OCCUPIED
        replacement = self.execute_spawn(pending)
        logger.debug("Placed %s at (%d, %d) via %s; spawned %s", tile_id, row, col, via, replacement.id)
        self.event_bus.emit(EVENT_TILE_PLACED, tile_id=tile_id, row=row, col=col, via=via)
        self.event_bus.emit(EVENT_POOL_CHANGED, reason="placement", tile_ids=[tile_id, replacement.id])
        self.event_bus.emit(EVENT_GRID_CHANGED, reason="placement", positions=[(row, col)])
        return PlacementOutcome.PLACED

    def execute_spawn(self, pending: PendingSpawn):
        """Second phase of a placement: refill the pool where the placed tile used to float."""
        with self._lock:
            return pool_ops.spawn_replacement(
                get_pool(self.world),
                pending.vacated_position,
                len(get_catalogue(self.world)),
                getattr(self.world, "random"),
            )

    # ------------------------------------------------------------------
    # Grid edits
    # ------------------------------------------------------------------
    def remove_from_grid(self, row: int, col: int) -> PlacementOutcome:
        """Discard the tile at (row, col). The pool is deliberately not restocked."""
        with self._lock:
            grid = get_grid(self.world)
            if grid is None:
                return PlacementOutcome.NO_GRID
            if not grid.in_bounds(row, col):
                return PlacementOutcome.OUTSIDE
            removed = grid_ops.clear_cell(grid, row, col)
            if removed is None:
                return PlacementOutcome.EMPTY_CELL
            self.event_bus.emit(EVENT_TILE_REMOVED, tile_id=removed.id, row=row, col=col)
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="removal", positions=[(row, col)])
            return PlacementOutcome.REMOVED

    def rotate_grid_tile(self, row: int, col: int) -> PlacementOutcome:
        with self._lock:
            grid = get_grid(self.world)
            if grid is None:
                return PlacementOutcome.NO_GRID
            if not grid.in_bounds(row, col):
                return PlacementOutcome.OUTSIDE
            rotation = grid_ops.rotate_cell(grid, row, col)
            if rotation is None:
                return PlacementOutcome.EMPTY_CELL
            tile = grid.cells[row][col]
            self.event_bus.emit(EVENT_TILE_ROTATED, tile_id=tile.id, row=row, col=col, rotation=rotation)
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="rotation", positions=[(row, col)])
            return PlacementOutcome.ROTATED

    def rotate_pool_tile(self, tile_id: str) -> PlacementOutcome:
        with self._lock:
            pool = get_pool(self.world)
            if pool_ops.rotate_tile(pool, tile_id) is None:
                return self._unknown_tile(tile_id, "rotate_pool_tile")
            self.event_bus.emit(EVENT_POOL_CHANGED, reason="rotation", tile_ids=[tile_id])
            return PlacementOutcome.ROTATED

    def _unknown_tile(self, tile_id: str, operation: str) -> PlacementOutcome:
        grid = get_grid(self.world)
        if grid is not None and grid_ops.find_tile(grid, tile_id) is not None:
            # Already placed (e.g. a repeated gesture); nothing to do.
            return PlacementOutcome.UNKNOWN_TILE
        logger.warning("Tile %r is in neither the pool nor the grid during %s", tile_id, operation)
        self.event_bus.emit(EVENT_OWNERSHIP_VIOLATION, tile_id=tile_id, operation=operation)
        return PlacementOutcome.UNKNOWN_TILE


def _finite_offset(grab_offset) -> Tuple[float, float]:
    try:
        offset_x, offset_y = (float(v) for v in grab_offset)
    except (TypeError, ValueError):
        return 0.0, 0.0
    if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
        return 0.0, 0.0
    return offset_x, offset_y
