"""Grid lifecycle commands: start/resize, clear, restart and random fill."""
from __future__ import annotations

import logging
from typing import Any

from esper import World

from mosaic.components.session_state import SessionMode
from mosaic.constants import MAX_GRID_DIMENSION
from mosaic.events.bus import (
    EventBus,
    EVENT_ALTERNATE_FINISH_CHANGED,
    EVENT_COMMAND_REJECTED,
    EVENT_GRID_CHANGED,
    EVENT_POOL_CHANGED,
    EVENT_SESSION_RESTARTED,
    EVENT_SESSION_STARTED,
)
from mosaic.systems import grid_ops, pool_ops
from mosaic.systems.grid_ops import InvalidDimensions
from mosaic.utils.session import (
    get_catalogue,
    get_grid,
    get_pool,
    get_session_state,
    set_grid,
    set_pool,
)

logger = logging.getLogger(__name__)


def parse_dimension(value: Any) -> int | None:
    """Accept a positive int or a string of digits up to MAX_GRID_DIMENSION; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            return None
        parsed = int(text)
    else:
        return None
    if parsed <= 0 or parsed > MAX_GRID_DIMENSION:
        return None
    return parsed


class SessionSystem:
    """Owns the grid lifecycle.

    Width maps to columns and height to rows. The first valid start creates the
    grid; later starts resize it, keeping the overlapping placements.

    Grid events are emitted while the mutation lock is still held, so listeners
    such as the aggregator always see the grid the event describes.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self._lock = getattr(world, "mutation_lock")

    def start_or_resize(self, width: Any, height: Any) -> bool:
        cols = parse_dimension(width)
        rows = parse_dimension(height)
        with self._lock:
            current = get_grid(self.world)
            try:
                if rows is None or cols is None:
                    raise InvalidDimensions(height, width)
                if current is None:
                    grid = grid_ops.create_grid(rows, cols)
                else:
                    grid = grid_ops.resize_preserving(current, rows, cols)
            except InvalidDimensions as exc:
                logger.info("Rejected start: %s", exc)
                self.event_bus.emit(EVENT_COMMAND_REJECTED, command="start", reason="invalid_dimensions")
                return False
            set_grid(self.world, grid)
            get_session_state(self.world).mode = SessionMode.COMPOSING
            resized = current is not None
            self.event_bus.emit(EVENT_SESSION_STARTED, rows=rows, cols=cols, resized=resized)
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="resize" if resized else "start", positions=[])
        return True

    def clear(self) -> bool:
        with self._lock:
            grid = get_grid(self.world)
            if grid is None:
                self.event_bus.emit(EVENT_COMMAND_REJECTED, command="clear", reason="no_grid")
                return False
            cleared = grid_ops.clear_all(grid)
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="clear", positions=cleared)
        return True

    def restart(self) -> None:
        """Drop the grid entirely and deal a fresh pool."""
        with self._lock:
            set_grid(self.world, None)
            get_session_state(self.world).mode = SessionMode.IDLE
            self.reseed_pool()
            self.event_bus.emit(EVENT_SESSION_RESTARTED)
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="restart", positions=[])

    def reseed_pool(self, count: int | None = None) -> None:
        with self._lock:
            state = get_session_state(self.world)
            previous = get_pool(self.world)
            pool = pool_ops.seed(
                len(get_catalogue(self.world)),
                state.pool_size if count is None else count,
                pool_ops.scatter_layout(*state.viewport),
                getattr(self.world, "random"),
                first_serial=previous.next_serial,
            )
            set_pool(self.world, pool)
            self.event_bus.emit(EVENT_POOL_CHANGED, reason="reseed", tile_ids=list(pool.tiles))

    def random_fill(self) -> bool:
        """Fill every empty cell with freshly minted random tiles, leaving the pool as is."""
        with self._lock:
            grid = get_grid(self.world)
            if grid is None:
                self.event_bus.emit(EVENT_COMMAND_REJECTED, command="random_fill", reason="no_grid")
                return False
            pool = get_pool(self.world)
            size = len(get_catalogue(self.world))
            rng = getattr(self.world, "random")
            filled = grid_ops.fill_empty(grid, lambda: pool_ops.new_tile(pool, size, rng))
            self.event_bus.emit(EVENT_GRID_CHANGED, reason="random_fill", positions=filled)
        return True

    def set_alternate_finish(self, enabled: bool) -> None:
        with self._lock:
            state = get_session_state(self.world)
            if state.alternate_finish == bool(enabled):
                return
            state.alternate_finish = bool(enabled)
            self.event_bus.emit(EVENT_ALTERNATE_FINISH_CHANGED, enabled=state.alternate_finish)
