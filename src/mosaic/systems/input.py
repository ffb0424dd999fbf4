from __future__ import annotations

from time import monotonic
from typing import Any, Callable, Hashable, Tuple

from esper import World

from mosaic.components.drag_state import DragState
from mosaic.components.tile import Tile
from mosaic.constants import DOUBLE_CLICK_INTERVAL, MOUSE_BUTTON_LEFT, MOUSE_BUTTON_RIGHT
from mosaic.events.bus import (
    EventBus,
    EVENT_GRID_CELL_CLICK,
    EVENT_GRID_CELL_DOUBLE_CLICK,
    EVENT_MOUSE_DRAG,
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_RELEASE,
    EVENT_POOL_TILE_ROTATE,
    EVENT_TILE_DOUBLE_ACTIVATE,
    EVENT_TILE_DRAG_START,
    EVENT_TILE_DROP,
)
from mosaic.ui.layout import OUTSIDE, map_to_cell
from mosaic.utils.session import get_geometry, get_grid, get_pool


class InputSystem:
    """Turns raw pointer events into placement gestures.

    Coordinates arrive in core space (origin top-left, y downward). Floating
    tiles sit above the grid, so a press is first tested against the pool
    (last spawned tile wins) and only then against grid cells.

    Two presses on the same target within ``double_click_interval`` count as a
    double activation; the first press still produces its single-press effect.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        clock: Callable[[], float] | None = None,
        double_click_interval: float = DOUBLE_CLICK_INTERVAL,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._clock = clock or monotonic
        self._interval = max(0.0, float(double_click_interval))
        self._last_press: Tuple[Hashable, float] | None = None
        self._drag_entity: int | None = None
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_DRAG, self.on_mouse_drag)
        self.event_bus.subscribe(EVENT_MOUSE_RELEASE, self.on_mouse_release)

    @property
    def drag_state(self) -> DragState | None:
        if self._drag_entity is None:
            return None
        return self.world.component_for_entity(self._drag_entity, DragState)

    def pool_tile_at(self, x: float, y: float) -> Tile | None:
        size = get_geometry(self.world).cell_size
        hit = None
        for tile in get_pool(self.world):
            if tile.x <= x < tile.x + size and tile.y <= y < tile.y + size:
                hit = tile
        return hit

    def on_mouse_press(self, sender, **kwargs):
        coords = _coords(kwargs)
        if coords is None:
            return
        x, y = coords
        button = kwargs.get('button', MOUSE_BUTTON_LEFT)
        tile = self.pool_tile_at(x, y)
        if button == MOUSE_BUTTON_RIGHT:
            if tile is not None:
                self.event_bus.emit(EVENT_POOL_TILE_ROTATE, tile_id=tile.id)
            return
        if button != MOUSE_BUTTON_LEFT:
            return
        if tile is not None:
            if self._is_double(("tile", tile.id)):
                self._end_drag()
                self.event_bus.emit(EVENT_TILE_DOUBLE_ACTIVATE, tile_id=tile.id)
                return
            self._begin_drag(tile, x, y)
            return
        cell = self._cell_at(x, y)
        if cell is OUTSIDE:
            self._last_press = None
            return
        row, col = cell
        if self._is_double(("cell", row, col)):
            self.event_bus.emit(EVENT_GRID_CELL_DOUBLE_CLICK, row=row, col=col)
        else:
            self.event_bus.emit(EVENT_GRID_CELL_CLICK, row=row, col=col)

    def on_mouse_drag(self, sender, **kwargs):
        drag = self.drag_state
        coords = _coords(kwargs)
        if drag is None or coords is None:
            return
        drag.pointer_x, drag.pointer_y = coords
        drag.moved = True

    def on_mouse_release(self, sender, **kwargs):
        drag = self.drag_state
        if drag is None:
            return
        coords = _coords(kwargs)
        tile_id = drag.tile_id
        moved = drag.moved
        offset = (drag.offset_x, drag.offset_y)
        self._end_drag()
        if coords is None or not moved:
            return
        self.event_bus.emit(
            EVENT_TILE_DROP,
            tile_id=tile_id,
            x=coords[0],
            y=coords[1],
            offset_x=offset[0],
            offset_y=offset[1],
        )

    def _begin_drag(self, tile: Tile, x: float, y: float) -> None:
        self._end_drag()
        self._drag_entity = self.world.create_entity(
            DragState(tile_id=tile.id, pointer_x=x, pointer_y=y, offset_x=x - tile.x, offset_y=y - tile.y)
        )
        self.event_bus.emit(EVENT_TILE_DRAG_START, tile_id=tile.id, x=x, y=y)

    def _end_drag(self) -> None:
        if self._drag_entity is not None:
            self.world.delete_entity(self._drag_entity, immediate=True)
            self._drag_entity = None

    def _is_double(self, target: Hashable) -> bool:
        now = self._clock()
        last = self._last_press
        if last is not None and last[0] == target and (now - last[1]) <= self._interval:
            # Consume the pair so a third press starts a new sequence.
            self._last_press = None
            return True
        self._last_press = (target, now)
        return False

    def _cell_at(self, x: float, y: float):
        grid = get_grid(self.world)
        if grid is None:
            return OUTSIDE
        geometry = get_geometry(self.world)
        return map_to_cell(x, y, (geometry.origin_x, geometry.origin_y), geometry.cell_size, grid.rows, grid.cols)


def _coords(payload: dict[str, Any]) -> Tuple[float, float] | None:
    x = payload.get('x')
    y = payload.get('y')
    if x is None or y is None:
        return None
    try:
        return float(x), float(y)
    except (TypeError, ValueError):
        return None
