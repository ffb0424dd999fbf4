from __future__ import annotations

import math
from typing import List, Tuple

from esper import World

from mosaic.components.drag_state import DragState
from mosaic.components.tile import Tile
from mosaic.constants import CONTROL_BAR_HEIGHT
from mosaic.events.bus import (
    EventBus,
    EVENT_SESSION_RESTARTED,
    EVENT_SESSION_STARTED,
)
from mosaic.ui.layout import cell_origin, compute_grid_geometry, control_bar_zone
from mosaic.utils.session import get_catalogue, get_geometry, get_grid, get_pool, get_summary

PADDING = 2
GRID_LINE_COLOR = (0, 0, 0)
GRID_BACKGROUND = (245, 245, 245)
BAR_COLOR = (30, 30, 30)
TEXT_COLOR = (240, 240, 240)

Point = Tuple[float, float]


def tile_polygon(center_x: float, center_y: float, size: float, rotation: int) -> List[Point]:
    """Corners of a square tile turned clockwise by rotation degrees (screen space, y up)."""
    half = size / 2
    angle = math.radians(-rotation)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    corners = [(-half, half), (half, half), (half, -half), (-half, -half)]
    return [
        (center_x + dx * cos_a - dy * sin_a, center_y + dx * sin_a + dy * cos_a)
        for dx, dy in corners
    ]


def orientation_marker(center_x: float, center_y: float, size: float, rotation: int) -> List[Point]:
    """Small triangle pointing at the tile's top edge so rotation is visible without images."""
    outline = tile_polygon(center_x, center_y, size, rotation)
    top_left, top_right = outline[0], outline[1]
    mid_x = (top_left[0] + top_right[0]) / 2
    mid_y = (top_left[1] + top_right[1]) / 2
    inset = 0.35
    tip = (mid_x + (center_x - mid_x) * 0.1, mid_y + (center_y - mid_y) * 0.1)
    base_a = (
        top_left[0] + (center_x - top_left[0]) * inset,
        top_left[1] + (center_y - top_left[1]) * inset,
    )
    base_b = (
        top_right[0] + (center_x - top_right[0]) * inset,
        top_right[1] + (center_y - top_right[1]) * inset,
    )
    return [tip, base_a, base_b]


class RenderSystem:
    """Draws the control bar, grid, and floating pool, and keeps GridGeometry in sync with the window.

    Core state is y-down; arcade draws y-up, so every y is flipped against the window height here.
    """
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self._last_window_size = (self.window.width, self.window.height)
        self.event_bus.subscribe(EVENT_SESSION_STARTED, self.on_session_changed)
        self.event_bus.subscribe(EVENT_SESSION_RESTARTED, self.on_session_changed)
        self.sync_geometry()

    def notify_resize(self, width: int, height: int):
        self._last_window_size = (width, height)
        self.sync_geometry()

    def on_session_changed(self, sender, **kwargs):
        self.sync_geometry()

    def sync_geometry(self) -> None:
        grid = get_grid(self.world)
        rows, cols = (grid.rows, grid.cols) if grid is not None else (0, 0)
        cell_size, origin_x, origin_y = compute_grid_geometry(self.window.width, self.window.height, rows, cols)
        geometry = get_geometry(self.world)
        geometry.cell_size = cell_size
        geometry.origin_x = origin_x
        geometry.origin_y = origin_y
        geometry.reserved_zones = [control_bar_zone(self.window.width)]

    def _flip(self, y: float) -> float:
        return self.window.height - y

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        try:
            arcade.get_window()
        except Exception:
            return
        if (self.window.width, self.window.height) != self._last_window_size:
            self.notify_resize(self.window.width, self.window.height)
        self._draw_grid(arcade)
        self._draw_pool(arcade)
        self._draw_control_bar(arcade)

    def _draw_tile(self, arcade, tile: Tile, left: float, top: float, size: float) -> None:
        catalogue = get_catalogue(self.world)
        center_x = left + size / 2
        center_y = self._flip(top + size / 2)
        draw_size = max(size - PADDING * 2, 4)
        arcade.draw_polygon_filled(tile_polygon(center_x, center_y, draw_size, tile.rotation), catalogue.color_for(tile.type_index))
        arcade.draw_polygon_filled(orientation_marker(center_x, center_y, draw_size, tile.rotation), (255, 255, 255))

    def _draw_grid(self, arcade) -> None:
        grid = get_grid(self.world)
        if grid is None:
            return
        geometry = get_geometry(self.world)
        size = geometry.cell_size
        origin = (geometry.origin_x, geometry.origin_y)
        for row in range(grid.rows):
            for col in range(grid.cols):
                left, top = cell_origin(row, col, origin, size)
                bottom = self._flip(top + size)
                arcade.draw_lbwh_rectangle_filled(left, bottom, size, size, GRID_BACKGROUND)
                arcade.draw_lbwh_rectangle_outline(left, bottom, size, size, GRID_LINE_COLOR, 1)
                tile = grid.cells[row][col]
                if tile is not None:
                    self._draw_tile(arcade, tile, left, top, size)

    def _draw_pool(self, arcade) -> None:
        size = get_geometry(self.world).cell_size
        dragging: DragState | None = None
        for _, drag in self.world.get_component(DragState):
            dragging = drag
        for tile in get_pool(self.world):
            if dragging is not None and tile.id == dragging.tile_id:
                continue
            self._draw_tile(arcade, tile, tile.x, tile.y, size)
        if dragging is not None:
            tile = get_pool(self.world).get(dragging.tile_id)
            if tile is not None:
                left = dragging.pointer_x - dragging.offset_x
                top = dragging.pointer_y - dragging.offset_y
                self._draw_tile(arcade, tile, left, top, size)

    def _draw_control_bar(self, arcade) -> None:
        width = self.window.width
        arcade.draw_lbwh_rectangle_filled(0, self._flip(CONTROL_BAR_HEIGHT), width, CONTROL_BAR_HEIGHT, BAR_COLOR)
        summary = get_summary(self.world)
        catalogue = get_catalogue(self.world)
        grid = get_grid(self.world)
        dims = f"{grid.cols} x {grid.rows}" if grid is not None else "no grid"
        counts = "  ".join(
            f"{spec.name}: {summary.count_for(index)}" for index, spec in enumerate(catalogue.entries)
        )
        finish = "  [alt finish]" if summary.alternate_finish else ""
        line = f"{dims}   {counts}   total: {summary.total_price:g}{finish}"
        arcade.draw_text(line, 12, self._flip(CONTROL_BAR_HEIGHT / 2) - 8, TEXT_COLOR, 14)
        help_text = "arrows resize  C clear  R restart  F random fill  A alt finish"
        arcade.draw_text(help_text, 12, self._flip(CONTROL_BAR_HEIGHT) + 6, (170, 170, 170), 10)
