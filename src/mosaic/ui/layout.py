from __future__ import annotations

import math
from typing import NamedTuple, Sequence, Tuple

from mosaic.constants import (
    CELL_SIZE,
    CONTROL_BAR_HEIGHT,
    GRID_TOP_MARGIN,
    MIN_CELL_SIZE,
)

Rect = Tuple[float, float, float, float]


class CellAddress(NamedTuple):
    row: int
    col: int


class _Outside:
    """Sentinel returned when a pointer does not resolve to a grid cell."""

    _instance: "_Outside | None" = None

    def __new__(cls) -> "_Outside":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OUTSIDE"

    def __bool__(self) -> bool:
        return False


OUTSIDE = _Outside()


def map_to_cell(
    pointer_x: float,
    pointer_y: float,
    origin: Tuple[float, float],
    cell_size: float,
    rows: int,
    cols: int,
) -> CellAddress | _Outside:
    """Resolve a pointer position to the grid cell beneath it.

    ``origin`` is the grid's top-left corner in the same coordinate space as the
    pointer (y grows downward). Any position that falls off the grid, or input
    that cannot describe a position at all, resolves to OUTSIDE.
    """
    try:
        px = float(pointer_x)
        py = float(pointer_y)
        ox = float(origin[0])
        oy = float(origin[1])
        size = float(cell_size)
    except (TypeError, ValueError, IndexError):
        return OUTSIDE
    if not all(math.isfinite(v) for v in (px, py, ox, oy, size)):
        return OUTSIDE
    if size <= 0 or rows <= 0 or cols <= 0:
        return OUTSIDE
    col = math.floor((px - ox) / size)
    row = math.floor((py - oy) / size)
    if row < 0 or row >= rows or col < 0 or col >= cols:
        return OUTSIDE
    return CellAddress(row, col)


def cell_origin(row: int, col: int, origin: Tuple[float, float], cell_size: float) -> Tuple[float, float]:
    """Top-left corner of a cell; inverse of map_to_cell for in-bounds cells."""
    return origin[0] + col * cell_size, origin[1] + row * cell_size


def compute_grid_geometry(window_width: int, window_height: int, rows: int, cols: int):
    """Return (cell_size, origin_x, origin_y) for a grid drawn below the control bar.

    The grid is centred horizontally. Cells start at CELL_SIZE and shrink (down to
    MIN_CELL_SIZE) until the grid fits the space left under the control bar.
    """
    top = CONTROL_BAR_HEIGHT + GRID_TOP_MARGIN
    cell_size = CELL_SIZE
    if rows > 0 and cols > 0:
        avail_w = window_width - 2 * GRID_TOP_MARGIN
        avail_h = window_height - top - GRID_TOP_MARGIN
        fit = int(min(avail_w / cols, avail_h / rows))
        cell_size = max(MIN_CELL_SIZE, min(CELL_SIZE, fit))
    total_width = max(cols, 0) * cell_size
    origin_x = (window_width - total_width) / 2
    return cell_size, origin_x, float(top)


def control_bar_zone(window_width: int) -> Rect:
    return (0.0, 0.0, float(window_width), float(CONTROL_BAR_HEIGHT))


def point_in_rect(x: float, y: float, rect: Rect) -> bool:
    left, top, width, height = rect
    return left <= x <= left + width and top <= y <= top + height


def zone_at_point(x: float, y: float, zones: Sequence[Rect]) -> Rect | None:
    for zone in zones:
        if point_in_rect(x, y, zone):
            return zone
    return None
