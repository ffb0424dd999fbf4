from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Tuple

from mosaic.components.grid import Grid
from mosaic.components.tile import Tile

Position = Tuple[int, int]


class InvalidDimensions(ValueError):
    """Raised when a grid is requested with a non-positive or non-integer size."""

    def __init__(self, rows, cols):
        super().__init__(f"Grid dimensions must be positive integers, got {rows!r} x {cols!r}")
        self.rows = rows
        self.cols = cols


def _validate_dimensions(rows, cols) -> None:
    for value in (rows, cols):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidDimensions(rows, cols)


def create_grid(rows: int, cols: int) -> Grid:
    _validate_dimensions(rows, cols)
    return Grid(rows=rows, cols=cols)


def try_place(grid: Grid, row: int, col: int, tile: Tile) -> bool:
    """Commit a detached copy of tile to (row, col) iff the cell is empty.

    There is no overwrite mode: an occupied or out-of-bounds target leaves the
    grid untouched and returns False.
    """
    if not grid.in_bounds(row, col):
        return False
    if grid.cells[row][col] is not None:
        return False
    grid.cells[row][col] = replace(tile)
    return True


def clear_cell(grid: Grid, row: int, col: int) -> Optional[Tile]:
    """Empty a cell and return whatever it held (None if it was already empty)."""
    if not grid.in_bounds(row, col):
        return None
    previous = grid.cells[row][col]
    grid.cells[row][col] = None
    return previous


def rotate_cell(grid: Grid, row: int, col: int) -> Optional[int]:
    """Advance the rotation of an occupied cell by 90 degrees; returns the new angle."""
    tile = grid.get(row, col)
    if tile is None:
        return None
    return tile.rotate()


def resize_preserving(grid: Grid, new_rows: int, new_cols: int) -> Grid:
    """Build a grid of the new size, carrying over the overlapping region.

    Content outside the overlap is dropped without complaint when shrinking.
    """
    _validate_dimensions(new_rows, new_cols)
    resized = Grid(rows=new_rows, cols=new_cols)
    for r in range(min(grid.rows, new_rows)):
        for c in range(min(grid.cols, new_cols)):
            resized.cells[r][c] = grid.cells[r][c]
    return resized


def first_empty_cell(grid: Grid) -> Optional[Position]:
    for r in range(grid.rows):
        for c in range(grid.cols):
            if grid.cells[r][c] is None:
                return (r, c)
    return None


def is_full(grid: Grid) -> bool:
    return first_empty_cell(grid) is None


def occupied_cells(grid: Grid) -> Iterator[Tuple[int, int, Tile]]:
    for r, row in enumerate(grid.cells):
        for c, tile in enumerate(row):
            if tile is not None:
                yield r, c, tile


def find_tile(grid: Grid, tile_id: str) -> Optional[Position]:
    for r, c, tile in occupied_cells(grid):
        if tile.id == tile_id:
            return (r, c)
    return None


def clear_all(grid: Grid) -> List[Position]:
    cleared: List[Position] = []
    for r, c, _ in list(occupied_cells(grid)):
        grid.cells[r][c] = None
        cleared.append((r, c))
    return cleared


def fill_empty(grid: Grid, tile_factory: Callable[[], Tile]) -> List[Position]:
    """Fill every empty cell with a tile from tile_factory, row-major."""
    filled: List[Position] = []
    for r in range(grid.rows):
        for c in range(grid.cols):
            if grid.cells[r][c] is None:
                grid.cells[r][c] = tile_factory()
                filled.append((r, c))
    return filled
