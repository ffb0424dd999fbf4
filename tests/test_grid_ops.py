import pytest

from mosaic.systems import grid_ops
from mosaic.systems.grid_ops import InvalidDimensions
from tests.helpers import make_tile


@pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2), (2, 2.5), ("2", 2), (True, 2)])
def test_create_rejects_bad_dimensions(rows, cols):
    with pytest.raises(InvalidDimensions):
        grid_ops.create_grid(rows, cols)


def test_create_builds_empty_grid():
    grid = grid_ops.create_grid(2, 3)
    assert grid.rows == 2 and grid.cols == 3
    assert all(cell is None for row in grid.cells for cell in row)
    assert len(grid.cells) == 2 and all(len(row) == 3 for row in grid.cells)


def test_try_place_on_empty_cell_commits_tile():
    grid = grid_ops.create_grid(2, 2)
    tile = make_tile("tile-1", type_index=2, rotation=90)
    assert grid_ops.try_place(grid, 1, 0, tile)
    placed = grid.cells[1][0]
    assert placed.id == "tile-1"
    assert placed.rotation == 90
    # Stored by value: later edits to the pool copy do not leak into the grid.
    tile.rotation = 180
    assert grid.cells[1][0].rotation == 90


def test_try_place_on_occupied_cell_never_mutates():
    grid = grid_ops.create_grid(2, 2)
    grid_ops.try_place(grid, 0, 0, make_tile("tile-1"))
    before = [list(row) for row in grid.cells]
    assert not grid_ops.try_place(grid, 0, 0, make_tile("tile-2"))
    assert grid.cells == before
    assert grid.cells[0][0].id == "tile-1"


def test_try_place_out_of_bounds_is_rejected():
    grid = grid_ops.create_grid(2, 2)
    assert not grid_ops.try_place(grid, 2, 0, make_tile("tile-1"))
    assert not grid_ops.try_place(grid, 0, -1, make_tile("tile-1"))
    assert grid_ops.first_empty_cell(grid) == (0, 0)


def test_clear_cell_returns_previous_and_is_idempotent():
    grid = grid_ops.create_grid(1, 2)
    grid_ops.try_place(grid, 0, 1, make_tile("tile-1"))
    assert grid_ops.clear_cell(grid, 0, 1).id == "tile-1"
    assert grid.cells[0][1] is None
    assert grid_ops.clear_cell(grid, 0, 1) is None
    assert grid_ops.clear_cell(grid, 5, 5) is None


def test_rotation_cycles_back_after_four_turns():
    grid = grid_ops.create_grid(1, 1)
    grid_ops.try_place(grid, 0, 0, make_tile("tile-1", rotation=270))
    seen = [grid_ops.rotate_cell(grid, 0, 0) for _ in range(4)]
    assert seen == [0, 90, 180, 270]
    assert grid.cells[0][0].rotation == 270


def test_rotating_empty_cell_is_noop():
    grid = grid_ops.create_grid(1, 1)
    for _ in range(4):
        assert grid_ops.rotate_cell(grid, 0, 0) is None
    assert grid.cells[0][0] is None


def test_resize_preserves_overlap():
    grid = grid_ops.create_grid(3, 3)
    grid_ops.try_place(grid, 1, 1, make_tile("tile-1"))
    grown = grid_ops.resize_preserving(grid, 5, 4)
    assert (grown.rows, grown.cols) == (5, 4)
    assert grown.cells[1][1].id == "tile-1"
    assert sum(1 for _ in grid_ops.occupied_cells(grown)) == 1
    shrunk = grid_ops.resize_preserving(grid, 2, 2)
    assert shrunk.cells[1][1].id == "tile-1"


def test_resize_shrinking_past_tile_discards_it_silently():
    grid = grid_ops.create_grid(3, 3)
    grid_ops.try_place(grid, 1, 1, make_tile("tile-1"))
    grid_ops.try_place(grid, 0, 2, make_tile("tile-2"))
    shrunk = grid_ops.resize_preserving(grid, 1, 3)
    assert grid_ops.find_tile(shrunk, "tile-1") is None
    assert grid_ops.find_tile(shrunk, "tile-2") == (0, 2)


def test_resize_rejects_bad_dimensions():
    grid = grid_ops.create_grid(2, 2)
    with pytest.raises(InvalidDimensions):
        grid_ops.resize_preserving(grid, 0, 2)


def test_first_empty_cell_scans_row_major():
    grid = grid_ops.create_grid(2, 2)
    grid_ops.try_place(grid, 0, 0, make_tile("a"))
    assert grid_ops.first_empty_cell(grid) == (0, 1)
    grid_ops.try_place(grid, 0, 1, make_tile("b"))
    assert grid_ops.first_empty_cell(grid) == (1, 0)
    grid_ops.try_place(grid, 1, 0, make_tile("c"))
    grid_ops.try_place(grid, 1, 1, make_tile("d"))
    assert grid_ops.first_empty_cell(grid) is None
    assert grid_ops.is_full(grid)


def test_clear_all_and_fill_empty():
    grid = grid_ops.create_grid(2, 2)
    grid_ops.try_place(grid, 1, 1, make_tile("keep"))
    counter = iter(range(10))
    filled = grid_ops.fill_empty(grid, lambda: make_tile(f"fill-{next(counter)}"))
    assert filled == [(0, 0), (0, 1), (1, 0)]
    assert grid.cells[1][1].id == "keep"
    assert grid_ops.is_full(grid)
    assert sorted(grid_ops.clear_all(grid)) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert grid_ops.first_empty_cell(grid) == (0, 0)
