from dataclasses import dataclass, field
from typing import List, Optional

from mosaic.components.tile import Tile


@dataclass(slots=True)
class Grid:
    """Occupancy matrix for the composition.

    cells[row][col] holds a detached Tile copy or None for an empty cell.
    Dimensions only change through grid_ops.resize_preserving.
    """
    rows: int
    cols: int
    cells: List[List[Optional[Tile]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        if not isinstance(row, int) or not isinstance(col, int):
            return False
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Optional[Tile]:
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]
