from dataclasses import dataclass, field
from typing import List, Tuple

# left, top, width, height in core coordinates
Rect = Tuple[float, float, float, float]


@dataclass(slots=True)
class GridGeometry:
    """On-screen placement of the grid, kept current by the presentation layer.

    reserved_zones: rectangles where a dropped tile snaps back instead of
    being repositioned (control bar, summary panel).
    """
    origin_x: float = 0.0
    origin_y: float = 0.0
    cell_size: float = 50
    reserved_zones: List[Rect] = field(default_factory=list)
