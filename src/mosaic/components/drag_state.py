from dataclasses import dataclass


@dataclass(slots=True)
class DragState:
    """Transient component present while a floating tile is being dragged.

    offset_x/offset_y keep the grab point so the preview, and an off-grid drop, follow the pointer.
    moved stays False for a plain click, which must not count as a drop.
    """
    tile_id: str
    pointer_x: float
    pointer_y: float
    offset_x: float = 0.0
    offset_y: float = 0.0
    moved: bool = False
