from dataclasses import dataclass

from mosaic.constants import ROTATION_STEP


@dataclass(slots=True)
class Tile:
    """A placeable unit.

    id: stable identifier for the tile's lifetime (``tile-<serial>``).
    type_index: index into the TileCatalogue; drives image and unit price.
    rotation: degrees, one of 0/90/180/270.
    x, y: floating top-left position; only meaningful while the tile sits in the pool.
    """
    id: str
    type_index: int
    rotation: int = 0
    x: float = 0.0
    y: float = 0.0

    def rotate(self) -> int:
        self.rotation = (self.rotation + ROTATION_STEP) % 360
        return self.rotation

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)
