from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class TileSpec:
    name: str
    image: str
    unit_price: float
    color: Tuple[int, int, int] = (160, 160, 160)


@dataclass(slots=True)
class TileCatalogueRegistry:
    """Empty tag component marking the single entity that stores the tile catalogue.

    The same entity also carries a TileCatalogue component with the ordered entries.
    """
    pass


@dataclass(slots=True)
class TileCatalogue:
    """Ordered tile type definitions; a tile's type_index points into entries."""
    entries: List[TileSpec] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def spec_for(self, type_index: int) -> TileSpec:
        return self.entries[type_index]

    def price_table(self) -> Dict[int, float]:
        return {index: spec.unit_price for index, spec in enumerate(self.entries)}

    def color_for(self, type_index: int) -> Tuple[int, int, int]:
        if 0 <= type_index < len(self.entries):
            return self.entries[type_index].color
        return (255, 0, 255)
