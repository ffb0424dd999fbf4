from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from mosaic.components.tile import Tile


@dataclass(slots=True)
class TilePool:
    """Floating tiles awaiting placement, keyed by id.

    next_serial feeds fresh ids so a replacement never reuses an id that
    already lives in the pool or the grid.
    """
    tiles: Dict[str, Tile] = field(default_factory=dict)
    next_serial: int = 0

    def mint_id(self) -> str:
        tile_id = f"tile-{self.next_serial}"
        self.next_serial += 1
        return tile_id

    def add(self, tile: Tile) -> None:
        self.tiles[tile.id] = tile

    def get(self, tile_id: str) -> Optional[Tile]:
        return self.tiles.get(tile_id)

    def pop(self, tile_id: str) -> Optional[Tile]:
        return self.tiles.pop(tile_id, None)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self.tiles

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(list(self.tiles.values()))
