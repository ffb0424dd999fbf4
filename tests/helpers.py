from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

from esper import World

from mosaic.components.tile import Tile
from mosaic.events.bus import EventBus
from mosaic.systems.aggregate_system import AggregateSystem
from mosaic.systems.placement_system import PlacementSystem
from mosaic.systems.session_system import SessionSystem
from mosaic.utils.session import get_geometry
from mosaic.world import create_world


class ScriptedRandom(random.Random):
    """Random source that replays scripted draws before falling back to a seeded generator.

    types feed randrange, rotations feed choice, floats feed random.
    """

    def __init__(self, types: Iterable[int] = (), rotations: Iterable[int] = (), floats: Iterable[float] = (), seed: int = 0):
        super().__init__(seed)
        self._types = list(types)
        self._rotations = list(rotations)
        self._floats = list(floats)

    def randrange(self, start, stop=None, step=1):
        if self._types:
            return self._types.pop(0)
        return super().randrange(start, stop, step)

    def choice(self, seq: Sequence):
        if self._rotations:
            value = self._rotations.pop(0)
            assert value in seq
            return value
        return super().choice(seq)

    def random(self) -> float:
        if self._floats:
            return self._floats.pop(0)
        return super().random()


class ManualClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@dataclass
class Session:
    world: World
    bus: EventBus
    session: SessionSystem
    placement: PlacementSystem
    aggregate: AggregateSystem


def build_session(*, rng: random.Random | None = None, pool_size: int = 5, origin=(0.0, 0.0), cell_size: float = 50, **kwargs) -> Session:
    """World plus the core systems, with the grid drawn at origin using cell_size pixels per cell."""
    bus = EventBus()
    world = create_world(bus, rng=rng or random.Random(7), pool_size=pool_size, **kwargs)
    geometry = get_geometry(world)
    geometry.origin_x, geometry.origin_y = origin
    geometry.cell_size = cell_size
    return Session(
        world=world,
        bus=bus,
        session=SessionSystem(world, bus),
        placement=PlacementSystem(world, bus),
        aggregate=AggregateSystem(world, bus),
    )


def make_tile(tile_id: str, type_index: int = 0, rotation: int = 0, x: float = 0.0, y: float = 0.0) -> Tile:
    return Tile(id=tile_id, type_index=type_index, rotation=rotation, x=x, y=y)
