import random
import threading

from esper import World

from mosaic.components.aggregate_summary import AggregateSummary
from mosaic.components.grid_geometry import GridGeometry
from mosaic.components.session_state import SessionMode, SessionState
from mosaic.components.tile_catalogue import TileCatalogue, TileCatalogueRegistry
from mosaic.components.tile_pool import TilePool
from mosaic.constants import (
    ALTERNATE_FINISH_SURCHARGE,
    CELL_SIZE,
    DEFAULT_VIEWPORT,
    INITIAL_POOL_SIZE,
)
from mosaic.events.bus import EventBus
from mosaic.factories.catalogue import default_catalogue
from mosaic.systems.pool_ops import scatter_layout, seed


def create_world(
    event_bus: EventBus,
    *,
    catalogue: TileCatalogue | None = None,
    rng: random.Random | None = None,
    pool_size: int = INITIAL_POOL_SIZE,
    viewport: tuple[int, int] = DEFAULT_VIEWPORT,
    surcharge: float = ALTERNATE_FINISH_SURCHARGE,
    seed_pool: bool = True,
) -> World:
    """Build the session context: catalogue, session state, geometry, and a seeded pool.

    The grid entity only appears once a start command succeeds.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    # Single writer for grid/pool mutations; re-entrant so a command may call helpers that lock too.
    setattr(world, "mutation_lock", threading.RLock())

    catalogue = catalogue or default_catalogue()
    world.create_entity(TileCatalogueRegistry(), catalogue)

    world.create_entity(
        SessionState(
            mode=SessionMode.IDLE,
            surcharge=surcharge,
            pool_size=pool_size,
            viewport=viewport,
        ),
        AggregateSummary(),
    )
    world.create_entity(GridGeometry(cell_size=CELL_SIZE))

    pool = TilePool()
    if seed_pool:
        pool = seed(len(catalogue), pool_size, scatter_layout(*viewport), world.random)
    world.create_entity(pool)
    return world
