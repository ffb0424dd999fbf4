from __future__ import annotations

from esper import World

from mosaic.components.aggregate_summary import AggregateSummary
from mosaic.components.grid import Grid
from mosaic.components.grid_geometry import GridGeometry
from mosaic.components.session_state import SessionState
from mosaic.components.tile_catalogue import TileCatalogue, TileCatalogueRegistry
from mosaic.components.tile_pool import TilePool


def get_catalogue(world: World) -> TileCatalogue:
    for entity, _ in world.get_component(TileCatalogueRegistry):
        return world.component_for_entity(entity, TileCatalogue)
    raise RuntimeError("TileCatalogue definitions not found")


def get_session_entity(world: World) -> int:
    for entity, _ in world.get_component(SessionState):
        return entity
    raise RuntimeError("SessionState not found")


def get_session_state(world: World) -> SessionState:
    return world.component_for_entity(get_session_entity(world), SessionState)


def get_geometry(world: World) -> GridGeometry:
    for _, geometry in world.get_component(GridGeometry):
        return geometry
    raise RuntimeError("GridGeometry not found")


def get_pool(world: World) -> TilePool:
    for _, pool in world.get_component(TilePool):
        return pool
    raise RuntimeError("TilePool not found")


def get_pool_entity(world: World) -> int:
    for entity, _ in world.get_component(TilePool):
        return entity
    raise RuntimeError("TilePool not found")


def get_grid_entity(world: World) -> int | None:
    for entity, _ in world.get_component(Grid):
        return entity
    return None


def get_grid(world: World) -> Grid | None:
    for _, grid in world.get_component(Grid):
        return grid
    return None


def set_grid(world: World, grid: Grid | None) -> None:
    """Install grid as the session grid, replacing (or with None, discarding) the current one."""
    entity = get_grid_entity(world)
    if entity is not None:
        if grid is None:
            world.delete_entity(entity, immediate=True)
            return
        world.add_component(entity, grid)
        return
    if grid is not None:
        world.create_entity(grid)


def set_pool(world: World, pool: TilePool) -> None:
    world.add_component(get_pool_entity(world), pool)


def get_summary(world: World) -> AggregateSummary:
    for _, summary in world.get_component(AggregateSummary):
        return summary
    return AggregateSummary()


def set_summary(world: World, summary: AggregateSummary) -> None:
    world.add_component(get_session_entity(world), summary)
