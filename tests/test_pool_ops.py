import random

import pytest

from mosaic.components.tile_pool import TilePool
from mosaic.constants import ROTATIONS
from mosaic.systems import pool_ops
from mosaic.systems.pool_ops import InvalidCatalogue
from tests.helpers import ScriptedRandom


def _fixed_layout(index, rng):
    return (index * 10.0, index * 20.0)


def test_seed_uses_random_source_for_type_and_rotation():
    rng = ScriptedRandom(types=[2, 0, 1], rotations=[90, 0, 270])
    pool = pool_ops.seed(3, 3, _fixed_layout, rng)
    tiles = list(pool)
    assert [t.id for t in tiles] == ["tile-0", "tile-1", "tile-2"]
    assert [t.type_index for t in tiles] == [2, 0, 1]
    assert [t.rotation for t in tiles] == [90, 0, 270]
    assert [t.position for t in tiles] == [(0.0, 0.0), (10.0, 20.0), (20.0, 40.0)]


def test_seed_rejects_empty_catalogue():
    with pytest.raises(InvalidCatalogue):
        pool_ops.seed(0, 5, _fixed_layout, random.Random(1))


def test_seed_values_stay_in_range():
    pool = pool_ops.seed(4, 50, _fixed_layout, random.Random(3))
    assert len(pool) == 50
    assert len({t.id for t in pool}) == 50
    assert all(0 <= t.type_index < 4 for t in pool)
    assert all(t.rotation in ROTATIONS for t in pool)


def test_seed_continues_from_first_serial():
    pool = pool_ops.seed(2, 2, _fixed_layout, random.Random(1), first_serial=40)
    assert [t.id for t in pool] == ["tile-40", "tile-41"]
    assert pool.next_serial == 42


def test_remove_by_id_is_noop_when_absent():
    pool = pool_ops.seed(2, 2, _fixed_layout, random.Random(1))
    removed = pool_ops.remove_by_id(pool, "tile-0")
    assert removed is not None and removed.id == "tile-0"
    assert "tile-0" not in pool
    assert pool_ops.remove_by_id(pool, "tile-0") is None
    assert len(pool) == 1


def test_spawn_replacement_mints_fresh_id_at_position():
    pool = pool_ops.seed(2, 2, _fixed_layout, random.Random(1))
    rng = ScriptedRandom(types=[1], rotations=[180])
    tile = pool_ops.spawn_replacement(pool, (33.0, 44.0), 2, rng)
    assert tile.id == "tile-2"
    assert tile.position == (33.0, 44.0)
    assert (tile.type_index, tile.rotation) == (1, 180)
    assert pool.get("tile-2") is tile


def test_reposition_updates_floating_position():
    pool = pool_ops.seed(2, 1, _fixed_layout, random.Random(1))
    assert pool_ops.reposition(pool, "tile-0", (500, 600))
    assert pool.get("tile-0").position == (500.0, 600.0)
    assert not pool_ops.reposition(pool, "missing", (1, 1))


def test_rotate_tile_advances_floating_rotation():
    pool = TilePool()
    rng = ScriptedRandom(types=[0], rotations=[270])
    pool_ops.spawn_replacement(pool, (0, 0), 1, rng)
    assert pool_ops.rotate_tile(pool, "tile-0") == 0
    assert pool_ops.rotate_tile(pool, "nope") is None


def test_scatter_layout_respects_margin():
    layout = pool_ops.scatter_layout(800, 600, margin=100)
    rng = ScriptedRandom(floats=[0.5, 0.25, 0.999, 0.0])
    assert layout(0, rng) == (350.0, 125.0)
    x, y = layout(1, rng)
    assert x < 700 and y == 0.0


def test_lattice_layout_is_centred():
    layout = pool_ops.lattice_layout((400, 100), 60, 3)
    rng = random.Random(0)
    assert [layout(i, rng) for i in range(4)] == [
        (340.0, 100), (400.0, 100), (460.0, 100), (340.0, 160),
    ]
