import dataclasses

import pytest

from mosaic.components.session_state import SessionMode
from mosaic.utils.snapshot import build_snapshot
from mosaic.utils.session import get_pool, get_summary
from tests.helpers import build_session


def test_snapshot_before_start():
    s = build_session(pool_size=3)
    snapshot = build_snapshot(s.world)
    assert snapshot.mode is SessionMode.IDLE
    assert (snapshot.rows, snapshot.cols) == (0, 0)
    assert snapshot.grid == ()
    assert len(snapshot.pool) == 3


def test_snapshot_reflects_placements_and_is_detached():
    s = build_session(pool_size=2)
    s.session.start_or_resize(2, 1)
    tile_id = list(get_pool(s.world))[0].id
    s.placement.place_first_empty(tile_id)

    snapshot = build_snapshot(s.world)

    assert snapshot.mode is SessionMode.COMPOSING
    assert snapshot.cell(0, 0).id == tile_id
    assert snapshot.cell(0, 1) is None
    assert snapshot.grid_tile_ids() == (tile_id,)
    assert tile_id not in snapshot.pool_tile_ids()
    assert snapshot.summary.occupied == 1

    s.placement.rotate_grid_tile(0, 0)
    s.placement.remove_from_grid(0, 0)
    assert snapshot.cell(0, 0).id == tile_id
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.cell(0, 0).rotation = 0


def test_grid_and_pool_ids_never_overlap():
    s = build_session(pool_size=4)
    s.session.start_or_resize(3, 3)
    for tile in list(get_pool(s.world))[:3]:
        s.placement.place_first_empty(tile.id)
    s.session.random_fill()
    snapshot = build_snapshot(s.world)
    assert set(snapshot.grid_tile_ids()).isdisjoint(snapshot.pool_tile_ids())
    assert len(snapshot.grid_tile_ids()) == 9


def test_snapshot_summary_counts_are_detached_from_live_summary():
    s = build_session(pool_size=1)
    s.session.start_or_resize(1, 1)
    s.placement.place_first_empty(list(get_pool(s.world))[0].id)
    live = get_summary(s.world)

    snapshot = build_snapshot(s.world)

    assert snapshot.summary.counts == live.counts
    with pytest.raises(TypeError):
        snapshot.summary.counts[99] = 1000
    assert 99 not in get_summary(s.world).counts
    assert snapshot.summary.total_price == live.total_price
