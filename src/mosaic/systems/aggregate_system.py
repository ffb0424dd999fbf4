from __future__ import annotations

from typing import Dict, Mapping

from esper import World

from mosaic.components.aggregate_summary import AggregateSummary
from mosaic.components.grid import Grid
from mosaic.events.bus import (
    EventBus,
    EVENT_ALTERNATE_FINISH_CHANGED,
    EVENT_GRID_CHANGED,
    EVENT_SUMMARY_UPDATED,
)
from mosaic.utils.session import get_catalogue, get_grid, get_session_state, set_summary


def summarize(
    grid: Grid | None,
    price_table: Mapping[int, float],
    *,
    alternate_finish: bool = False,
    surcharge: float = 0,
) -> AggregateSummary:
    """Count occupied cells per tile type and price the composition.

    Types missing from price_table count toward the quantities but add nothing
    to the total.
    """
    counts: Dict[int, int] = {}
    occupied = 0
    if grid is not None:
        for row in grid.cells:
            for tile in row:
                if tile is None:
                    continue
                counts[tile.type_index] = counts.get(tile.type_index, 0) + 1
                occupied += 1
    total = sum(count * price_table.get(type_index, 0) for type_index, count in counts.items())
    if alternate_finish:
        total += surcharge * occupied
    return AggregateSummary(
        counts=counts,
        occupied=occupied,
        total_price=total,
        alternate_finish=alternate_finish,
    )


class AggregateSystem:
    """Keeps the session's AggregateSummary in step with the grid.

    Logic:
      - On EVENT_GRID_CHANGED or EVENT_ALTERNATE_FINISH_CHANGED: rescan the whole
        grid, store the fresh summary and emit EVENT_SUMMARY_UPDATED.
        The previous summary is never patched.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_GRID_CHANGED, self.on_grid_changed)
        self.event_bus.subscribe(EVENT_ALTERNATE_FINISH_CHANGED, self.on_grid_changed)
        self.recompute()

    def on_grid_changed(self, sender, **kwargs):
        self.recompute()

    def recompute(self) -> AggregateSummary:
        with getattr(self.world, "mutation_lock"):
            state = get_session_state(self.world)
            summary = summarize(
                get_grid(self.world),
                get_catalogue(self.world).price_table(),
                alternate_finish=state.alternate_finish,
                surcharge=state.surcharge,
            )
            set_summary(self.world, summary)
            self.event_bus.emit(EVENT_SUMMARY_UPDATED, summary=summary)
        return summary
