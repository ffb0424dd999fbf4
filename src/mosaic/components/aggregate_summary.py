from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True, slots=True)
class AggregateSummary:
    """Derived per-type counts and price for the current grid; never stored as truth."""
    counts: Dict[int, int] = field(default_factory=dict)
    occupied: int = 0
    total_price: float = 0
    alternate_finish: bool = False

    def count_for(self, type_index: int) -> int:
        return self.counts.get(type_index, 0)
