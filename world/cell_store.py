"""
GridCache — world/cell_store.py
Cell Store: generated-vs-overridden cell values over an infinite grid.
=====================================================================
Version:     0.1
Stack:       Python 3.11+
Status:      Canonical.

Architecture notes
------------------
- Only mutated cells have a CellRecord. Every other cell's value is
  recomputed from world.luck on demand and never cached, so memory is
  proportional to player activity, not to the grid.
- A record, once written, is authoritative until clear(). The generated
  value for that coordinate is never consulted again.
- Spawn eligibility is re-evaluated on every call (never cached) and uses
  the unsalted spawn_seed. Value selection uses the salted value_seed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

from world.coords import CellCoord
from world.luck import luck, spawn_seed, value_seed

DEFAULT_PALETTE: Tuple[int, ...] = (0, 2, 4, 8)
DEFAULT_SPAWN_PROBABILITY: float = 0.2


@dataclass
class CellRecord:
    value: int
    overridden: bool = True


@dataclass
class CellStore:
    palette: Tuple[int, ...] = DEFAULT_PALETTE
    spawn_probability: float = DEFAULT_SPAWN_PROBABILITY
    _records: Dict[CellCoord, CellRecord] = field(default_factory=dict, repr=False)

    def generated_value(self, x: int, y: int) -> int:
        """The procedural baseline for (x, y), ignoring any override."""
        index = math.floor(luck(value_seed(x, y)) * len(self.palette))
        return self.palette[index]

    def get_value(self, x: int, y: int) -> int:
        record = self._records.get(CellCoord(x, y))
        if record is not None:
            return record.value
        return self.generated_value(x, y)

    def set_override(self, x: int, y: int, value: int, overridden: bool = True) -> None:
        """Creates or replaces the record for (x, y). Persisting is the caller's job."""
        self._records[CellCoord(x, y)] = CellRecord(value=value, overridden=overridden)

    def has_override(self, x: int, y: int) -> bool:
        return CellCoord(x, y) in self._records

    def is_spawn_eligible(self, x: int, y: int) -> bool:
        if CellCoord(x, y) in self._records:
            return True
        return luck(spawn_seed(x, y)) < self.spawn_probability

    def records(self) -> Iterator[Tuple[CellCoord, CellRecord]]:
        """Override records in insertion order."""
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()


def is_in_range(cell: CellCoord, player: CellCoord, radius: int) -> bool:
    """True iff both axis distances from the player's cell are within radius."""
    return abs(cell.x - player.x) <= radius and abs(cell.y - player.y) <= radius
