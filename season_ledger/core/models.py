"""Data models for the season results ledger."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import NamedTuple


class MenuAction(IntEnum):
    """The fixed set of menu actions, numbered as shown to the user."""
    WINNERS = 1
    SEASON = 2
    TOTAL_WINS = 3
    AVERAGE_POINTS = 4
    POINTS_ASCENDING = 5
    DRIVER_POINTS = 6
    QUIT = 7


class Entry(NamedTuple):
    """One driver's result within one season."""
    name: str
    points: Decimal
    wins: int


@dataclass(frozen=True)
class SeasonRecord:
    season: int
    entries: tuple = ()       # tuple[Entry, ...], file order


@dataclass(frozen=True)
class Ledger:
    """Parsed season -> entries structure. Read-only after construction.

    Records keep the order in which seasons first appear in the ledger file;
    that order is the tie-break used by the aggregations.
    """
    records: tuple = ()       # tuple[SeasonRecord, ...]
    _index: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {}
        for record in self.records:
            if record.season in index:
                raise ValueError(f"Duplicate season key: {record.season}")
            index[record.season] = record
        object.__setattr__(self, '_index', index)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, season) -> bool:
        return season in self._index

    def seasons(self) -> tuple:
        """Season keys, ascending."""
        return tuple(sorted(self._index))

    def entries(self, season: int) -> tuple:
        """Entries for a known season. Raises KeyError for unknown seasons."""
        return self._index[season].entries

    def all_driver_names(self) -> tuple:
        """Distinct driver names (case-sensitive) in first-seen order."""
        seen = {}
        for record in self.records:
            for entry in record.entries:
                seen.setdefault(entry.name, None)
        return tuple(seen)


@dataclass(frozen=True)
class NamePolicy:
    """How user-typed driver names are matched against the ledger."""
    accept_any_case: bool = True   # False: token must already be in canonical form
    two_part_only: bool = False    # True: only "First Last" is accepted


@dataclass
class LedgerConfig:
    """Runtime configuration for one ledger session."""
    data_path: str
    rounding: str = 'half_up'      # "half_up", "ceiling" or "half_even"
    digits: int = 2                # fractional digits for average points
    name_policy: NamePolicy = field(default_factory=NamePolicy)
