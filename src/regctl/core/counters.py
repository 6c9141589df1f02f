"""Per-(classification, year) sequence counters.

Counters hold the last-issued number.  An unknown key reads as 0 and is
not materialized until its first allocation.

INVARIANT: A counter only ever moves up by exactly 1 per allocation.
Voiding or purging letters never touches it; only :meth:`reset` clears it.
"""

from __future__ import annotations

from collections.abc import Mapping

from regctl.domain.numbering import counter_key
from regctl.domain.types import Classification


class CounterStore:
    """In-memory counter table.

    Not thread-safe on its own: the registration service serializes
    :meth:`allocate_next` under its lock.
    """

    def __init__(self, counters: Mapping[str, int] | None = None) -> None:
        self._counters: dict[str, int] = dict(counters or {})

    def current(self, classification: Classification, year: int) -> int:
        """Last-issued number for the key (0 if none issued yet)."""
        return self._counters.get(counter_key(classification, year), 0)

    def peek_next(self, classification: Classification, year: int) -> int:
        """Number the next allocation would return.  Not reserved."""
        return self.current(classification, year) + 1

    def allocate_next(self, classification: Classification, year: int) -> int:
        """Claim the next number for the key and record it as last-issued.

        Read, increment and write happen with no yield point in between.
        """
        key = counter_key(classification, year)
        next_value = self._counters.get(key, 0) + 1
        self._counters[key] = next_value
        return next_value

    def reset(self) -> None:
        """Forget every counter.  Irreversible."""
        self._counters.clear()

    def as_dict(self) -> dict[str, int]:
        """Copy of the raw ``{"<CLASSIFICATION>:<year>": last}`` mapping."""
        return dict(self._counters)

    def __len__(self) -> int:
        return len(self._counters)
