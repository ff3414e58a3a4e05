"""
Append-only observation storage.

The accumulator owns no storage of its own; it is handed an
``ObservationStore``. Stores only ever append new observations or drop a
prefix of old ones, and readers work on ``HistorySnapshot`` views that later
writes cannot disturb.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class Observation:
    """A single accepted price, with the running price-time integral up to it."""

    timestamp: int
    price: int
    cumulative_price: int
    cumulative_time: int

    def to_dict(self) -> dict[str, int]:
        return {
            "timestamp": self.timestamp,
            "price": self.price,
            "cumulative_price": self.cumulative_price,
            "cumulative_time": self.cumulative_time,
        }


@dataclass(frozen=True)
class HistorySnapshot:
    """
    Point-in-time view over a store's observations.

    Holds a reference to the backing list plus the length seen when the
    snapshot was taken. Stores never rewrite or truncate a list in place, so
    entries below ``count`` stay valid however many appends follow.
    """

    items: Sequence[Observation]
    count: int
    origin: int | None = None

    def __len__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return self.count > 0

    def __getitem__(self, index: int) -> Observation:
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            raise IndexError("snapshot index out of range")
        return self.items[index]

    @property
    def first(self) -> Observation | None:
        return self.items[0] if self.count else None

    @property
    def last(self) -> Observation | None:
        return self.items[self.count - 1] if self.count else None

    def index_at_or_before(self, timestamp: int) -> int:
        """Index of the last observation at or before ``timestamp``; -1 if none."""
        return bisect_right(self.items, timestamp, hi=self.count, key=lambda o: o.timestamp) - 1

    def observations(self) -> tuple[Observation, ...]:
        return tuple(self.items[: self.count])


class ObservationStore(Protocol):
    """Interface an observation backend must implement."""

    @property
    def origin(self) -> int | None:
        """Timestamp of the first observation ever appended."""
        ...

    def append(self, observation: Observation) -> None:
        """Add an observation after the current last one."""
        ...

    def evict_before(self, count: int) -> int:
        """Drop the ``count`` oldest observations; return how many were dropped."""
        ...

    def snapshot(self) -> HistorySnapshot:
        """Return a consistent read view of the retained observations."""
        ...

    def __len__(self) -> int:
        ...


class InMemoryObservationStore:
    """List-backed store; eviction replaces the list instead of mutating it."""

    def __init__(self) -> None:
        self._items: list[Observation] = []
        self._origin: int | None = None

    @property
    def origin(self) -> int | None:
        return self._origin

    def append(self, observation: Observation) -> None:
        if self._origin is None:
            self._origin = observation.timestamp
        self._items.append(observation)

    def evict_before(self, count: int) -> int:
        if count <= 0:
            return 0
        count = min(count, len(self._items))
        # Swap in a new list; open snapshots keep the old one
        self._items = self._items[count:]
        return count

    def snapshot(self) -> HistorySnapshot:
        items = self._items
        return HistorySnapshot(items=items, count=len(items), origin=self._origin)

    def __len__(self) -> int:
        return len(self._items)
