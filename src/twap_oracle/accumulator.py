"""
Cumulative price accumulator.

Keeps the observation log and the running integral of the piecewise-constant
price function. Price p[i] is held from timestamp t[i] until t[i+1], so

    cumulative[i] = cumulative[i-1] + p[i-1] * (t[i] - t[i-1])

and the TWAP over [a, b] is (cumulative(b) - cumulative(a)) / (b - a).
All arithmetic is on integers; only the final TWAP division rounds, toward zero.
"""

from __future__ import annotations

import logging

from .exceptions import (
    EmptyHistoryError,
    InsufficientHistoryError,
    InvalidInputError,
    NonMonotonicTimeError,
)
from .fixed_point import require_int, require_positive_int
from .store import HistorySnapshot, InMemoryObservationStore, Observation, ObservationStore

logger = logging.getLogger(__name__)


def div_toward_zero(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (Python's // floors)."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class PriceAccumulator:
    def __init__(self, store: ObservationStore | None = None, max_window: int | None = None):
        if max_window is not None:
            require_positive_int("max_window", max_window)
        self.store: ObservationStore = store if store is not None else InMemoryObservationStore()
        self.max_window = max_window

    def __len__(self) -> int:
        return len(self.store)

    def snapshot(self) -> HistorySnapshot:
        return self.store.snapshot()

    def append(self, price: int, timestamp: int) -> Observation:
        """
        Record a new observation.

        Raises:
            InvalidInputError: price is not a positive integer or timestamp is malformed
            NonMonotonicTimeError: timestamp is not after the latest observation
        """
        price = require_positive_int("price", price)
        timestamp = require_int("timestamp", timestamp)
        if timestamp < 0:
            raise InvalidInputError(f"timestamp must be non-negative, got {timestamp}")

        last = self.store.snapshot().last
        if last is None:
            observation = Observation(
                timestamp=timestamp,
                price=price,
                cumulative_price=0,
                cumulative_time=0,
            )
        else:
            if timestamp <= last.timestamp:
                raise NonMonotonicTimeError(
                    f"Timestamp {timestamp} does not advance past latest observation {last.timestamp}",
                    timestamp=timestamp,
                    latest_timestamp=last.timestamp,
                )
            observation = Observation(
                timestamp=timestamp,
                price=price,
                cumulative_price=last.cumulative_price + last.price * (timestamp - last.timestamp),
                cumulative_time=timestamp - self.store.origin,
            )

        self.store.append(observation)
        self._evict(timestamp)
        logger.debug(
            "Recorded price %d at %d (retained %d)",
            price,
            timestamp,
            len(self.store),
        )
        return observation

    def _evict(self, now: int) -> None:
        """Drop observations no query window ending at or after ``now`` can reach."""
        if self.max_window is None:
            return
        snapshot = self.store.snapshot()
        # Keep the bracket for the oldest reachable cutoff as the margin entry
        bracket = snapshot.index_at_or_before(now - self.max_window)
        if bracket > 0:
            dropped = self.store.evict_before(bracket)
            logger.debug("Evicted %d observations older than %d", dropped, now - self.max_window)

    def latest(self, snapshot: HistorySnapshot | None = None) -> Observation:
        snapshot = snapshot if snapshot is not None else self.snapshot()
        last = snapshot.last
        if last is None:
            raise EmptyHistoryError()
        return last

    def cumulative_at(self, target_time: int, snapshot: HistorySnapshot | None = None) -> int:
        """
        Cumulative price at an arbitrary instant.

        Between observations (and past the latest one) the bracketing price is
        held constant. Instants before the oldest retained observation cannot
        be answered.
        """
        target_time = require_int("target_time", target_time)
        snapshot = snapshot if snapshot is not None else self.snapshot()

        index = snapshot.index_at_or_before(target_time)
        if index < 0:
            first = snapshot.first
            raise InsufficientHistoryError(
                f"No observation at or before {target_time}",
                requested=target_time,
                earliest=first.timestamp if first else None,
            )
        bracket = snapshot[index]
        return bracket.cumulative_price + bracket.price * (target_time - bracket.timestamp)

    def twap(self, window: int, snapshot: HistorySnapshot | None = None) -> int:
        """
        Time-weighted average price over the ``window`` seconds ending at the
        latest observation, truncated toward zero.

        Raises:
            InvalidInputError: window is not a positive integer or exceeds max_window
            EmptyHistoryError: no observations yet
            InsufficientHistoryError: window reaches before retained history
        """
        window = require_positive_int("window", window)
        if self.max_window is not None and window > self.max_window:
            raise InvalidInputError(
                f"Window {window}s exceeds maximum supported window {self.max_window}s",
                details={"window": window, "max_window": self.max_window},
            )

        snapshot = snapshot if snapshot is not None else self.snapshot()
        now = self.latest(snapshot).timestamp
        cutoff = now - window
        first = snapshot.first
        if cutoff < first.timestamp:
            raise InsufficientHistoryError(
                f"Window {window}s starts at {cutoff}, before earliest observation {first.timestamp}",
                requested=cutoff,
                earliest=first.timestamp,
            )

        elapsed_integral = self.cumulative_at(now, snapshot) - self.cumulative_at(cutoff, snapshot)
        return div_toward_zero(elapsed_integral, window)
