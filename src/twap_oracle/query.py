"""
Read-side queries over the accumulator.

Each query takes one snapshot up front and answers entirely from it, so a
concurrent append can never mix two states into one answer. Queries take no
lock and are unaffected by the circuit breaker.
"""

from __future__ import annotations

from .accumulator import PriceAccumulator
from .config import OracleConfig
from .exceptions import InvalidInputError
from .store import Observation


class QueryEngine:
    def __init__(self, accumulator: PriceAccumulator, config: OracleConfig):
        self.accumulator = accumulator
        self.config = config

    def latest_price(self) -> int:
        return self.accumulator.latest().price

    def latest_price_point(self) -> Observation:
        return self.accumulator.latest()

    def twap(self, window: int) -> int:
        return self.accumulator.twap(window, self.accumulator.snapshot())

    def default_twap(self) -> int:
        return self.twap(self.config.default_window)

    def cumulative_at(self, target_time: int) -> int:
        return self.accumulator.cumulative_at(target_time, self.accumulator.snapshot())

    def observation_count(self) -> int:
        return len(self.accumulator.snapshot())

    def observations(self, limit: int | None = None) -> list[Observation]:
        """Retained observations, oldest first; ``limit`` keeps the newest N."""
        history = self.accumulator.snapshot().observations()
        if limit is not None:
            if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
                raise InvalidInputError("limit must be a non-negative integer or None.")
            history = history[max(0, len(history) - limit):] if limit else ()
        return list(history)
