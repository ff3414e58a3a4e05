"""
Write path for price observations.

Normal updates run, in order:
1. Authorization (owner or authorized updater)
2. Circuit breaker must be active
3. Price must be positive and within max_deviation_bps of the previous price
4. Append to the accumulator

Emergency updates are owner-only and skip steps 2 and 3. Any failed step
raises before the accumulator is touched, so a rejected call changes nothing.
The caller is responsible for serializing calls into the pipeline.
"""

from __future__ import annotations

import logging

from .access_control import AccessController
from .accumulator import PriceAccumulator
from .circuit_breaker import CircuitBreaker
from .config import BPS_DENOMINATOR
from .exceptions import DeviationExceededError, UnauthorizedError
from .fixed_point import require_positive_int
from .store import Observation

logger = logging.getLogger(__name__)


def deviation_bps(price: int, reference: int) -> int:
    """Relative distance of price from reference in basis points, rounded down."""
    return abs(price - reference) * BPS_DENOMINATOR // reference


def exceeds_deviation(price: int, reference: int, max_deviation_bps: int) -> bool:
    """
    True if |price - reference| / reference > max_deviation_bps / 10000.

    Compared by cross-multiplication so the bound is exact; a move of exactly
    max_deviation_bps is allowed.
    """
    return abs(price - reference) * BPS_DENOMINATOR > max_deviation_bps * reference


class UpdatePipeline:
    def __init__(
        self,
        access: AccessController,
        breaker: CircuitBreaker,
        accumulator: PriceAccumulator,
        max_deviation_bps: int,
    ):
        self.access = access
        self.breaker = breaker
        self.accumulator = accumulator
        self.max_deviation_bps = max_deviation_bps

    def update_price(self, caller: str, price: int, now: int) -> Observation:
        """
        Commit a price through the bounded path.

        Raises:
            UnauthorizedError: caller may not publish prices
            PausedError: the circuit breaker is paused
            InvalidInputError: price is not a positive integer
            DeviationExceededError: price moved too far from the previous one
            NonMonotonicTimeError: now does not advance past the latest observation
        """
        if not self.access.is_authorized(caller):
            logger.warning(
                "Price update rejected: unauthorized caller",
                extra={"event": "oracle.update_unauthorized", "caller": str(caller)[:10]},
            )
            raise UnauthorizedError("Caller is not an authorized updater", details={"caller": caller})

        self.breaker.require_active()

        price = require_positive_int("price", price)
        snapshot = self.accumulator.snapshot()
        if snapshot:
            previous = snapshot.last.price
            if exceeds_deviation(price, previous, self.max_deviation_bps):
                moved = deviation_bps(price, previous)
                logger.warning(
                    "Price update rejected: deviation %d bps exceeds %d bps",
                    moved,
                    self.max_deviation_bps,
                    extra={
                        "event": "oracle.deviation_exceeded",
                        "previous_price": previous,
                        "price": price,
                    },
                )
                raise DeviationExceededError(
                    f"Price change of {moved} bps exceeds maximum {self.max_deviation_bps} bps",
                    deviation_bps=moved,
                    max_deviation_bps=self.max_deviation_bps,
                    details={"previous_price": previous, "price": price},
                )

        return self.accumulator.append(price, now)

    def emergency_update_price(self, caller: str, price: int, now: int) -> Observation:
        """
        Commit a price bypassing the pause and the deviation bound.

        Raises:
            NotOwnerError: caller is not the owner
            InvalidInputError: price is not a positive integer
            NonMonotonicTimeError: now does not advance past the latest observation
        """
        self.access.require_owner(caller)
        price = require_positive_int("price", price)

        observation = self.accumulator.append(price, now)
        logger.warning(
            "Emergency price update committed",
            extra={
                "event": "oracle.emergency_update",
                "price": price,
                "observed_at": observation.timestamp,
                "paused": self.breaker.paused,
            },
        )
        return observation
