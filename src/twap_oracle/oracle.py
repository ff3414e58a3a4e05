"""
TWAP price oracle.

Wires access control, the circuit breaker, the update pipeline and the query
engine around one accumulator and exposes the public oracle operations.

Example usage:
    oracle = TWAPOracle(owner="0xowner", config=OracleConfig(default_window=1800))
    oracle.add_authorized_updater("0xowner", "0xfeeder")
    oracle.update_price("0xfeeder", oracle.to_base_units("1.0"), now=1_700_000_000)
    oracle.get_latest_price()

Writers (updates and admin calls) are serialized on a single lock covering
access, breaker and history state. Readers take no lock and answer from an
immutable snapshot of the history.
"""

from __future__ import annotations

import logging
import threading
import time
from decimal import Decimal
from typing import Any, Callable, Dict

from . import events
from .access_control import AccessController
from .accumulator import PriceAccumulator
from .circuit_breaker import CircuitBreaker
from .config import OracleConfig
from .events import EventLog
from .exceptions import OracleError
from .fixed_point import format_price, from_base_units, to_base_units
from .metrics import OracleMetrics
from .pipeline import UpdatePipeline
from .query import QueryEngine
from .store import Observation, ObservationStore

logger = logging.getLogger(__name__)


def _system_clock() -> int:
    return int(time.time())


class TWAPOracle:
    def __init__(
        self,
        owner: str,
        config: OracleConfig | None = None,
        store: ObservationStore | None = None,
        clock: Callable[[], int] | None = None,
        metrics: OracleMetrics | None = None,
        name: str = "twap_oracle",
    ):
        self.config = config or OracleConfig()
        self.name = name
        self._clock = clock or _system_clock
        self._lock = threading.RLock()
        self._metrics = metrics

        self.access = AccessController(owner)
        self.breaker = CircuitBreaker(self.access, name=name)
        self.accumulator = PriceAccumulator(store=store, max_window=self.config.max_window)
        self.pipeline = UpdatePipeline(
            self.access,
            self.breaker,
            self.accumulator,
            max_deviation_bps=self.config.max_deviation_bps,
        )
        self.queries = QueryEngine(self.accumulator, self.config)
        self.events = EventLog()

        if self._metrics:
            self._metrics.set_paused(False)

        logger.info(
            "TWAP oracle initialized",
            extra={
                "event": "oracle.initialized",
                "oracle": name,
                "owner": self.access.owner[:10],
                "default_window": self.config.default_window,
                "max_deviation_bps": self.config.max_deviation_bps,
            },
        )

    # ==================== Read-only state ====================

    @property
    def owner(self) -> str:
        return self.access.owner

    @property
    def paused(self) -> bool:
        return self.breaker.paused

    @property
    def default_twap_window(self) -> int:
        return self.config.default_window

    @property
    def max_deviation_bps(self) -> int:
        return self.config.max_deviation_bps

    def is_authorized_updater(self, principal: str) -> bool:
        return self.access.is_authorized_updater(principal)

    # ==================== Price Units ====================

    @property
    def price_decimals(self) -> int:
        return self.config.price_decimals

    def to_base_units(self, value: str | int | Decimal) -> int:
        """Convert a human-readable price to base units at the configured scale."""
        return to_base_units(value, self.config.price_decimals)

    def from_base_units(self, units: int) -> Decimal:
        return from_base_units(units, self.config.price_decimals)

    def format_price(self, units: int, places: int = 4) -> str:
        return format_price(units, self.config.price_decimals, places)

    # ==================== Price Updates ====================

    def update_price(self, caller: str, price: int, now: int | None = None) -> Observation:
        """
        Publish a price through the bounded path.

        Args:
            caller: Principal making the call, as authenticated by the host
            price: Positive price in base units
            now: Observation timestamp; defaults to the oracle clock

        Returns:
            The committed observation
        """
        with self._lock:
            now = self._clock() if now is None else now
            try:
                observation = self.pipeline.update_price(caller, price, now)
            except OracleError as e:
                self._record_update("normal", type(e).__name__)
                raise
            self._commit(events.PRICE_UPDATED, caller, observation, "normal")
            return observation

    def emergency_update_price(self, caller: str, price: int, now: int | None = None) -> Observation:
        """Owner-only price publication that ignores the pause and the deviation bound."""
        with self._lock:
            now = self._clock() if now is None else now
            try:
                observation = self.pipeline.emergency_update_price(caller, price, now)
            except OracleError as e:
                self._record_update("emergency", type(e).__name__)
                raise
            self._commit(events.EMERGENCY_PRICE_UPDATE, caller, observation, "emergency")
            return observation

    def _commit(self, event_name: str, caller: str, observation: Observation, path: str) -> None:
        self.events.record(
            event_name,
            caller.strip().lower(),
            observation.timestamp,
            price=observation.price,
            cumulative_price=observation.cumulative_price,
        )
        self._record_update(path, "accepted")
        if self._metrics:
            self._metrics.record_commit(observation.price, len(self.accumulator))
        logger.info(
            "Price updated",
            extra={
                "event": "oracle.price_updated",
                "path": path,
                "price": observation.price,
                "observed_at": observation.timestamp,
            },
        )

    def _record_update(self, path: str, status: str) -> None:
        if self._metrics:
            self._metrics.record_update(path, status)

    # ==================== Admin ====================

    def add_authorized_updater(self, caller: str, principal: str) -> bool:
        with self._lock:
            changed = self.access.add_authorized_updater(caller, principal)
            if changed:
                self._log_admin(events.UPDATER_ADDED, caller, updater=principal.strip().lower())
            return changed

    def remove_authorized_updater(self, caller: str, principal: str) -> bool:
        with self._lock:
            changed = self.access.remove_authorized_updater(caller, principal)
            if changed:
                self._log_admin(events.UPDATER_REMOVED, caller, updater=principal.strip().lower())
            return changed

    def pause(self, caller: str) -> bool:
        with self._lock:
            changed = self.breaker.pause(caller)
            if changed:
                self._log_admin(events.PAUSED, caller)
                if self._metrics:
                    self._metrics.set_paused(True)
            return changed

    def unpause(self, caller: str) -> bool:
        with self._lock:
            changed = self.breaker.unpause(caller)
            if changed:
                self._log_admin(events.UNPAUSED, caller)
                if self._metrics:
                    self._metrics.set_paused(False)
            return changed

    def _log_admin(self, event_name: str, caller: str, **details: Any) -> None:
        self.events.record(event_name, caller.strip().lower(), self._clock(), **details)

    # ==================== Queries ====================

    def get_latest_price(self) -> int:
        return self.queries.latest_price()

    def get_latest_price_point(self) -> Observation:
        return self.queries.latest_price_point()

    def get_twap(self, window: int) -> int:
        """TWAP over the ``window`` seconds ending at the latest observation."""
        try:
            result = self.queries.twap(window)
        except OracleError as e:
            if self._metrics:
                self._metrics.record_twap_query(type(e).__name__)
            raise
        if self._metrics:
            self._metrics.record_twap_query("ok")
        return result

    def get_default_twap(self) -> int:
        return self.get_twap(self.config.default_window)

    def get_cumulative_at(self, target_time: int) -> int:
        return self.queries.cumulative_at(target_time)

    def observation_count(self) -> int:
        return self.queries.observation_count()

    def get_observations(self, limit: int | None = None) -> list[Observation]:
        return self.queries.observations(limit)

    def get_events(self, limit: int = 10) -> list[Dict[str, Any]]:
        return self.events.recent(limit)

    def snapshot(self) -> Dict[str, Any]:
        """Return a serializable view of the oracle state for APIs."""
        history = self.accumulator.snapshot()
        latest = history.last
        return {
            "name": self.name,
            "owner": self.owner,
            "paused": self.paused,
            "authorized_updaters": sorted(self.access.authorized_updaters()),
            "config": self.config.to_dict(),
            "observations": len(history),
            "latest": latest.to_dict() if latest else None,
        }
