import logging
from enum import Enum

from .access_control import AccessController
from .exceptions import PausedError

logger = logging.getLogger(__name__)


class BreakerState(Enum):
    ACTIVE = "ACTIVE"  # Normal price updates proceed
    PAUSED = "PAUSED"  # Normal price updates are blocked


class CircuitBreaker:
    """
    Owner-controlled pause switch for the normal update path.

    Reads and owner emergency updates are never gated by the breaker.
    """

    def __init__(self, access: AccessController, name: str = "twap_oracle"):
        if not name:
            raise ValueError("Circuit breaker name cannot be empty.")
        self.name = name
        self._access = access
        self._state = BreakerState.ACTIVE
        logger.info("Circuit breaker %s initialized in %s state", self.name, self._state.value)

    @property
    def state(self) -> BreakerState:
        return self._state

    @property
    def paused(self) -> bool:
        return self._state == BreakerState.PAUSED

    def pause(self, caller: str) -> bool:
        """Pause normal updates. Returns False if already paused."""
        self._access.require_owner(caller)
        if self._state == BreakerState.PAUSED:
            return False
        self._state = BreakerState.PAUSED
        logger.warning(
            "Circuit breaker %s tripped to %s",
            self.name,
            self._state.value,
            extra={"event": "breaker.paused", "actor": caller[:10]},
        )
        return True

    def unpause(self, caller: str) -> bool:
        """Resume normal updates. Returns False if already active."""
        self._access.require_owner(caller)
        if self._state == BreakerState.ACTIVE:
            return False
        self._state = BreakerState.ACTIVE
        logger.info(
            "Circuit breaker %s reset to %s",
            self.name,
            self._state.value,
            extra={"event": "breaker.unpaused", "actor": caller[:10]},
        )
        return True

    def require_active(self) -> None:
        if self._state == BreakerState.PAUSED:
            logger.warning("Circuit breaker %s is PAUSED. Update blocked", self.name)
            raise PausedError(details={"breaker": self.name})

    def snapshot(self) -> dict:
        """Return a serializable snapshot of the breaker state for APIs."""
        return {
            "name": self.name,
            "state": self._state.value,
            "paused": self.paused,
        }
