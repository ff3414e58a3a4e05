"""
TWAP Price Oracle.

A time-weighted average price oracle built from:
- Accumulator: append-only observations with a running price-time integral
- Queries: latest price and TWAP over any retained lookback window
- Update pipeline: authorization, pause and deviation checks before commit
- Access control: owner and authorized updaters
- Circuit breaker: owner pause switch with an emergency update path
"""

from .access_control import AccessController
from .accumulator import PriceAccumulator
from .circuit_breaker import BreakerState, CircuitBreaker
from .config import OracleConfig
from .exceptions import (
    AccessError,
    ConfigurationError,
    DeviationExceededError,
    EmptyHistoryError,
    HistoryError,
    InsufficientHistoryError,
    InvalidInputError,
    NonMonotonicTimeError,
    NotOwnerError,
    OracleError,
    PausedError,
    UnauthorizedError,
    ValidationError,
)
from .fixed_point import from_base_units, to_base_units
from .oracle import TWAPOracle
from .pipeline import UpdatePipeline
from .query import QueryEngine
from .store import HistorySnapshot, InMemoryObservationStore, Observation, ObservationStore

__all__ = [
    # Oracle
    "TWAPOracle",
    "OracleConfig",
    # Components
    "AccessController",
    "CircuitBreaker",
    "BreakerState",
    "PriceAccumulator",
    "QueryEngine",
    "UpdatePipeline",
    # Storage
    "Observation",
    "HistorySnapshot",
    "ObservationStore",
    "InMemoryObservationStore",
    # Fixed point
    "to_base_units",
    "from_base_units",
    # Errors
    "OracleError",
    "ConfigurationError",
    "AccessError",
    "UnauthorizedError",
    "NotOwnerError",
    "PausedError",
    "ValidationError",
    "InvalidInputError",
    "NonMonotonicTimeError",
    "DeviationExceededError",
    "HistoryError",
    "EmptyHistoryError",
    "InsufficientHistoryError",
]
