"""
TWAP Oracle Configuration

Configuration is fixed when an oracle is constructed. Values can be passed
explicitly or read from environment variables:

- TWAP_ORACLE_DEFAULT_WINDOW     default TWAP window in seconds (3600)
- TWAP_ORACLE_MAX_DEVIATION_BPS  max change between accepted prices (1000 = 10%)
- TWAP_ORACLE_MAX_WINDOW         longest queryable window; empty keeps all history
- TWAP_ORACLE_PRICE_DECIMALS     fixed-point decimals of a price unit (18)
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from .exceptions import ConfigurationError
from .fixed_point import DEFAULT_DECIMALS, MAX_DECIMALS

logger = logging.getLogger(__name__)

DEFAULT_TWAP_WINDOW = 3600  # 1 hour
DEFAULT_MAX_DEVIATION_BPS = 1000  # 10%
BPS_DENOMINATOR = 10000

ENV_PREFIX = "TWAP_ORACLE_"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class OracleConfig:
    """Immutable oracle parameters."""

    default_window: int = DEFAULT_TWAP_WINDOW
    max_deviation_bps: int = DEFAULT_MAX_DEVIATION_BPS
    max_window: int | None = None
    price_decimals: int = DEFAULT_DECIMALS

    def __post_init__(self) -> None:
        if not _is_int(self.default_window) or self.default_window <= 0:
            raise ConfigurationError("default_window must be a positive integer number of seconds.")
        if not _is_int(self.max_deviation_bps) or not 0 <= self.max_deviation_bps <= BPS_DENOMINATOR:
            raise ConfigurationError(
                f"max_deviation_bps must be an integer between 0 and {BPS_DENOMINATOR}."
            )
        if self.max_window is not None:
            if not _is_int(self.max_window) or self.max_window <= 0:
                raise ConfigurationError("max_window must be a positive integer or None.")
            if self.max_window < self.default_window:
                raise ConfigurationError(
                    "max_window must not be shorter than default_window.",
                    details={"max_window": self.max_window, "default_window": self.default_window},
                )
        if not _is_int(self.price_decimals) or not 0 <= self.price_decimals <= MAX_DECIMALS:
            raise ConfigurationError(f"price_decimals must be an integer between 0 and {MAX_DECIMALS}.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OracleConfig":
        """Build a config from TWAP_ORACLE_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        config = cls(
            default_window=_get_int(env, "DEFAULT_WINDOW", DEFAULT_TWAP_WINDOW),
            max_deviation_bps=_get_int(env, "MAX_DEVIATION_BPS", DEFAULT_MAX_DEVIATION_BPS),
            max_window=_get_optional_int(env, "MAX_WINDOW"),
            price_decimals=_get_int(env, "PRICE_DECIMALS", DEFAULT_DECIMALS),
        )
        logger.debug(
            "Oracle configuration loaded from environment",
            extra={"event": "config.loaded", **config.to_dict()},
        )
        return config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}{key} must be an integer, got {raw!r}",
            details={"env_var": ENV_PREFIX + key},
        ) from e


def _get_optional_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(ENV_PREFIX + key, "").strip()
    if not raw:
        return None
    return _get_int(env, key, 0)
