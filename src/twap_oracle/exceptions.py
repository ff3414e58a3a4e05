"""
Oracle-specific exception hierarchy.

Every rejected call raises one of these synchronously and leaves the oracle
untouched. Nothing here is retried internally; retry policy belongs to the
caller.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class OracleError(Exception):
    """Base exception for all oracle errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the caller may retry the same operation later
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


class ConfigurationError(OracleError):
    """Raised when oracle configuration is missing or invalid."""
    pass


# ==================== Access Errors ====================


class AccessError(OracleError):
    """Raised when a principal may not perform an operation."""
    pass


class UnauthorizedError(AccessError):
    """Raised when the caller is neither the owner nor an authorized updater."""
    pass


class NotOwnerError(AccessError):
    """Raised when an owner-only operation is invoked by someone else."""
    pass


# ==================== Breaker Errors ====================


class PausedError(OracleError):
    """Raised when a normal price update arrives while the oracle is paused."""

    def __init__(self, message: str = "Oracle is paused", **kwargs: Any) -> None:
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


# ==================== Validation Errors ====================


class ValidationError(OracleError):
    """Raised when submitted data fails validation rules."""
    pass


class InvalidInputError(ValidationError):
    """Raised for non-positive prices, non-positive windows and malformed numbers."""
    pass


class NonMonotonicTimeError(ValidationError):
    """Raised when an observation timestamp does not strictly increase."""

    def __init__(
        self,
        message: str,
        timestamp: Optional[int] = None,
        latest_timestamp: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.latest_timestamp = latest_timestamp


class DeviationExceededError(ValidationError):
    """Raised when a price moves further from the previous one than allowed."""

    def __init__(
        self,
        message: str,
        deviation_bps: Optional[int] = None,
        max_deviation_bps: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.deviation_bps = deviation_bps
        self.max_deviation_bps = max_deviation_bps


# ==================== History Errors ====================


class HistoryError(OracleError):
    """Raised when stored history cannot answer a query."""
    pass


class EmptyHistoryError(HistoryError):
    """Raised when no observation has been recorded yet."""

    def __init__(self, message: str = "No price observations recorded", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InsufficientHistoryError(HistoryError):
    """Raised when a query reaches back before the oldest retained observation."""

    def __init__(
        self,
        message: str,
        requested: Optional[int] = None,
        earliest: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("recoverable", True)  # more history may arrive
        super().__init__(message, **kwargs)
        self.requested = requested
        self.earliest = earliest
