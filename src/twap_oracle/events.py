"""Audit trail of oracle state changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

PRICE_UPDATED = "PriceUpdated"
EMERGENCY_PRICE_UPDATE = "EmergencyPriceUpdate"
UPDATER_ADDED = "UpdaterAdded"
UPDATER_REMOVED = "UpdaterRemoved"
PAUSED = "Paused"
UNPAUSED = "Unpaused"


@dataclass(frozen=True)
class OracleEvent:
    """Record of one committed state change."""
    name: str
    actor: str
    timestamp: int
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "actor": self.actor,
            "timestamp": self.timestamp,
            "details": dict(self.details),
        }


class EventLog:
    """Bounded, append-only list of events (oldest dropped first)."""

    def __init__(self, max_entries: int = 1000):
        if not isinstance(max_entries, int) or max_entries <= 0:
            raise ValueError("max_entries must be a positive integer.")
        self.max_entries = max_entries
        self._events: list[OracleEvent] = []

    def record(self, name: str, actor: str, timestamp: int, **details: Any) -> OracleEvent:
        event = OracleEvent(name=name, actor=actor, timestamp=timestamp, details=details)
        events = self._events + [event]
        # Keep last max_entries
        if len(events) > self.max_entries:
            events = events[-self.max_entries:]
        self._events = events
        return event

    def recent(self, limit: int = 10) -> list[Dict[str, Any]]:
        if limit <= 0:
            return []
        return [e.to_dict() for e in self._events[-limit:]]

    def __len__(self) -> int:
        return len(self._events)
