"""
Access control for price updates.

The owner is fixed at construction. Only the owner may change the set of
authorized updaters; the owner is itself always allowed to publish prices.
Principals are plain address strings supplied by the hosting environment and
compared case-insensitively. Proving that a caller controls a principal
(signatures, sessions) happens before calls reach this module.
"""

from __future__ import annotations

import logging

from .exceptions import InvalidInputError, NotOwnerError

logger = logging.getLogger(__name__)


def normalize_principal(principal: str) -> str:
    if not isinstance(principal, str) or not principal.strip():
        raise InvalidInputError("Principal must be a non-empty string")
    return principal.strip().lower()


def _safe_normalize(principal: object) -> str | None:
    # Malformed identities are simply not authorized
    if not isinstance(principal, str) or not principal.strip():
        return None
    return principal.strip().lower()


class AccessController:
    def __init__(self, owner: str):
        self._owner = normalize_principal(owner)
        self._authorized_updaters: set[str] = set()

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, principal: str) -> bool:
        return _safe_normalize(principal) == self._owner

    def is_authorized(self, principal: str) -> bool:
        """True if principal is the owner or an authorized updater."""
        principal_norm = _safe_normalize(principal)
        return principal_norm == self._owner or principal_norm in self._authorized_updaters

    def is_authorized_updater(self, principal: str) -> bool:
        """Membership in the updater set only (the owner is not listed)."""
        return _safe_normalize(principal) in self._authorized_updaters

    def authorized_updaters(self) -> frozenset[str]:
        return frozenset(self._authorized_updaters)

    def require_owner(self, caller: str) -> None:
        if not self.is_owner(caller):
            logger.warning(
                "Access denied: caller is not owner",
                extra={"event": "access_control.not_owner", "caller": str(caller)[:10]},
            )
            raise NotOwnerError("Caller is not owner", details={"caller": caller})

    def add_authorized_updater(self, caller: str, principal: str) -> bool:
        """
        Authorize a principal to publish prices.

        Returns:
            True if the principal was added, False if it was already authorized

        Raises:
            NotOwnerError: If caller is not the owner
        """
        self.require_owner(caller)
        principal_norm = normalize_principal(principal)
        if principal_norm in self._authorized_updaters:
            return False

        self._authorized_updaters.add(principal_norm)
        logger.info(
            "Updater authorized",
            extra={"event": "access_control.updater_added", "updater": principal_norm[:10]},
        )
        return True

    def remove_authorized_updater(self, caller: str, principal: str) -> bool:
        """
        Revoke a principal's update permission.

        Returns:
            True if the principal was removed, False if it was not authorized

        Raises:
            NotOwnerError: If caller is not the owner
        """
        self.require_owner(caller)
        principal_norm = normalize_principal(principal)
        if principal_norm not in self._authorized_updaters:
            return False

        self._authorized_updaters.discard(principal_norm)
        logger.info(
            "Updater revoked",
            extra={"event": "access_control.updater_removed", "updater": principal_norm[:10]},
        )
        return True
