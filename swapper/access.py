"""Ownership gate and operational mode."""

from __future__ import annotations

from enum import Enum

import structlog

from swapper.errors import EnforcedPause, ExpectedPause, Unauthorized
from swapper.models.types import normalize_address, short
from swapper.registry import checked_address

logger = structlog.get_logger()


class OperationalMode(str, Enum):
    """Whether user-facing mutations are currently allowed."""

    ACTIVE = "active"
    PAUSED = "paused"


class AccessControl:
    """Single owner plus an Active/Paused switch.

    Owner-only operations call require_owner(); pausable operations call
    require_active(). Administrative operations are gated by ownership
    only, so the owner can still manage the exchange while it is paused.
    """

    def __init__(self, owner: str) -> None:
        self._owner = checked_address(owner)
        self._mode = OperationalMode.ACTIVE

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def mode(self) -> OperationalMode:
        return self._mode

    @property
    def paused(self) -> bool:
        return self._mode is OperationalMode.PAUSED

    def require_owner(self, sender: str) -> None:
        """Raises Unauthorized unless sender is the owner."""
        if not isinstance(sender, str) or normalize_address(sender) != self._owner:
            logger.warning("unauthorized_call", sender=str(sender))
            raise Unauthorized(str(sender))

    def require_active(self) -> None:
        """Raises EnforcedPause while paused."""
        if self._mode is OperationalMode.PAUSED:
            raise EnforcedPause("Exchange is paused")

    def require_paused(self) -> None:
        """Raises ExpectedPause while active."""
        if self._mode is OperationalMode.ACTIVE:
            raise ExpectedPause("Exchange is not paused")

    def pause(self, sender: str) -> None:
        self.require_owner(sender)
        self.require_active()
        self._mode = OperationalMode.PAUSED
        logger.info("exchange_paused", by=short(self._owner))

    def unpause(self, sender: str) -> None:
        self.require_owner(sender)
        self.require_paused()
        self._mode = OperationalMode.ACTIVE
        logger.info("exchange_unpaused", by=short(self._owner))

    def transfer_ownership(self, sender: str, new_owner: str) -> tuple[str, str]:
        """Hand ownership to new_owner.

        Returns:
            (previous_owner, new_owner), both normalized

        Raises:
            Unauthorized: If sender is not the owner
            InvalidAddress: If new_owner is malformed or the null address
        """
        self.require_owner(sender)
        new_owner = checked_address(new_owner)
        previous, self._owner = self._owner, new_owner
        logger.info("ownership_transferred", previous=short(previous), new=short(new_owner))
        return previous, new_owner

    # --- Transactional ---

    def checkpoint(self) -> tuple[str, OperationalMode]:
        return self._owner, self._mode

    def restore(self, state: tuple[str, OperationalMode]) -> None:
        self._owner, self._mode = state
