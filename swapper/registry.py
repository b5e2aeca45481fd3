"""Whitelist of tokens eligible for liquidity and swaps."""

from __future__ import annotations

import structlog

from swapper.errors import AlreadySupported, InvalidAddress, NotSupported, UnsupportedToken
from swapper.models.types import is_null_address, is_valid_address, normalize_address, short

logger = structlog.get_logger()


def checked_address(address: str) -> str:
    """Normalize an address, rejecting malformed input and the null identity.

    Raises:
        InvalidAddress: If address is not well formed or is the null address
    """
    if not isinstance(address, str):
        raise InvalidAddress(f"Address must be a string, got {type(address).__name__}")
    addr = normalize_address(address)
    if not is_valid_address(addr) or is_null_address(addr):
        raise InvalidAddress(f"Invalid address: {address}")
    return addr


class TokenRegistry:
    """Registry of supported token addresses.

    Membership is the only thing tracked here. Delisting a token does not
    touch its ledger balance or price history; it only blocks new
    liquidity and swap operations that reference it.
    """

    def __init__(self, tokens: list[str] | None = None) -> None:
        # dict keeps listing order for snapshots
        self._tokens: dict[str, None] = {}
        for token in tokens or []:
            self.add(token)

    def add(self, token: str) -> str:
        """Add a token to the whitelist.

        Returns:
            The normalized token address

        Raises:
            InvalidAddress: If token is malformed or the null address
            AlreadySupported: If token is already listed
        """
        addr = checked_address(token)
        if addr in self._tokens:
            raise AlreadySupported(f"Token already supported: {addr}")
        self._tokens[addr] = None
        logger.debug("token_listed", token=short(addr))
        return addr

    def remove(self, token: str) -> str:
        """Remove a token from the whitelist.

        Returns:
            The normalized token address

        Raises:
            InvalidAddress: If token is malformed or the null address
            NotSupported: If token is not listed
        """
        addr = checked_address(token)
        if addr not in self._tokens:
            raise NotSupported(f"Token not supported: {addr}")
        del self._tokens[addr]
        logger.debug("token_delisted", token=short(addr))
        return addr

    def is_supported(self, token: str) -> bool:
        if not isinstance(token, str):
            return False
        return normalize_address(token) in self._tokens

    def require_supported(self, *tokens: str) -> tuple[str, ...]:
        """Normalize tokens, requiring every one to be listed.

        Raises:
            UnsupportedToken: If any token is not listed
        """
        normalized = []
        for token in tokens:
            if not self.is_supported(token):
                raise UnsupportedToken(f"Unsupported token: {token}")
            normalized.append(normalize_address(token))
        return tuple(normalized)

    @property
    def tokens(self) -> list[str]:
        """Listed tokens in listing order."""
        return list(self._tokens)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.is_supported(token)

    def __len__(self) -> int:
        return len(self._tokens)

    # --- Transactional ---

    def checkpoint(self) -> dict[str, None]:
        return dict(self._tokens)

    def restore(self, state: dict[str, None]) -> None:
        self._tokens = dict(state)
