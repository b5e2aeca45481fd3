"""Address and amount types shared by the event and snapshot models.

Accounts and tokens are both identified by a 20-byte hex address. The
exchange compares addresses in lowercase 0x form everywhere, so every
public entry point runs input through normalize_address() first.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from swapper.constants import NULL_ADDRESS
from swapper.safe_int import SafeUint, SafeUintError

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string into a canonical uint256 string.

    Range checks are delegated to SafeUint so models and engine math agree
    on what a valid amount is.

    Raises:
        ValueError: If value is not a decimal integer in [0, 2**256 - 1]
    """
    if isinstance(value, str):
        try:
            value = int(value, 10)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    try:
        return str(SafeUint(value))
    except SafeUintError as err:
        raise ValueError(f"Uint256 out of range: {value}") from err
    except TypeError as err:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}") from err


# Token or account address
Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# Token amount, serialized as a decimal string so JSON never loses precision
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    With validate=True a malformed result raises ValueError; otherwise the
    caller is expected to check with is_valid_address().
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = f"0x{addr}"
    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")
    return addr


def is_valid_address(address: str) -> bool:
    """True for a 0x-prefixed, 40-hex-digit address (any case)."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def is_null_address(address: str) -> bool:
    """True if address is the null identity (any case, with or without 0x)."""
    return normalize_address(address) == NULL_ADDRESS


def short(address: str) -> str:
    """Last 8 characters of an address, for log fields."""
    return str(address)[-8:]
