"""Swapper data models."""

from swapper.models.events import (
    Event,
    FeeUpdated,
    LiquidityAdded,
    LiquidityRemoved,
    OwnershipTransferred,
    Paused,
    SupportedTokenAdded,
    SupportedTokenRemoved,
    TokenSwapped,
    Unpaused,
    ZeroLiquidityPrice,
)
from swapper.models.snapshot import ExchangeSnapshot, PriceObservationModel
from swapper.models.types import (
    Address,
    Uint256,
    is_null_address,
    is_valid_address,
    normalize_address,
)

__all__ = [
    # Events
    "Event",
    "TokenSwapped",
    "LiquidityAdded",
    "LiquidityRemoved",
    "FeeUpdated",
    "ZeroLiquidityPrice",
    "SupportedTokenAdded",
    "SupportedTokenRemoved",
    "Paused",
    "Unpaused",
    "OwnershipTransferred",
    # Snapshot
    "ExchangeSnapshot",
    "PriceObservationModel",
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "is_null_address",
]
