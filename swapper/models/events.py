"""Pydantic models for exchange notifications.

Each notification carries a fixed ``kind`` tag so a stream of mixed events
can be serialized and parsed back through the ``Event`` discriminated union.
Amounts are uint256 decimal strings, addresses are lowercase 0x-hex.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from swapper.models.types import Address, Uint256


class TokenSwapped(BaseModel):
    """A swap was executed."""

    kind: Literal["tokenSwapped"] = "tokenSwapped"
    sender: Address
    from_token: Address = Field(alias="fromToken")
    to_token: Address = Field(alias="toToken")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True, "frozen": True}


class LiquidityAdded(BaseModel):
    """Liquidity was deposited into the pool."""

    kind: Literal["liquidityAdded"] = "liquidityAdded"
    token: Address
    amount: Uint256

    model_config = {"frozen": True}


class LiquidityRemoved(BaseModel):
    """Liquidity was taken out of the pool."""

    kind: Literal["liquidityRemoved"] = "liquidityRemoved"
    token: Address
    amount: Uint256

    model_config = {"frozen": True}


class FeeUpdated(BaseModel):
    """The owner changed the fee numerator."""

    kind: Literal["feeUpdated"] = "feeUpdated"
    new_fee: int = Field(alias="newFee", ge=0)

    model_config = {"populate_by_name": True, "frozen": True}


class ZeroLiquidityPrice(BaseModel):
    """A price observation was skipped because the token balance is zero."""

    kind: Literal["zeroLiquidityPrice"] = "zeroLiquidityPrice"
    token: Address

    model_config = {"frozen": True}


class SupportedTokenAdded(BaseModel):
    kind: Literal["supportedTokenAdded"] = "supportedTokenAdded"
    token: Address

    model_config = {"frozen": True}


class SupportedTokenRemoved(BaseModel):
    kind: Literal["supportedTokenRemoved"] = "supportedTokenRemoved"
    token: Address

    model_config = {"frozen": True}


class Paused(BaseModel):
    kind: Literal["paused"] = "paused"
    account: Address

    model_config = {"frozen": True}


class Unpaused(BaseModel):
    kind: Literal["unpaused"] = "unpaused"
    account: Address

    model_config = {"frozen": True}


class OwnershipTransferred(BaseModel):
    kind: Literal["ownershipTransferred"] = "ownershipTransferred"
    previous_owner: Address = Field(alias="previousOwner")
    new_owner: Address = Field(alias="newOwner")

    model_config = {"populate_by_name": True, "frozen": True}


def _get_event_kind(v: dict[str, Any] | BaseModel) -> str:
    """Discriminator function for the Event union type."""
    if isinstance(v, dict):
        return str(v.get("kind", ""))
    return str(getattr(v, "kind", ""))


# Discriminated union: Pydantic uses the 'kind' field to pick the model
Event = Annotated[
    Annotated[TokenSwapped, Tag("tokenSwapped")]
    | Annotated[LiquidityAdded, Tag("liquidityAdded")]
    | Annotated[LiquidityRemoved, Tag("liquidityRemoved")]
    | Annotated[FeeUpdated, Tag("feeUpdated")]
    | Annotated[ZeroLiquidityPrice, Tag("zeroLiquidityPrice")]
    | Annotated[SupportedTokenAdded, Tag("supportedTokenAdded")]
    | Annotated[SupportedTokenRemoved, Tag("supportedTokenRemoved")]
    | Annotated[Paused, Tag("paused")]
    | Annotated[Unpaused, Tag("unpaused")]
    | Annotated[OwnershipTransferred, Tag("ownershipTransferred")],
    Discriminator(_get_event_kind),
]
