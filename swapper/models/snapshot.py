"""Pydantic model for the externally readable exchange state."""

from pydantic import BaseModel, Field

from swapper.models.types import Address, Uint256


class PriceObservationModel(BaseModel):
    """A single (timestamp, price) oracle sample."""

    timestamp: int = Field(ge=0, description="Unix seconds")
    price: Uint256 = Field(description="Price scaled by PRICE_SCALE")


class ExchangeSnapshot(BaseModel):
    """Point-in-time view of everything an external reader may rely on.

    Balances and histories are keyed by lowercase token address. Tokens
    that were delisted keep their entries here, since delisting does not
    clear balances or price history.
    """

    owner: Address
    paused: bool
    fee_numerator: int = Field(alias="feeNumerator", ge=0)
    supported_tokens: list[Address] = Field(alias="supportedTokens")
    balances: dict[str, Uint256] = Field(default_factory=dict)
    price_history: dict[str, list[PriceObservationModel]] = Field(
        alias="priceHistory", default_factory=dict
    )

    model_config = {"populate_by_name": True}
