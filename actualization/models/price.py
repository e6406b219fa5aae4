"""Price pool models and the resolved public price."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, Field


class Price(BaseModel):
    """A single price from a price list, optionally bounded in time."""

    price_id: str
    price_list_id: int
    value: Decimal
    vat_rate: Decimal
    start: AwareDatetime | None = Field(
        default=None, description="Inclusive start of the activation window"
    )
    end: AwareDatetime | None = Field(
        default=None, description="Inclusive end of the activation window"
    )


class ListPrice(BaseModel):
    price: Price
    recommended_price: Decimal | None = None


class LimitedPrice(BaseModel):
    """Campaign price available only while ``quantity`` units remain."""

    price: Price
    quantity: int


class MemberPriceTier(StrEnum):
    STANDARD = "standard"
    GOLD = "gold"


class MemberPrice(BaseModel):
    price: Price
    tier: MemberPriceTier


class OriginalPrice(BaseModel):
    """Snapshot of the public price stored in the selling price history."""

    price_id: str
    price_list_id: int
    value: Decimal
    vat_rate: Decimal


PriceLog = dict[date, OriginalPrice]


class ProductItemPrice(BaseModel):
    """Price pool for one catalog item."""

    item_id: str
    list_prices: list[ListPrice] = Field(default_factory=list)
    campaign_prices: list[Price] = Field(default_factory=list)
    limited_prices: list[LimitedPrice] = Field(default_factory=list)
    member_prices: list[MemberPrice] = Field(default_factory=list)
    selling_price_history: PriceLog = Field(default_factory=dict)

    @classmethod
    def empty(cls, item_id: str) -> ProductItemPrice:
        return cls(item_id=item_id)


class ListPriceValue(BaseModel):
    kind: Literal["list_price"] = "list_price"
    amount: Decimal
    price_id: str
    price_list_id: int


class DiscountPriceValue(BaseModel):
    kind: Literal["campaign_price"] = "campaign_price"
    amount: Decimal
    list_price: Decimal
    discount: float
    lowest_historic_price: OriginalPrice
    price_id: str
    price_list_id: int


class LimitedCampaignPriceValue(BaseModel):
    price: DiscountPriceValue
    quantity: int


class LimitedCampaignSellingPrice(BaseModel):
    """Quantity-capped price backed by the price that applies once it sells out."""

    kind: Literal["limited_campaign_price"] = "limited_campaign_price"
    default_price: LimitedCampaignPriceValue
    fallback_price: PublicPrice


PublicPrice = Annotated[
    ListPriceValue | DiscountPriceValue | LimitedCampaignSellingPrice,
    Field(discriminator="kind"),
]

LimitedCampaignSellingPrice.model_rebuild()


class MemberSellingPrice(BaseModel):
    value: Decimal
    public_price_discount: float
    list_price_discount: float


class CurrentPrice(BaseModel):
    """Price resolved for a store at a given moment; never persisted."""

    public_price: PublicPrice
    recommended_price: Decimal | None = None
    vat_rate: Decimal
    member_prices: dict[MemberPriceTier, MemberSellingPrice] = Field(
        default_factory=dict
    )
