"""Accessors over the resolved public price variants."""

from __future__ import annotations

from decimal import Decimal

from actualization.models.price import (
    DiscountPriceValue,
    LimitedCampaignSellingPrice,
    ListPriceValue,
    PublicPrice,
)


def _headline(price: PublicPrice) -> ListPriceValue | DiscountPriceValue:
    # A limited chain is displayed through its default (cheapest) tier.
    if isinstance(price, LimitedCampaignSellingPrice):
        return price.default_price.price
    return price


def amount(price: PublicPrice) -> Decimal:
    return _headline(price).amount


def price_id(price: PublicPrice) -> str:
    return _headline(price).price_id


def price_list_id(price: PublicPrice) -> int:
    return _headline(price).price_list_id


def relative_discount(price: PublicPrice) -> float:
    headline = _headline(price)
    if isinstance(headline, DiscountPriceValue):
        return headline.discount
    return 0.0


def absolute_discount(price: PublicPrice) -> Decimal:
    if isinstance(price, ListPriceValue):
        return Decimal(0)
    if isinstance(price, DiscountPriceValue):
        return price.list_price - price.amount
    value = price.default_price.price.amount
    share = Decimal(1) - Decimal(str(price.default_price.price.discount)) / 100
    if share == 0:
        return Decimal(0)
    return value / share - value


def is_campaign(price: PublicPrice) -> bool:
    return not isinstance(price, ListPriceValue)


def limited_chain(price: PublicPrice) -> list[PublicPrice]:
    """Unroll a limited chain into its tiers, cheapest first, ending at the base."""

    chain: list[PublicPrice] = []
    while isinstance(price, LimitedCampaignSellingPrice):
        chain.append(price)
        price = price.fallback_price
    chain.append(price)
    return chain
