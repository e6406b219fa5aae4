"""Resolution of the public price of an item from its price pool."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import TypeVar

from actualization.models.price import (
    CurrentPrice,
    DiscountPriceValue,
    LimitedCampaignPriceValue,
    LimitedCampaignSellingPrice,
    LimitedPrice,
    ListPriceValue,
    MemberPrice,
    MemberPriceTier,
    MemberSellingPrice,
    OriginalPrice,
    Price,
    PriceLog,
    ProductItemPrice,
    PublicPrice,
)
from actualization.models.store import StoreTimeZone
from actualization.services.pricing import public_price, selling_price_history
from actualization.services.pricing.price_window import active_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


def calculate_discount(base: Decimal, price: Decimal) -> float:
    """Percentage ``price`` is below ``base``, rounded to two decimals."""

    if base == 0:
        return 0.0
    share = float(price / base)
    discount = round(100.0 - share * 100.0, 2)
    return min(max(discount, 0.0), 100.0)


def with_tax(vat_rate: Decimal, amount: Decimal) -> Decimal:
    return round(Decimal(amount) * (1 + Decimal(vat_rate)), 2)


def _as_original(price: Price) -> OriginalPrice:
    return OriginalPrice(
        price_id=price.price_id,
        price_list_id=price.price_list_id,
        value=price.value,
        vat_rate=price.vat_rate,
    )


def _lowest(prices: Iterable[Price]) -> Price:
    return min(prices, key=lambda p: p.value)


def _start_key(price: Price) -> tuple[bool, float]:
    return (price.start is not None, price.start.timestamp() if price.start else 0.0)


def _sanitize(prices: Sequence[T], to_price: Callable[[T], Price]) -> list[T]:
    """Drop prices repeating an earlier value, keeping the earliest-starting one."""

    seen: set[Decimal] = set()
    result = []
    for price in sorted(prices, key=lambda p: _start_key(to_price(p))):
        value = to_price(price).value
        if value in seen:
            continue
        seen.add(value)
        result.append(price)
    return result


def _member_price_values(
    now: datetime, member_prices: Sequence[MemberPrice]
) -> dict[MemberPriceTier, Decimal]:
    active = [p for p in member_prices if active_now(now, p.price)]
    values: dict[MemberPriceTier, Decimal] = {}
    # Cheapest price of a tier is assigned last and wins.
    for member_price in sorted(active, key=lambda p: p.price.value, reverse=True):
        values[member_price.tier] = member_price.price.value
    return values


def _append_limited_prices(
    fallback: PublicPrice, limited_prices: Sequence[LimitedCampaignPriceValue]
) -> PublicPrice:
    base_amount = public_price.amount(fallback)
    cheaper = sorted(
        (p for p in limited_prices if p.price.amount < base_amount),
        key=lambda p: p.price.amount,
        reverse=True,
    )
    result = fallback
    for limited in cheaper:
        result = LimitedCampaignSellingPrice(default_price=limited, fallback_price=result)
    return result


def _limited_price_value(
    today: date, log: PriceLog, base: Price, limited: LimitedPrice
) -> LimitedCampaignPriceValue:
    lowest_historic = selling_price_history.find_lowest_original_price(
        today, limited.price.price_list_id, log
    ) or _as_original(base)
    return LimitedCampaignPriceValue(
        price=DiscountPriceValue(
            amount=limited.price.value,
            list_price=base.value,
            discount=calculate_discount(lowest_historic.value, limited.price.value),
            lowest_historic_price=lowest_historic,
            price_id=limited.price.price_id,
            price_list_id=limited.price.price_list_id,
        ),
        quantity=limited.quantity,
    )


def _base_price_to_current(
    today: date,
    log: PriceLog,
    member_prices: dict[MemberPriceTier, Decimal],
    limited_prices: Sequence[LimitedPrice],
    base: Price,
    recommended_price: Decimal | None = None,
) -> CurrentPrice:
    """Current price built on a single undiscounted base price."""

    limited_values = [_limited_price_value(today, log, base, p) for p in limited_prices]
    list_value = ListPriceValue(
        amount=base.value, price_id=base.price_id, price_list_id=base.price_list_id
    )
    return CurrentPrice(
        public_price=_append_limited_prices(list_value, limited_values),
        recommended_price=recommended_price,
        vat_rate=base.vat_rate,
        member_prices={
            tier: MemberSellingPrice(
                value=value,
                public_price_discount=calculate_discount(base.value, value),
                list_price_discount=calculate_discount(base.value, value),
            )
            for tier, value in member_prices.items()
            if value < base.value
        },
    )


def current(
    now: datetime, store_timezone: StoreTimeZone, pool: ProductItemPrice
) -> CurrentPrice | None:
    """Resolve the price shown in ``store_timezone`` at ``now``.

    Returns None when neither a list price nor a campaign price is active,
    i.e. the item cannot be sold.
    """

    today = store_timezone.local_date(now)
    log = pool.selling_price_history

    list_prices = [p for p in pool.list_prices if active_now(now, p.price)]
    campaign_prices = _sanitize(
        [p for p in pool.campaign_prices if active_now(now, p)], lambda p: p
    )
    limited_prices = _sanitize(
        [
            p
            for p in pool.limited_prices
            if active_now(now, p.price) and p.quantity > 0
        ],
        lambda p: p.price,
    )
    member_prices = _member_price_values(now, pool.member_prices)

    if not list_prices and not campaign_prices:
        return None

    if not campaign_prices:
        lowest_list = min(list_prices, key=lambda p: p.price.value)
        return _base_price_to_current(
            today,
            log,
            member_prices,
            limited_prices,
            lowest_list.price,
            lowest_list.recommended_price,
        )

    if not list_prices:
        return _base_price_to_current(
            today, log, member_prices, limited_prices, _lowest(campaign_prices)
        )

    lowest_campaign = _lowest(campaign_prices)
    lowest_list = min(list_prices, key=lambda p: p.price.value)

    # A campaign that is not cheaper than the list price must not show a discount.
    if lowest_list.price.value < lowest_campaign.value:
        return _base_price_to_current(
            today,
            log,
            member_prices,
            limited_prices,
            lowest_list.price,
            lowest_list.recommended_price,
        )

    lowest_available = _lowest(
        [*campaign_prices, *(p.price for p in limited_prices), lowest_list.price]
    )
    historic_floor = selling_price_history.find_lowest_original_price(
        today, lowest_available.price_list_id, log
    ) or _as_original(lowest_list.price)

    def discounted(price: Price) -> DiscountPriceValue:
        return DiscountPriceValue(
            amount=price.value,
            list_price=lowest_list.price.value,
            discount=calculate_discount(historic_floor.value, price.value),
            lowest_historic_price=historic_floor,
            price_id=price.price_id,
            price_list_id=price.price_list_id,
        )

    campaign_value = discounted(lowest_campaign)
    limited_values = [
        LimitedCampaignPriceValue(price=discounted(p.price), quantity=p.quantity)
        for p in limited_prices
        if p.price.value < campaign_value.amount
    ]
    logger.debug(
        "Campaign price wins",
        extra={
            "item_id": pool.item_id,
            "campaign_price_id": lowest_campaign.price_id,
            "historic_floor": str(historic_floor.value),
        },
    )
    return CurrentPrice(
        public_price=_append_limited_prices(campaign_value, limited_values),
        recommended_price=lowest_list.recommended_price,
        vat_rate=lowest_campaign.vat_rate,
        member_prices={
            tier: MemberSellingPrice(
                value=value,
                public_price_discount=calculate_discount(campaign_value.amount, value),
                list_price_discount=calculate_discount(lowest_list.price.value, value),
            )
            for tier, value in member_prices.items()
            if value < campaign_value.amount
        },
    )
