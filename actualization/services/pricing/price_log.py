"""Keeps the selling price history of a price pool up to date."""

from __future__ import annotations

from datetime import datetime

from actualization.models.price import (
    CurrentPrice,
    OriginalPrice,
    PriceLog,
    ProductItemPrice,
)
from actualization.models.store import StoreTimeZone
from actualization.services.pricing import public_price, selling_price_history
from actualization.services.pricing.engine import current

# History is bucketed by the calendar day of the head-office store.
REFERENCE_STORE = StoreTimeZone.MOSCOW


def to_original_price(price: CurrentPrice) -> OriginalPrice:
    return OriginalPrice(
        price_id=public_price.price_id(price.public_price),
        price_list_id=public_price.price_list_id(price.public_price),
        value=public_price.amount(price.public_price),
        vat_rate=price.vat_rate,
    )


def add_original_price(
    now: datetime,
    log: PriceLog,
    store_timezone: StoreTimeZone,
    price: CurrentPrice,
) -> PriceLog:
    today = store_timezone.local_date(now)
    return selling_price_history.add(today, to_original_price(price), log)


def append(
    now: datetime,
    pool: ProductItemPrice,
    store_timezone: StoreTimeZone = REFERENCE_STORE,
) -> ProductItemPrice:
    """Log today's public price if it differs from the last logged one."""

    resolved = current(now, store_timezone, pool)
    if resolved is None:
        return pool
    history = add_original_price(
        now, pool.selling_price_history, store_timezone, resolved
    )
    return pool.model_copy(update={"selling_price_history": history})


def refresh(
    now: datetime,
    pool: ProductItemPrice,
    store_timezone: StoreTimeZone = REFERENCE_STORE,
) -> ProductItemPrice:
    pool = append(now, pool, store_timezone)
    history = selling_price_history.remove_outdated(
        now, store_timezone, pool.selling_price_history
    )
    return pool.model_copy(update={"selling_price_history": history})
