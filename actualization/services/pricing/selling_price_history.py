"""Dated log of public prices used for the lowest-price-in-30-days disclosure."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from actualization.models.price import OriginalPrice, PriceLog
from actualization.models.store import StoreTimeZone

CUTOFF_PERIOD = timedelta(days=30)


def cutoff_date(today: date) -> date:
    return today - CUTOFF_PERIOD


def latest_entry(log: PriceLog) -> tuple[date, OriginalPrice] | None:
    if not log:
        return None
    day = max(log)
    return day, log[day]


def add(day: date, price: OriginalPrice, log: PriceLog) -> PriceLog:
    """Record ``price`` at ``day`` unless it is already the latest logged price.

    The log keeps price changes only, so an unchanged price is never stored
    twice in a row.
    """

    latest = latest_entry(log)
    if latest is not None and latest[1] == price:
        return log
    return {**log, day: price}


def remove_outdated_from_log(today: date, log: PriceLog) -> PriceLog:
    cutoff = cutoff_date(today)
    log = dict(log)
    # The price that was active on the cutoff day must survive the trim,
    # even when it was logged before the window started.
    if cutoff not in log:
        before_cutoff = [day for day in log if day < cutoff]
        if before_cutoff:
            log[cutoff] = log[max(before_cutoff)]
    return {day: price for day, price in sorted(log.items()) if day >= cutoff}


def remove_outdated(now: datetime, store_timezone: StoreTimeZone, log: PriceLog) -> PriceLog:
    return remove_outdated_from_log(store_timezone.local_date(now), log)


def find_lowest_original_price_with_date(
    today: date, excluded_price_list_id: int, log: PriceLog
) -> tuple[date, OriginalPrice] | None:
    log = remove_outdated_from_log(today, log)
    candidates = [
        (day, price)
        for day, price in log.items()
        if day <= today and price.price_list_id != excluded_price_list_id
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda entry: entry[1].value)


def find_lowest_original_price(
    today: date, excluded_price_list_id: int, log: PriceLog
) -> OriginalPrice | None:
    """Lowest price sold at within the window, ignoring one price list."""

    found = find_lowest_original_price_with_date(today, excluded_price_list_id, log)
    return found[1] if found else None
