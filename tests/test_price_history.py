"""Tests for the selling price history and its maintenance."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest

from actualization.models.store import StoreTimeZone
from actualization.services.pricing import price_log, selling_price_history
from tests.factories import NOW, TODAY, original, price_pool


def test_add_skips_unchanged_price():
    log = selling_price_history.add(date(2024, 6, 1), original(100), {})
    log = selling_price_history.add(date(2024, 6, 2), original(100), log)

    assert list(log) == [date(2024, 6, 1)]


def test_add_records_price_change():
    log = selling_price_history.add(date(2024, 6, 1), original(100), {})
    log = selling_price_history.add(date(2024, 6, 2), original(90), log)

    assert log[date(2024, 6, 2)].value == Decimal("90")


def test_trim_carries_price_active_at_cutoff():
    log = {
        date(2024, 4, 20): original(120),
        date(2024, 5, 1): original(90),
        date(2024, 6, 1): original(100),
    }

    trimmed = selling_price_history.remove_outdated_from_log(TODAY, log)

    assert list(trimmed) == [date(2024, 5, 16), date(2024, 6, 1)]
    assert trimmed[date(2024, 5, 16)].value == Decimal("90")


def test_find_lowest_skips_excluded_price_list_and_future_days():
    log = {
        TODAY - timedelta(days=3): original(50, price_list_id=2),
        TODAY - timedelta(days=2): original(95),
        TODAY - timedelta(days=1): original(90),
        TODAY + timedelta(days=1): original(10),
    }

    found = selling_price_history.find_lowest_original_price_with_date(TODAY, 2, log)

    assert found == (TODAY - timedelta(days=1), original(90))


def test_find_lowest_on_empty_log():
    assert selling_price_history.find_lowest_original_price(TODAY, 1, {}) is None


def test_refresh_logs_todays_public_price():
    pool = price_log.refresh(NOW, price_pool(list_value=100))

    assert list(pool.selling_price_history) == [TODAY]
    assert pool.selling_price_history[TODAY].price_id == "list"


def test_refresh_is_stable_for_unchanged_price():
    pool = price_log.refresh(NOW, price_pool(list_value=100))
    again = price_log.refresh(NOW + timedelta(days=1), pool)

    assert again.selling_price_history == pool.selling_price_history


def test_refresh_without_active_price_only_trims():
    stale = {TODAY - timedelta(days=40): original(100)}
    pool = price_pool(history=stale)

    refreshed = price_log.refresh(NOW, pool)

    assert list(refreshed.selling_price_history) == [TODAY - timedelta(days=30)]


LATE_EVENING_UTC = datetime(2024, 6, 15, 22, 30, tzinfo=UTC)


@pytest.mark.parametrize("store", list(StoreTimeZone))
def test_trim_cutoff_follows_store_date(store):
    log = {date(2024, 5, 16): original(120), date(2024, 5, 18): original(90)}

    trimmed = selling_price_history.remove_outdated(LATE_EVENING_UTC, store, log)

    # Store day is 2024-06-16, so the cutoff is 2024-05-17, not 2024-05-16.
    assert list(trimmed) == [date(2024, 5, 17), date(2024, 5, 18)]
    assert trimmed[date(2024, 5, 17)].value == Decimal("120")


def test_price_log_buckets_by_reference_store_date():
    pool = price_log.refresh(LATE_EVENING_UTC, price_pool(list_value=100))

    assert list(pool.selling_price_history) == [date(2024, 6, 16)]
