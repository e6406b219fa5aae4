"""Tests for price activation windows."""

from datetime import timedelta

import pytest

from actualization.services.pricing.price_window import active_now, expired
from tests.factories import NOW, price

HOUR = timedelta(hours=1)


@pytest.mark.parametrize(
    ("start", "end", "active"),
    [
        (None, None, True),
        (NOW - HOUR, NOW + HOUR, True),
        (NOW, NOW, True),
        (NOW + HOUR, None, False),
        (None, NOW - HOUR, False),
    ],
)
def test_active_now(start, end, active):
    assert active_now(NOW, price(1, start=start, end=end)) is active


def test_expired():
    assert expired(NOW, price(1, end=NOW - HOUR))
    assert not expired(NOW, price(1, end=NOW))
    assert not expired(NOW, price(1))
