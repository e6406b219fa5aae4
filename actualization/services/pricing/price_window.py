"""Activation window checks for prices."""

from __future__ import annotations

from datetime import datetime

from actualization.models.price import Price


def active_now(now: datetime, price: Price) -> bool:
    """Return True when ``now`` lies inside the price's (possibly open) window."""

    if price.start is not None and price.start > now:
        return False
    if price.end is not None and price.end < now:
        return False
    return True


def expired(now: datetime, price: Price) -> bool:
    return price.end is not None and price.end < now
