"""Store time zones and storefront languages."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo


class Language(StrEnum):
    """Languages a catalog item can be localized into."""

    RUSSIAN = "russian"
    ENGLISH = "english"

    @classmethod
    def parse(cls, value: str | None) -> Language | None:
        """Accept full names as well as the three-letter codes used upstream."""

        match (value or "").strip().lower():
            case "russian" | "rus":
                return cls.RUSSIAN
            case "english" | "eng":
                return cls.ENGLISH
            case _:
                return None


class StoreTimeZone(StrEnum):
    """The regional storefronts; each one has its own calendar day."""

    MOSCOW = "moscow"
    YEKATERINBURG = "yekaterinburg"
    IRKUTSK = "irkutsk"
    OMSK = "omsk"

    @property
    def zone_name(self) -> str:
        return _ZONE_NAMES[self]

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.zone_name)

    def store_time(self, instant: datetime) -> datetime:
        return instant.astimezone(self.zone)

    def local_date(self, instant: datetime) -> date:
        """Calendar date of ``instant`` as seen by this store."""

        return self.store_time(instant).date()

    @classmethod
    def parse(cls, value: str | None) -> StoreTimeZone | None:
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


_ZONE_NAMES = {
    StoreTimeZone.MOSCOW: "Europe/Moscow",
    StoreTimeZone.YEKATERINBURG: "Asia/Yekaterinburg",
    StoreTimeZone.IRKUTSK: "Asia/Irkutsk",
    StoreTimeZone.OMSK: "Asia/Omsk",
}
