from __future__ import annotations

from datetime import date

import pytest

from prodcal import (
    CalendarCache,
    Day,
    DayKind,
    ProductCalendarHub,
    StaticOverridesProvider,
    build_calendar,
)


def _days(kind: DayKind, *isodates: str) -> list[Day]:
    return [Day(date.fromisoformat(d), kind) for d in isodates]


# Official 2024 production calendar: 17 weekday holidays, 5 shortened days
# (Nov 2nd is a shortened working Saturday) and 2 more working Saturdays.
OVERRIDES_2024 = (
    _days(
        DayKind.HOLIDAY,
        "2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05", "2024-01-08",
        "2024-02-23", "2024-03-08", "2024-04-29", "2024-04-30", "2024-05-01",
        "2024-05-09", "2024-05-10", "2024-06-12", "2024-11-04", "2024-12-30", "2024-12-31",
    )
    + _days(DayKind.PREHOLIDAY, "2024-02-22", "2024-03-07", "2024-05-08", "2024-06-11", "2024-11-02")
    + _days(DayKind.WORK, "2024-04-27", "2024-12-28")
)


@pytest.fixture
def overrides_2024() -> list[Day]:
    return list(OVERRIDES_2024)


@pytest.fixture
def provider(overrides_2024) -> StaticOverridesProvider:
    return StaticOverridesProvider(records={2024: overrides_2024, 2025: []})


@pytest.fixture
def hub(provider) -> ProductCalendarHub:
    return ProductCalendarHub(provider, CalendarCache())


@pytest.fixture
def cal_2024(hub):
    return hub.get(2024)


@pytest.fixture
def uncached_2024(overrides_2024):
    return build_calendar(2024, overrides_2024)
