"""
prodcal

Production calendar of a year : every day classified as Work, Weekend, Holiday or Preholiday
(shortened pre-holiday workday), by overlaying authoritative override records on the default
weekday rule, and queried through period slices, working-day windows, quarters and statistics.

Usage:
    cal = get_product_calendar(2024)

    cal.statistic()                                   # Statistic(holidays=17, work_days=243, ...)
    cal.period_by_number_of_days("2024-05-06", 3)     # 3 days starting on May 6th
    cal.next_work_day("2024-06-11")                   # Day(day=2024-06-13, kind=Work, weekday=Thu)
    cal.extract_dates_in_quarter(2)

Override records come from an OverridesProvider; by default they are scraped from consultant.ru.
Assembled calendars are kept in a CalendarCache for the lifetime of the hub that built them.
"""

from __future__ import annotations

import threading
import datetime as dt
from typing import Any, Optional

from .builder import build_calendar, build_default, merge
from .cache import CalendarCache
from .calendar import ProductCalendar
from .day import Day, DayKind, Weekday
from .errors import (
    DateOutOfRangeError,
    ExceedMaxDaysError,
    IncompleteCalendarError,
    InvalidQuarterError,
    InvalidYearError,
    ProductCalendarError,
    ProviderError,
)
from .logging import get_logger
from .mapping import FIRST_PUBLISHED_YEAR
from .providers import (
    ConsultantOverridesProvider,
    JsonOverridesProvider,
    OverridesProvider,
    StaticOverridesProvider,
    parse_consultant_html,
)
from .statistic import Statistic

__version__ = "0.3.0"

logger = get_logger(__name__)


def _current_year() -> int:
    return dt.date.today().year


# =========================
# ProductCalendarHub (final class)
# =========================
class ProductCalendarHub:
    """
    Final façade class: validates years, fetches override records and caches assembled calendars.

    Usage:
        hub = ProductCalendarHub.default()
        cal = hub.get(2024)

        # offline, from a JSON file of Day.as_map() records
        hub = ProductCalendarHub(JsonOverridesProvider("overrides.json"))
    """

    def __init__(
        self,
        provider: OverridesProvider,
        cache: Optional[CalendarCache] = None,
        *,
        first_year: int = FIRST_PUBLISHED_YEAR,
    ):
        self.provider = provider
        self.cache = cache if cache is not None else CalendarCache()
        self.first_year = first_year

    # ---------- factories
    @classmethod
    def default(cls, **provider_options: Any) -> "ProductCalendarHub":
        """Hub scraping consultant.ru, ``provider_options`` go to ConsultantOverridesProvider."""
        return cls(ConsultantOverridesProvider(**provider_options))

    # ---------- years
    def validate_year(self, year: Optional[int] = None) -> int:
        """
        Resolve the requested year: the current year when None, otherwise a year with published data.
        """
        current = _current_year()
        if year is None:
            return current
        if isinstance(year, bool) or not isinstance(year, int):
            raise InvalidYearError(year, self.first_year, current)
        if not self.first_year <= year <= current:
            raise InvalidYearError(year, self.first_year, current)
        return year

    # ---------- calendars
    def get(self, year: Optional[int] = None) -> ProductCalendar:
        """Return the production calendar of ``year`` (current year when None), building it on first use."""
        year = self.validate_year(year)
        return self.cache.get_or_build(year, self._build)

    def _build(self, year: int) -> ProductCalendar:
        try:
            overrides = list(self.provider.fetch_overrides(year))
        except ProviderError:
            raise
        except Exception as e:
            # Rewrap for a uniform error surface
            raise ProviderError(f"Override records for {year} are unavailable: {e}") from e

        logger.info("overrides_fetched", year=year, records=len(overrides), provider=type(self.provider).__name__)
        return build_calendar(year, overrides, cache=self.cache)


# =========================
# Process-wide default hub
# =========================
_default_hub: Optional[ProductCalendarHub] = None
_default_hub_lock = threading.Lock()


def get_default_hub() -> ProductCalendarHub:
    """Hub used by ``get_product_calendar``, created on first use and kept for the process lifetime."""
    global _default_hub
    with _default_hub_lock:
        if _default_hub is None:
            _default_hub = ProductCalendarHub.default()
        return _default_hub


def set_default_hub(hub: Optional[ProductCalendarHub]) -> None:
    """Replace the hub used by ``get_product_calendar``; None restores the consultant.ru default on next use."""
    global _default_hub
    with _default_hub_lock:
        _default_hub = hub


def get_product_calendar(year: Optional[int] = None) -> ProductCalendar:
    """
    Return the production calendar of a year.

    Parameters
    ----------
    year: Optional[int]
        The year, from 2015 to the current year. If None, the current year.

    Returns
    -------
    ProductCalendar
        The full-year calendar, shared through the cache of the default hub.
    """
    return get_default_hub().get(year)


__all__ = [
    "CalendarCache",
    "ConsultantOverridesProvider",
    "DateOutOfRangeError",
    "Day",
    "DayKind",
    "ExceedMaxDaysError",
    "IncompleteCalendarError",
    "InvalidQuarterError",
    "InvalidYearError",
    "JsonOverridesProvider",
    "OverridesProvider",
    "ProductCalendar",
    "ProductCalendarError",
    "ProductCalendarHub",
    "ProviderError",
    "StaticOverridesProvider",
    "Statistic",
    "Weekday",
    "build_calendar",
    "build_default",
    "get_default_hub",
    "get_product_calendar",
    "merge",
    "parse_consultant_html",
    "set_default_hub",
]
