"""
Assembly of a production calendar: the default weekday-based year, overlaid with override records.
"""

from typing import Iterable, List, Optional, TYPE_CHECKING

from .day import Day, DayKind
from .date_universe import DateUniverse
from .errors import ProviderError
from .logging import get_logger
from .utils import d64_to_date

if TYPE_CHECKING:
    from .cache import CalendarCache
    from .calendar import ProductCalendar

logger = get_logger(__name__)


def build_default(year: int) -> List[Day]:
    """
    Build every day of ``year`` classified by the weekday rule only.

    Parameters
    ----------
    year: int
        The year to build.

    Returns
    -------
    List[Day]
        365 or 366 days from Jan 1st to Dec 31st, Saturdays and Sundays are weekends, the rest are workdays.
    """
    universe = DateUniverse.for_year(year)
    return [
        Day(d64_to_date(d64), DayKind.WEEKEND if is_weekend else DayKind.WORK)
        for d64, is_weekend in zip(universe.days, universe.weekend)
    ]


def _collapse_duplicates(overrides: Iterable[Day]) -> List[Day]:
    by_date = {}
    for day in overrides:
        previous = by_date.get(day.date)
        if previous is not None and previous.kind != day.kind:
            logger.warning(
                "override_duplicate_date",
                date=day.date.isoformat(),
                dropped=str(previous.kind),
                kept=str(day.kind),
            )
        by_date[day.date] = day
    return list(by_date.values())


def merge(default_days: Iterable[Day], overrides: Iterable[Day]) -> List[Day]:
    """
    Overlay override records on a default day sequence.

    Every default day falling on the same date as an override is dropped, the overrides are appended
    and the result is sorted by date. Overrides therefore win over the weekday rule for the dates they
    cover and all other dates keep their default kind. When several overrides share a date, the last one wins.

    Parameters
    ----------
    default_days: Iterable[Day]
        The default sequence, e.g. from ``build_default``.
    overrides: Iterable[Day]
        The authoritative records.

    Returns
    -------
    List[Day]
        A new list sorted by date, with exactly one day per date.
    """
    overrides = _collapse_duplicates(overrides)
    kept = [d for d in default_days if not any(d.same_date(o) for o in overrides)]
    kept.extend(overrides)
    kept.sort(key=lambda d: d.date)
    return kept


def build_calendar(year: int, overrides: Iterable[Day], cache: Optional["CalendarCache"] = None) -> "ProductCalendar":
    """
    Build the production calendar of ``year`` from its override records.

    Parameters
    ----------
    year: int
        The year of the calendar.
    overrides: Iterable[Day]
        Override records, all of which must fall in ``year``.
    cache: Optional[CalendarCache]
        The cache the calendar will live in, used by slices to extend themselves.

    Returns
    -------
    ProductCalendar
        The merged full-year calendar.
    """
    from .calendar import ProductCalendar

    overrides = list(overrides)
    foreign = [d for d in overrides if d.year != year]
    if foreign:
        raise ProviderError(
            f"Override records for {year} contain dates of another year: "
            + ", ".join(d.date.isoformat() for d in foreign)
        )

    days = merge(build_default(year), overrides)
    calendar = ProductCalendar(days, cache=cache)
    logger.debug("calendar_built", year=year, days=len(calendar), overrides=len(overrides))
    return calendar
