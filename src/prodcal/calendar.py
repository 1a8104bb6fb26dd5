import numpy as np
import datetime as dt
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union, TYPE_CHECKING

from .day import Day, DayKind
from .statistic import Statistic
from .utils import DateLike, to_date, to_datetime64, is_leap_year
from .errors import (
    DateOutOfRangeError,
    ExceedMaxDaysError,
    IncompleteCalendarError,
    InvalidQuarterError,
)

if TYPE_CHECKING:
    from .cache import CalendarCache

# Quarter lengths in days, the fourth quarter takes whatever is left of the year
FIRST_QUARTER_DAYS = {365: 89, 366: 90}
MIDDLE_QUARTER_DAYS = 92


def _quarter_bounds(n_days: int) -> Tuple[int, int, int, int, int]:
    """Start index of each quarter of a full year of ``n_days`` days, followed by ``n_days``."""
    q2 = FIRST_QUARTER_DAYS[n_days]
    q3 = q2 + MIDDLE_QUARTER_DAYS
    q4 = q3 + MIDDLE_QUARTER_DAYS
    return 0, q2, q3, q4, n_days


class ProductCalendar:
    """
    Structure representing a production calendar, or a period of one.

    It is defined by :
        - An ordered tuple of Day, strictly ascending by date without duplicates.
        - A np.datetime64[D] index of these dates, used to locate days by binary search.
        - A boolean mask of the same length, where True indicates a working day (Work or Preholiday).

    A calendar freshly built for a year is contiguous from Jan 1st to Dec 31st. Every query returning days
    returns a new independent ProductCalendar, never a view on this one.

    The calendar optionally remembers the CalendarCache it was built through. Periods taken from it keep
    that reference, which lets them grow back into the full cached year (``extend_forward``/``extend_backward``).
    """

    def __init__(self, days: Iterable[Day], *, cache: Optional["CalendarCache"] = None):
        """
        Parameters
        ----------
        days: Iterable[Day]
            The days of the calendar, sorted by date without duplicates.
        cache: Optional[CalendarCache]
            The cache holding the full-year calendars this calendar belongs to.
        """
        self._days: Tuple[Day, ...] = tuple(days)
        self._cache = cache

        self._dates64: np.ndarray = np.array([d.date for d in self._days], dtype="datetime64[D]")
        self._working: np.ndarray = np.array([d.is_working for d in self._days], dtype=bool)

        if self._dates64.size > 1 and np.any(np.diff(self._dates64) <= np.timedelta64(0, "D")):
            raise ValueError("Days of a production calendar must be sorted by date without duplicates.")

    # ---------------------------------------
    # |            Helper methods           |
    # ---------------------------------------

    def _locate(self, day: DateLike) -> int:
        """
        Give the index of the given date in the calendar.

        Parameters
        ----------
        day: DateLike
            The date to locate. Can be any date-like object (str, datetime, date, np.datetime64, etc.).

        Returns
        -------
        int
            The index i such that self[i].date == day.
        """
        d64 = to_datetime64(day)
        i = int(np.searchsorted(self._dates64, d64))
        if i >= self._dates64.size or self._dates64[i] != d64:
            raise DateOutOfRangeError(to_date(day))
        return i

    def _slice(self, i0: int, i1: int) -> "ProductCalendar":
        """New calendar holding the days [i0, i1)."""
        return ProductCalendar(self._days[i0:i1], cache=self._cache)

    def _require_full_year(self) -> None:
        """Fail fast unless this calendar is one unbroken calendar year."""
        n = len(self)
        first, last = self.first(), self.last()
        if (
            first is None
            or (first.date.month, first.date.day) != (1, 1)
            or last.date != dt.date(first.year, 12, 31)
            or n != (366 if is_leap_year(first.year) else 365)
        ):
            span = f"from {first.date} to {last.date}" if first is not None else "in an empty calendar"
            raise IncompleteCalendarError(
                f"Quarters can only be extracted from a full calendar year, got {n} days {span}."
            )

    def _cached_full_year(self) -> "ProductCalendar":
        """Full-year calendar this calendar was taken from, as held by the cache."""
        first = self.first()
        if first is None:
            raise DateOutOfRangeError(None, "An empty calendar cannot be extended.")
        full = self._cache.peek(first.year) if self._cache is not None else None
        if full is None:
            raise DateOutOfRangeError(first.date, f"The calendar of {first.year} is not cached.")
        return full

    # ---------------------------------------
    # |          Public API methods         |
    # ---------------------------------------

    # ----------------------------------------
    # 1. Static information about the calendar
    # ----------------------------------------

    def __len__(self) -> int:
        return len(self._days)

    def __iter__(self) -> Iterator[Day]:
        return iter(self._days)

    def __getitem__(self, index: Union[int, slice]) -> Union[Day, "ProductCalendar"]:
        if isinstance(index, slice):
            return ProductCalendar(self._days[index], cache=self._cache)
        return self._days[index]

    def __contains__(self, day: Union[Day, DateLike]) -> bool:
        d = day.date if isinstance(day, Day) else to_date(day)
        return self.info_by_date(d) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductCalendar):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        if not self._days:
            return "ProductCalendar(days=0)"
        return f"ProductCalendar(days={len(self)}, start={self._days[0].date}, end={self._days[-1].date})"

    @property
    def days(self) -> Tuple[Day, ...]:
        return self._days

    @property
    def year(self) -> Optional[int]:
        """Year of the first day, None for an empty calendar."""
        return self._days[0].year if self._days else None

    def total_days(self) -> int:
        """Return the number of days in the calendar."""
        return len(self._days)

    def first(self) -> Optional[Day]:
        return self._days[0] if self._days else None

    def last(self) -> Optional[Day]:
        return self._days[-1] if self._days else None

    def info_by_date(self, day: DateLike) -> Optional[Day]:
        """
        Return the Day of the given date.

        Parameters
        ----------
        day: DateLike
            The date to look up.

        Returns
        -------
        Optional[Day]
            The Day, or None if the date is not in the calendar.
        """
        try:
            return self._days[self._locate(day)]
        except DateOutOfRangeError:
            return None

    # ----------------------------------------
    # 2. Periods
    # ----------------------------------------

    def period_by_number_of_days(self, day: DateLike, n_days: int) -> "ProductCalendar":
        """
        Return the ``n_days`` consecutive days starting at the given date (included).

        Parameters
        ----------
        day: DateLike
            The first day of the period.
        n_days: int
            The number of days in the period. 0 gives an empty calendar.

        Returns
        -------
        ProductCalendar
            The period as a new calendar.
        """
        if n_days < 0:
            raise ValueError(f"Number of days must be non-negative, got {n_days}")
        i = self._locate(day)
        if i + n_days > len(self):
            raise ExceedMaxDaysError(n_days)
        return self._slice(i, i + n_days)

    def period_by_number_of_work_days(self, day: DateLike, n_work_days: int) -> "ProductCalendar":
        """
        Return the shortest period starting at the given date that contains ``n_work_days`` working days.

        Work and Preholiday days are counted, the start day included when it is one of them.
        Weekends and holidays inside the period are part of it but are not counted.

        Parameters
        ----------
        day: DateLike
            The first day of the period.
        n_work_days: int
            The number of working days to count. 0 gives an empty calendar.

        Returns
        -------
        ProductCalendar
            The period as a new calendar, ending on its n-th working day.
        """
        if n_work_days < 0:
            raise ValueError(f"Number of work days must be non-negative, got {n_work_days}")
        i = self._locate(day)
        if n_work_days == 0:
            return self._slice(i, i)

        counted = np.cumsum(self._working[i:])
        pos = int(np.searchsorted(counted, n_work_days, side="left"))
        if pos >= counted.size:
            raise ExceedMaxDaysError(n_work_days)
        return self._slice(i, i + pos + 1)

    def period_slice(self, start: DateLike, end: DateLike) -> "ProductCalendar":
        """
        Return the days between two dates, both included.

        Parameters
        ----------
        start: DateLike
            The first day of the period.
        end: DateLike
            The last day of the period, not before ``start``.

        Returns
        -------
        ProductCalendar
            The period as a new calendar.
        """
        i0 = self._locate(start)
        i1 = self._locate(end)
        if i1 < i0:
            raise DateOutOfRangeError(to_date(end), f"It precedes the start date {to_date(start)}.")
        return self._slice(i0, i1 + 1)

    def extract_dates_in_quarter(self, quarter: int) -> "ProductCalendar":
        """
        Return the days of one quarter of the year.

        Quarters are fixed day offsets from Jan 1st : the first quarter holds 89 days (90 in a leap year),
        the second and third 92 days each and the fourth the remaining days. The second quarter therefore
        starts on March 31st. This only makes sense for a full calendar year; any other calendar is rejected.

        Parameters
        ----------
        quarter: int
            The quarter, from 1 to 4.

        Returns
        -------
        ProductCalendar
            The days of the quarter as a new calendar.
        """
        if isinstance(quarter, bool) or not isinstance(quarter, (int, np.integer)) or not 1 <= quarter <= 4:
            raise InvalidQuarterError(quarter)
        self._require_full_year()

        bounds = _quarter_bounds(len(self))
        return self._slice(bounds[quarter - 1], bounds[quarter])

    def after_nth_weeks(self, day: DateLike, weeks: int) -> Day:
        """
        Return the day falling ``weeks`` weeks after the given date.

        Parameters
        ----------
        day: DateLike
            The starting date.
        weeks: int
            The number of weeks to move forward.

        Returns
        -------
        Day
            The day at the index of ``day`` plus ``weeks * 7``.
        """
        i = self._locate(day)
        j = i + weeks * 7
        if j < 0 or j >= len(self):
            raise ExceedMaxDaysError(weeks * 7)
        return self._days[j]

    def next_work_day(self, day: DateLike) -> Day:
        """
        Return the first working day (Work or Preholiday) strictly after the given date.

        Parameters
        ----------
        day: DateLike
            The reference date.

        Returns
        -------
        Day
            The next working day in the calendar.
        """
        i = self._locate(day)
        following = np.flatnonzero(self._working[i + 1:])
        if following.size == 0:
            raise DateOutOfRangeError(to_date(day), "No working day follows it in the calendar.")
        return self._days[i + 1 + int(following[0])]

    # ----------------------------------------
    # 3. Growing a period back into its year
    # ----------------------------------------

    def extend_forward(self, days: int) -> "ProductCalendar":
        """
        Return this period lengthened by ``days`` days at its end.

        The days are taken from the full calendar of the same year, which must be in the cache.

        Parameters
        ----------
        days: int
            The number of days to add.

        Returns
        -------
        ProductCalendar
            The extended period as a new calendar.
        """
        if days < 0:
            raise ValueError(f"Number of days must be non-negative, got {days}")
        full = self._cached_full_year()
        first = self.first()
        try:
            return full.period_by_number_of_days(first.date, len(self) + days)
        except ExceedMaxDaysError as e:
            raise DateOutOfRangeError(
                self.last().date + dt.timedelta(days=days),
                f"Extending by {days} days crosses the end of {first.year}.",
            ) from e

    def extend_backward(self, days: int) -> "ProductCalendar":
        """
        Return this period lengthened by ``days`` days at its start.

        The days are taken from the full calendar of the same year, which must be in the cache.

        Parameters
        ----------
        days: int
            The number of days to add.

        Returns
        -------
        ProductCalendar
            The extended period as a new calendar.
        """
        if days < 0:
            raise ValueError(f"Number of days must be non-negative, got {days}")
        full = self._cached_full_year()
        first, last = self.first(), self.last()
        i0 = full._locate(first.date) - days
        i1 = full._locate(last.date)
        if i0 < 0:
            raise DateOutOfRangeError(
                first.date - dt.timedelta(days=days),
                f"Extending by {days} days crosses the start of {first.year}.",
            )
        return full._slice(i0, i1 + 1)

    # ----------------------------------------
    # 4. Filters and aggregates
    # ----------------------------------------

    def by_kind(self, kind: Union[DayKind, str]) -> "ProductCalendar":
        """Return the days of the given kind, in calendar order."""
        kind = DayKind.parse(kind)
        return ProductCalendar([d for d in self._days if d.kind is kind], cache=self._cache)

    def work_days(self) -> "ProductCalendar":
        """Return the Work and Preholiday days, in calendar order."""
        return ProductCalendar([d for d, w in zip(self._days, self._working) if w], cache=self._cache)

    def statistic(self) -> Statistic:
        return Statistic.from_kinds(d.kind for d in self._days)

    def as_maps(self) -> List[Dict[str, str]]:
        """Export the calendar as a list of ``Day.as_map()`` records."""
        return [d.as_map() for d in self._days]
