import threading
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from .logging import get_logger

if TYPE_CHECKING:
    from .calendar import ProductCalendar

logger = get_logger(__name__)


class CalendarCache:
    """
    In-memory mapping year -> full-year ProductCalendar, filled lazily and never evicted.

    One lock guards the mapping itself. Each year also gets its own build lock, held while the
    calendar of that year is fetched and merged: concurrent callers asking for the same year wait
    for a single build, while builds of different years do not block each other.

    A cache is created once by whoever assembles calendars (see ``ProductCalendarHub``) and lives
    as long as it does.
    """

    def __init__(self) -> None:
        self._calendars: Dict[int, "ProductCalendar"] = {}
        self._build_locks: Dict[int, threading.Lock] = {}
        self._lock = threading.Lock()

    def __contains__(self, year: int) -> bool:
        with self._lock:
            return year in self._calendars

    def __len__(self) -> int:
        with self._lock:
            return len(self._calendars)

    def years(self) -> List[int]:
        with self._lock:
            return sorted(self._calendars)

    def peek(self, year: int) -> Optional["ProductCalendar"]:
        """Return the cached calendar of ``year`` without building it, None on a miss."""
        with self._lock:
            return self._calendars.get(year)

    def get_or_build(self, year: int, factory: Callable[[int], "ProductCalendar"]) -> "ProductCalendar":
        """
        Return the cached calendar of ``year``, building it with ``factory(year)`` on a miss.

        The factory runs at most once per year, even with concurrent callers. If it raises,
        nothing is cached and the error propagates; the next caller tries again.

        Parameters
        ----------
        year: int
            The year of the calendar.
        factory: Callable[[int], ProductCalendar]
            Builds the full-year calendar.

        Returns
        -------
        ProductCalendar
            The calendar of the year.
        """
        with self._lock:
            calendar = self._calendars.get(year)
            if calendar is not None:
                logger.debug("calendar_cache_hit", year=year)
                return calendar
            build_lock = self._build_locks.setdefault(year, threading.Lock())

        with build_lock:
            # Another caller may have built it while we were waiting
            with self._lock:
                calendar = self._calendars.get(year)
            if calendar is not None:
                logger.debug("calendar_cache_hit", year=year)
                return calendar

            logger.debug("calendar_cache_miss", year=year)
            calendar = factory(year)
            with self._lock:
                self._calendars[year] = calendar
            return calendar

    def clear(self) -> None:
        with self._lock:
            self._calendars.clear()
            self._build_locks.clear()
