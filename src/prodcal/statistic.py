from typing import Dict, Iterable
from dataclasses import dataclass

from .day import DayKind

WORK_DAY_HOURS = 8
PREHOLIDAY_HOURS = 7


@dataclass(frozen=True)
class Statistic:
    """
    Count of each kind of day over a day sequence.

    A standard working day lasts 8 hours, a pre-holiday day is shortened to 7 hours.
    """
    holidays: int = 0
    work_days: int = 0
    weekends: int = 0
    preholidays: int = 0

    @classmethod
    def from_kinds(cls, kinds: Iterable[DayKind]) -> "Statistic":
        counts = {kind: 0 for kind in DayKind}
        for kind in kinds:
            counts[kind] += 1
        return cls(
            holidays=counts[DayKind.HOLIDAY],
            work_days=counts[DayKind.WORK],
            weekends=counts[DayKind.WEEKEND],
            preholidays=counts[DayKind.PREHOLIDAY],
        )

    def rest_days(self) -> int:
        return self.holidays + self.weekends

    def work_hours(self) -> int:
        return self.work_days * WORK_DAY_HOURS + self.preholidays * PREHOLIDAY_HOURS

    def total_days(self) -> int:
        return self.holidays + self.work_days + self.weekends + self.preholidays

    def as_map(self) -> Dict[str, int]:
        # Key names are part of the export format, "prelolidays" included.
        return {
            "holidays": self.holidays,
            "workdays": self.work_days,
            "weekends": self.weekends,
            "prelolidays": self.preholidays,
        }

    def __str__(self) -> str:
        return (
            f"Statistic(holidays={self.holidays}, work_days={self.work_days}, "
            f"weekends={self.weekends}, preholidays={self.preholidays}, "
            f"rest_days={self.rest_days()}, work_hours={self.work_hours()})"
        )
