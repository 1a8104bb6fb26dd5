import datetime as dt
from enum import Enum
from typing import Dict, Mapping, Optional, Union
from dataclasses import dataclass, field, replace

from .utils import DateLike, to_date


class Weekday(Enum):
    """Day of the week, Monday=0 like ``datetime.date.weekday()``."""
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    def __str__(self) -> str:
        return self.name.capitalize()

    @property
    def is_weekend(self) -> bool:
        return self.value >= Weekday.SAT.value

    @classmethod
    def of(cls, day: dt.date) -> "Weekday":
        return cls(day.weekday())

    @classmethod
    def parse(cls, name: str) -> "Weekday":
        """Parse "Mon" or "Monday" (any case)."""
        if not isinstance(name, str):
            raise ValueError(f"Unknown weekday name: {name!r}")
        key = name.strip().upper()[:3]
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown weekday name: {name!r}") from None


class DayKind(Enum):
    WORK = "Work"
    WEEKEND = "Weekend"
    HOLIDAY = "Holiday"
    PREHOLIDAY = "Preholiday"

    def __str__(self) -> str:
        return self.value

    @property
    def is_working(self) -> bool:
        """Work and Preholiday days count as working days."""
        return self in (DayKind.WORK, DayKind.PREHOLIDAY)

    @classmethod
    def parse(cls, value: Union[str, "DayKind"]) -> "DayKind":
        if isinstance(value, DayKind):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown day kind: {value!r}")
        for kind in cls:
            if kind.value.lower() == value.strip().lower():
                return kind
        raise ValueError(f"Unknown day kind: {value!r}")


def default_kind(day: dt.date) -> DayKind:
    return DayKind.WEEKEND if Weekday.of(day).is_weekend else DayKind.WORK


@dataclass(frozen=True)
class Day:
    """
    One calendar date with its weekday and classification.

    The weekday is derived from the date in ``__post_init__`` and cannot be passed in,
    so it never contradicts the date. ``==`` compares every field; merging and
    deduplication compare dates only through ``same_date``.

    Attributes
    ----------
    date: dt.date
        The calendar date.
    kind: DayKind
        The classification of the day. Defaults to the weekday rule (Sat/Sun are weekends).
    """
    date: dt.date
    kind: Optional[DayKind] = None
    weekday: Weekday = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_date(self.date))
        if self.kind is None:
            object.__setattr__(self, "kind", default_kind(self.date))
        else:
            object.__setattr__(self, "kind", DayKind.parse(self.kind))
        object.__setattr__(self, "weekday", Weekday.of(self.date))

    # ---------------------------------------
    # |            Construction             |
    # ---------------------------------------

    @classmethod
    def from_date(cls, day: DateLike) -> "Day":
        """Build the default day for a date, classified by the weekday rule."""
        return cls(to_date(day))

    def with_kind(self, kind: Union[DayKind, str]) -> "Day":
        """Return a copy of this day with another classification."""
        return replace(self, kind=DayKind.parse(kind))

    @classmethod
    def from_map(cls, mapping: Mapping[str, str]) -> "Day":
        """
        Rebuild a day from the output of ``as_map``.

        Parameters
        ----------
        mapping: Mapping[str, str]
            A mapping with "day" (ISO date), "kind" and optionally "weekday".

        Returns
        -------
        Day
            The reconstructed day.
        """
        try:
            raw_date = mapping["day"]
            raw_kind = mapping["kind"]
        except KeyError as e:
            raise ValueError(f"Day mapping is missing key {e.args[0]!r}: {dict(mapping)!r}") from None

        day = cls(to_date(raw_date), DayKind.parse(raw_kind))
        raw_weekday = mapping.get("weekday")
        if raw_weekday is not None and Weekday.parse(raw_weekday) != day.weekday:
            raise ValueError(
                f"Weekday {raw_weekday!r} does not match date {day.date.isoformat()} ({day.weekday!s})."
            )
        return day

    # ---------------------------------------
    # |              Queries                |
    # ---------------------------------------

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def is_working(self) -> bool:
        return self.kind.is_working

    def same_date(self, other: "Day") -> bool:
        """True when both days fall on the same calendar date, whatever their kind."""
        return self.date == other.date

    def __lt__(self, other: "Day") -> bool:
        # Ordered by date only, sorting never looks at the kind
        if not isinstance(other, Day):
            return NotImplemented
        return self.date < other.date

    def as_map(self) -> Dict[str, str]:
        return {
            "weekday": str(self.weekday),
            "day": self.date.isoformat(),
            "kind": str(self.kind),
        }

    def __str__(self) -> str:
        return f"Day(day={self.date.isoformat()}, kind={self.kind!s}, weekday={self.weekday!s})"
