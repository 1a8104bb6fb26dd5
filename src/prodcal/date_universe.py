import numpy as np
from typing import Dict
from dataclasses import dataclass, field

SATURDAY = 5


@dataclass(frozen=True)
class DateUniverse:
    """
    Every day of one calendar year as a np.datetime64[D] array, Jan 1st first.

    Derived per-day arrays are computed on first access and kept :
        - weekday : Monday=0 .. Sunday=6, like datetime.date.weekday()
        - weekend : True on Saturdays and Sundays

    The default day sequence of a production calendar is the weekend mask of its universe.
    """
    year: int

    days: np.ndarray = field(init=False, repr=False, compare=False)
    _arrays: Dict[str, np.ndarray] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        first = np.datetime64(f"{self.year:04d}-01-01", "D")
        after_last = np.datetime64(f"{self.year + 1:04d}-01-01", "D")
        object.__setattr__(self, "days", np.arange(first, after_last, dtype="datetime64[D]"))

    @classmethod
    def for_year(cls, year: int) -> "DateUniverse":
        return cls(year)

    def __len__(self) -> int:
        return int(self.days.size)

    def _derived(self, key: str) -> np.ndarray:
        if key not in self._arrays:
            if key == "weekday":
                # Day 0 of the epoch, 1970-01-01, was a Thursday
                self._arrays[key] = ((self.days.astype("int64") + 3) % 7).astype("uint8")
            elif key == "weekend":
                self._arrays[key] = self.weekday >= SATURDAY
        return self._arrays[key]

    @property
    def weekday(self) -> np.ndarray:
        return self._derived("weekday")

    @property
    def weekend(self) -> np.ndarray:
        return self._derived("weekend")
