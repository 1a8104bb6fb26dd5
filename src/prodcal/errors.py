import datetime as dt
from typing import Any, Optional


class ProductCalendarError(Exception):
    pass


class InvalidYearError(ProductCalendarError):
    def __init__(self, year: Any, first_year: int = 2015, last_year: Optional[int] = None):
        self.year = year
        if last_year is None:
            last_year = dt.date.today().year
        super().__init__(
            f"Production calendar data for year {year!r} is unavailable "
            f"(supported years: {first_year}..{last_year})."
        )


class DateOutOfRangeError(ProductCalendarError):
    def __init__(self, date: Any, reason: str = ""):
        self.date = date
        if date is None:
            message = reason or "The production calendar is empty."
        else:
            message = f"Date {date} is out of the range of the current production calendar."
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)


class ExceedMaxDaysError(ProductCalendarError):
    def __init__(self, days: int):
        self.days = days
        super().__init__(f"Number of days {days} exceeds the maximum allowed by the calendar.")


class InvalidQuarterError(ProductCalendarError):
    def __init__(self, quarter: Any):
        self.quarter = quarter
        super().__init__(f"Invalid quarter {quarter!r}. Must be between 1 and 4 inclusive.")


class IncompleteCalendarError(ProductCalendarError):
    pass


class ProviderError(ProductCalendarError):
    pass
