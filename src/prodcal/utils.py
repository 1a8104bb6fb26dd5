import re
import numpy as np
import datetime as dt
from typing import Union, Any

DateLike = Union[dt.date, dt.datetime, str, np.datetime64, Any]

# 2024-05-06 (ISO, the serialization format) or 06.05.2024 / 06/05/2024 (day first, as printed in Russia)
_YEAR_FIRST = re.compile(r"(\d{4})[-./](\d{1,2})[-./](\d{1,2})")
_DAY_FIRST = re.compile(r"(\d{1,2})[-./](\d{1,2})[-./](\d{4})")


def _parse_date_str(s: str) -> dt.date:
    """
    Parse a date string, accepting only layouts that cannot be misread.

    The year always has 4 digits and sits at one end. Year-first strings are read as Y-M-D,
    year-last strings as D.M.Y. Everything else ("20240506", "06.05.24", "May 6th") is rejected.

    Parameters
    ----------
    s: str
        The string to parse.

    Returns
    -------
    dt.date
        The date it denotes.
    """
    text = s.strip()

    match = _YEAR_FIRST.fullmatch(text)
    if match is not None:
        year, month, day = (int(g) for g in match.groups())
    else:
        match = _DAY_FIRST.fullmatch(text)
        if match is None:
            raise ValueError(
                f"Ambiguous or malformed date string: {s!r}. "
                "Use a 4-digit year with separators, e.g. '2024-05-06' or '06.05.2024'."
            )
        day, month, year = (int(g) for g in match.groups())

    try:
        return dt.date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid calendar date {s!r}: {e}") from e


def to_date(x: DateLike) -> dt.date:
    """
    Coerce a date-like value to ``datetime.date``.

    Accepted : date, datetime (time dropped), np.datetime64 of any unit, strings (see ``_parse_date_str``)
    and objects with a ``to_pydatetime()`` method such as pandas.Timestamp.
    """
    if isinstance(x, dt.datetime):
        return x.date()
    if isinstance(x, dt.date):
        return x
    if isinstance(x, np.datetime64):
        return d64_to_date(x)
    if isinstance(x, str):
        return _parse_date_str(x)
    to_py = getattr(x, "to_pydatetime", None)
    if callable(to_py):
        return to_date(to_py())
    raise ValueError(f"Cannot interpret {x!r} ({type(x).__name__}) as a date.")


def to_datetime64(x: DateLike) -> np.datetime64:
    """Convert a date-like input to np.datetime64[D], the format of the calendar index."""
    return np.datetime64(to_date(x), "D")


def d64_to_date(d64: np.datetime64) -> dt.date:
    # Epoch day count, so any unit coarser or finer than a day works
    return dt.date(1970, 1, 1) + dt.timedelta(days=int(d64.astype("datetime64[D]").astype("int64")))


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
