import json
import datetime as dt
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union
from dataclasses import dataclass, field

import requests
from bs4 import BeautifulSoup

from .day import Day
from .errors import ProviderError
from .logging import get_logger
from .mapping import (
    CELL_CLASSES,
    CELL_DECORATIONS,
    CONSULTANT_URL,
    DEFAULT_TIMEOUT,
    INACTIVE_CELL_CLASS,
    MONTHS,
)

logger = get_logger(__name__)

USER_AGENT = "prodcal (+https://pypi.org/project/prodcal/)"


class OverridesProvider(ABC):
    """
    Abstract base class for the sources of override records of a production calendar.
    """
    @abstractmethod
    def fetch_overrides(self, year: int) -> List[Day]:
        """
        Return the override records of a year.

        Each record carries an explicit kind: Holiday, Preholiday, or Work for a working day
        moved onto what would otherwise be a weekend.

        Parameters
        ----------
        year: int
            The year for which to fetch the records.
        """
        pass


@dataclass(frozen=True)
class StaticOverridesProvider(OverridesProvider):
    """
    Override records held in memory, keyed by year.

    Attributes
    ----------
    records: Mapping[int, Sequence[Day]]
        The override records of each known year.
    """
    records: Mapping[int, Sequence[Day]] = field(default_factory=dict)

    @classmethod
    def from_days(cls, days: Iterable[Day]) -> "StaticOverridesProvider":
        """Group a flat list of records by year."""
        records: Dict[int, List[Day]] = {}
        for day in days:
            records.setdefault(day.year, []).append(day)
        return cls(records=records)

    def fetch_overrides(self, year: int) -> List[Day]:
        try:
            return list(self.records[year])
        except KeyError:
            raise ProviderError(f"No production calendar data published for {year}.") from None


@dataclass(frozen=True)
class JsonOverridesProvider(OverridesProvider):
    """
    Override records read from a JSON file of ``Day.as_map()`` records.

    The file holds either a list of records (any years mixed) or an object mapping a year
    (as a string) to its list of records.

    Attributes
    ----------
    path: Union[str, Path]
        The JSON file to read.
    """
    path: Union[str, Path]

    def _load(self) -> Union[list, dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderError(f"Cannot read override records from {self.path}: {e}") from e

    def fetch_overrides(self, year: int) -> List[Day]:
        payload = self._load()
        if isinstance(payload, dict):
            if str(year) not in payload:
                raise ProviderError(f"No production calendar data for {year} in {self.path}.")
            raw_records = payload[str(year)]
        elif isinstance(payload, list):
            raw_records = payload
        else:
            raise ProviderError(f"Unexpected JSON layout in {self.path}: {type(payload).__name__}")

        try:
            days = [Day.from_map(r) for r in raw_records]
        except (TypeError, ValueError, AttributeError) as e:
            raise ProviderError(f"Invalid override record in {self.path}: {e}") from e

        if isinstance(payload, list):
            days = [d for d in days if d.year == year]
            if not days:
                raise ProviderError(f"No production calendar data for {year} in {self.path}.")
        return days


@dataclass(frozen=True)
class ConsultantOverridesProvider(OverridesProvider):
    """
    Override records scraped from the production calendar pages of consultant.ru.

    There is one page per year, made of one table per month. Holidays, pre-holiday days and
    working days moved onto a weekend are marked by the CSS class of their cell.

    Attributes
    ----------
    base_url: str
        The URL of the pages, the year is appended to it.
    timeout: float
        Timeout of the HTTP request, in seconds.
    session: Optional[requests.Session]
        The session to send the request with. If None, a one-off request is made.
    """
    base_url: str = CONSULTANT_URL
    timeout: float = DEFAULT_TIMEOUT
    session: Optional[requests.Session] = field(default=None, compare=False, repr=False)

    def url_for(self, year: int) -> str:
        return f"{self.base_url.rstrip('/')}/{year}"

    def fetch_overrides(self, year: int) -> List[Day]:
        url = self.url_for(year)
        http = self.session if self.session is not None else requests
        try:
            response = http.get(url, timeout=self.timeout, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("overrides_fetch_failed", year=year, url=url, error=str(e))
            raise ProviderError(f"Failed to fetch the production calendar of {year} from {url}: {e}") from e

        return parse_consultant_html(response.text, year)


def _cell_date(cell, year: int, month: int) -> dt.date:
    text = cell.get_text()
    for decoration in CELL_DECORATIONS:
        text = text.replace(decoration, "")
    text = text.strip()
    try:
        return dt.date(year, month, int(text))
    except ValueError as e:
        raise ProviderError(f"Invalid day {text!r} in month {month} of {year}: {e}") from e


def parse_consultant_html(html: str, year: int) -> List[Day]:
    """
    Extract the override records from a consultant.ru production calendar page.

    Parameters
    ----------
    html: str
        The page content.
    year: int
        The year the page is about.

    Returns
    -------
    List[Day]
        The holidays, pre-holiday days and moved working days of the year, month by month.
    """
    soup = BeautifulSoup(html, "html.parser")

    records: List[Day] = []
    n_months = 0
    for table in soup.find_all("table"):
        month_element = table.select_one(".month")
        if month_element is None:
            continue

        month_name = month_element.get_text(strip=True)
        month = MONTHS.get(month_name)
        if month is None:
            raise ProviderError(f"Unknown month name {month_name!r} in the production calendar of {year}.")
        n_months += 1

        for cell in table.find_all("td"):
            classes = cell.get("class") or []
            if INACTIVE_CELL_CLASS in classes:
                continue
            kind = next((k for css, k in CELL_CLASSES.items() if css in classes), None)
            if kind is None:
                continue
            records.append(Day(_cell_date(cell, year, month), kind))

    if n_months == 0:
        raise ProviderError(f"No month table found in the production calendar page of {year}.")

    logger.debug("overrides_parsed", year=year, months=n_months, records=len(records))
    return records
