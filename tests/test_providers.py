from __future__ import annotations

import json
from datetime import date

import pytest
import requests

from prodcal import (
    ConsultantOverridesProvider,
    Day,
    DayKind,
    JsonOverridesProvider,
    ProductCalendarHub,
    ProviderError,
    StaticOverridesProvider,
    parse_consultant_html,
)

NBSP = "\xa0"

# Trimmed down copy of the month tables of a consultant.ru production calendar page
CONSULTANT_PAGE = f"""
<html><body>
<table class="cal">
  <thead><tr><th class="month">Апрель</th></tr></thead>
  <tbody>
    <tr>
      <td class="">1</td><td class="">2</td>
      <td class="weekend">6</td><td class="weekend">7</td>
    </tr>
    <tr>
      <td class="work">27</td><td class="weekend">28</td>
      <td class="holiday weekend">29</td><td class="holiday weekend">30</td>
      <td class="inactive">1</td>
    </tr>
  </tbody>
</table>
<table class="cal">
  <thead><tr><th class="month">Май</th></tr></thead>
  <tbody>
    <tr>
      <td class="inactive">29</td><td class="inactive">30</td>
      <td class="holiday weekend">1</td><td class="">2</td>
    </tr>
    <tr>
      <td class="">7</td><td class="preholiday">8*</td>
      <td class="holiday weekend">9</td><td class="holiday weekend">{NBSP}10{NBSP}</td>
    </tr>
  </tbody>
</table>
<table class="legend"><tr><td class="holiday">Праздник</td></tr></table>
</body></html>
"""


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[tuple[str, dict]] = []

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


# ============================================================
# 1) consultant.ru page parsing
# ============================================================
def test_parse_consultant_page() -> None:
    records = parse_consultant_html(CONSULTANT_PAGE, 2024)

    assert records == [
        Day(date(2024, 4, 27), DayKind.WORK),
        Day(date(2024, 4, 29), DayKind.HOLIDAY),
        Day(date(2024, 4, 30), DayKind.HOLIDAY),
        Day(date(2024, 5, 1), DayKind.HOLIDAY),
        Day(date(2024, 5, 8), DayKind.PREHOLIDAY),
        Day(date(2024, 5, 9), DayKind.HOLIDAY),
        Day(date(2024, 5, 10), DayKind.HOLIDAY),
    ]


def test_parse_skips_cells_of_neighbouring_months() -> None:
    records = parse_consultant_html(CONSULTANT_PAGE, 2024)
    assert date(2024, 5, 29) not in {r.date for r in records}


@pytest.mark.parametrize(
    "html, message",
    [
        ("<html><body><p>Страница не найдена</p></body></html>", "No month table"),
        ('<table><tr><th class="month">Brumaire</th></tr></table>', "Brumaire"),
        ('<table><tr><th class="month">Февраль</th></tr><tr><td class="holiday">30</td></tr></table>', "30"),
        ('<table><tr><th class="month">Март</th></tr><tr><td class="holiday">-</td></tr></table>', "'-'"),
    ],
)
def test_parse_rejects_malformed_pages(html: str, message: str) -> None:
    with pytest.raises(ProviderError, match=message):
        parse_consultant_html(html, 2024)


# ============================================================
# 2) consultant.ru provider
# ============================================================
def test_consultant_provider_fetches_the_year_page() -> None:
    session = FakeSession(FakeResponse(CONSULTANT_PAGE))
    provider = ConsultantOverridesProvider(base_url="https://example.org/calendar/", timeout=2.5, session=session)

    records = provider.fetch_overrides(2024)

    assert len(records) == 7
    (url, kwargs), = session.requests
    assert url == "https://example.org/calendar/2024"
    assert kwargs["timeout"] == 2.5
    assert "User-Agent" in kwargs["headers"]


def test_consultant_default_url() -> None:
    provider = ConsultantOverridesProvider()
    assert provider.url_for(2019) == "https://www.consultant.ru/law/ref/calendar/proizvodstvennye/2019"


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("connection refused")),
        FakeSession(error=requests.Timeout("read timed out")),
        FakeSession(FakeResponse("oops", status_code=500)),
    ],
    ids=["connection", "timeout", "http-500"],
)
def test_consultant_transport_failures(session: FakeSession) -> None:
    provider = ConsultantOverridesProvider(session=session)
    with pytest.raises(ProviderError, match="2024") as exc_info:
        provider.fetch_overrides(2024)
    assert isinstance(exc_info.value.__cause__, requests.RequestException)


def test_hub_over_scraped_page() -> None:
    session = FakeSession(FakeResponse(CONSULTANT_PAGE))
    hub = ProductCalendarHub(ConsultantOverridesProvider(session=session))

    cal = hub.get(2024)

    assert cal.info_by_date("2024-04-27").kind is DayKind.WORK
    assert cal.info_by_date("2024-05-08").kind is DayKind.PREHOLIDAY
    assert cal.info_by_date("2024-05-11").kind is DayKind.WEEKEND
    assert cal.info_by_date("2024-05-13").kind is DayKind.WORK


# ============================================================
# 3) JSON and in-memory providers
# ============================================================
def _records(*days: Day) -> list[dict]:
    return [d.as_map() for d in days]


def test_json_provider_list_layout(tmp_path, overrides_2024) -> None:
    path = tmp_path / "overrides.json"
    extra = Day(date(2023, 12, 29), DayKind.PREHOLIDAY)
    path.write_text(json.dumps(_records(*overrides_2024, extra)), encoding="utf-8")

    provider = JsonOverridesProvider(path)

    assert provider.fetch_overrides(2024) == overrides_2024
    assert provider.fetch_overrides(2023) == [extra]
    with pytest.raises(ProviderError, match="2022"):
        provider.fetch_overrides(2022)


def test_json_provider_year_layout(tmp_path, overrides_2024) -> None:
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({"2024": _records(*overrides_2024), "2025": []}), encoding="utf-8")

    provider = JsonOverridesProvider(str(path))

    assert provider.fetch_overrides(2024) == overrides_2024
    assert provider.fetch_overrides(2025) == []
    with pytest.raises(ProviderError, match="2023"):
        provider.fetch_overrides(2023)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '"2024"',
        '[{"day": "2024-01-01"}]',
        '[{"day": "2024-01-01", "kind": "Festivity"}]',
        '[{"day": "2024-01-01", "kind": "Holiday", "weekday": "Fri"}]',
    ],
    ids=["invalid-json", "scalar", "missing-kind", "unknown-kind", "weekday-mismatch"],
)
def test_json_provider_bad_files(tmp_path, content: str) -> None:
    path = tmp_path / "overrides.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ProviderError):
        JsonOverridesProvider(path).fetch_overrides(2024)


def test_json_provider_missing_file(tmp_path) -> None:
    with pytest.raises(ProviderError, match="missing.json"):
        JsonOverridesProvider(tmp_path / "missing.json").fetch_overrides(2024)


def test_static_provider_from_days(overrides_2024) -> None:
    extra = Day(date(2025, 1, 1), DayKind.HOLIDAY)
    provider = StaticOverridesProvider.from_days([*overrides_2024, extra])

    assert provider.fetch_overrides(2024) == overrides_2024
    assert provider.fetch_overrides(2025) == [extra]
    with pytest.raises(ProviderError, match="2026"):
        provider.fetch_overrides(2026)


def test_static_provider_returns_a_copy(overrides_2024) -> None:
    provider = StaticOverridesProvider(records={2024: overrides_2024})
    provider.fetch_overrides(2024).clear()
    assert len(provider.fetch_overrides(2024)) == len(overrides_2024)
