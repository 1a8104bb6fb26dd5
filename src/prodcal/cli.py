"""
Command-line interface to view and query production calendars.

Workdays are shown as regular numbers, pre-holiday days with a star (7*),
weekends in parentheses (7) and holidays in brackets [7].
"""

from __future__ import annotations

import sys
import json
from datetime import date
from typing import List, Optional

import click

from . import (
    ConsultantOverridesProvider,
    JsonOverridesProvider,
    ProductCalendar,
    ProductCalendarError,
    ProductCalendarHub,
)
from .day import DayKind
from .logging import configure_logging
from .mapping import CONSULTANT_URL, DEFAULT_TIMEOUT
from .utils import to_date

MONTHS = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

WEEKDAYS = ['Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa', 'Su']


def _day_cell(day_number: int, kind: Optional[DayKind]) -> str:
    if kind is DayKind.HOLIDAY:
        return f'[{day_number:2}]'
    if kind is DayKind.WEEKEND:
        return f'({day_number:2})'
    if kind is DayKind.PREHOLIDAY:
        return f' {day_number:2}*'
    return f' {day_number:2} '


def render_month(calendar: ProductCalendar, year: int, month: int, print_year: bool = False) -> str:
    """
    Render a single month calendar.

    Args:
        calendar: Production calendar holding the month
        year: Year to render
        month: Month to render (1-12)
        print_year: Whether to include year in title

    Returns:
        String representation of the month
    """
    from calendar import monthrange

    lines = []

    title = MONTHS[month - 1]
    if print_year:
        title += f' {year}'
    lines.append(f'{title:^28}'.rstrip())

    # Each day column is 4 characters wide
    header = ''.join(f' {day} ' for day in WEEKDAYS)
    lines.append(header.rstrip())

    last_day = monthrange(year, month)[1]
    first_date = date(year, month, 1)
    current_line = ' ' * (4 * first_date.weekday())

    for day in range(1, last_day + 1):
        d = date(year, month, day)
        info = calendar.info_by_date(d)
        current_line += _day_cell(day, info.kind if info is not None else None)

        if d.weekday() == 6:
            lines.append(current_line)
            current_line = ''

    if current_line:
        lines.append(current_line)

    return '\n'.join(lines)


def concat_months(month_strings: List[str], width: int = 28) -> str:
    """
    Concatenate multiple month strings horizontally.

    Args:
        month_strings: List of month string representations
        width: Width of each month column

    Returns:
        Horizontally concatenated months
    """
    as_lines = [s.splitlines() for s in month_strings]
    max_lines = max(len(lines) for lines in as_lines)

    for lines in as_lines:
        missing_lines = max_lines - len(lines)
        if missing_lines:
            lines.extend([' ' * width] * missing_lines)

    rows = []
    for row_parts in zip(*as_lines):
        row_parts = [part.ljust(width) for part in row_parts]
        rows.append('   '.join(row_parts))

    return '\n'.join(row.rstrip() for row in rows)


def render_year(calendar: ProductCalendar, year: int) -> str:
    """
    Render a full year calendar (3 months per row).

    Args:
        calendar: Production calendar of the year
        year: Year to render

    Returns:
        String representation of the full year
    """
    month_strings = []
    for row in range(4):
        row_months = [render_month(calendar, year, row * 3 + col + 1) for col in range(3)]
        month_strings.append(row_months)

    output = [f'{year:^88}'.rstrip()]
    output.append('\n\n'.join(concat_months(ms, 28) for ms in month_strings))
    return '\n'.join(output)


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _echo_days(calendar: ProductCalendar, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(calendar.as_maps(), ensure_ascii=False, indent=2))
        return
    for day in calendar:
        click.echo(str(day))


@click.group()
@click.option('--overrides-file', type=click.Path(exists=True, dir_okay=False), envvar='PRODCAL_OVERRIDES_FILE',
              help='JSON file of override records to use instead of consultant.ru')
@click.option('--url', default=CONSULTANT_URL, show_default=True, envvar='PRODCAL_URL',
              help='Base URL of the yearly production calendar pages')
@click.option('--timeout', type=float, default=DEFAULT_TIMEOUT, show_default=True, envvar='PRODCAL_TIMEOUT',
              help='HTTP timeout in seconds')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.option('--json-logs', is_flag=True, help='Output logs as JSON')
@click.pass_context
def main(ctx, overrides_file: Optional[str], url: str, timeout: float, verbose: bool, json_logs: bool):
    """
    Production calendar: workdays, weekends, holidays and pre-holiday days of a year.

    Examples:

        # Show the production calendar of 2024
        prodcal show 2024

        # Show May 2024 only
        prodcal show 2024 5

        # Statistic of the second quarter
        prodcal stats 2024 --quarter 2

        # Work offline from an exported file
        prodcal --overrides-file overrides.json stats 2024
    """
    configure_logging(level="DEBUG" if verbose else "WARNING", json_output=json_logs)

    if overrides_file:
        provider = JsonOverridesProvider(overrides_file)
    else:
        provider = ConsultantOverridesProvider(base_url=url, timeout=timeout)
    ctx.obj = ProductCalendarHub(provider)


@main.command()
@click.argument('year', type=int, required=False)
@click.argument('month', type=click.IntRange(1, 12), required=False)
@click.pass_obj
def show(hub: ProductCalendarHub, year: Optional[int], month: Optional[int]):
    """Display the calendar of a year, or of one of its months."""
    try:
        calendar = hub.get(year)
    except ProductCalendarError as e:
        _fail(e)

    year = calendar.year
    if month is not None:
        click.echo(render_month(calendar, year, month, print_year=True))
    else:
        click.echo(render_year(calendar, year))


@main.command()
@click.argument('year', type=int, required=False)
@click.option('-q', '--quarter', type=int, default=None, help='Restrict to a quarter (1-4)')
@click.option('--json', 'as_json', is_flag=True, help='Print the counts as JSON')
@click.pass_obj
def stats(hub: ProductCalendarHub, year: Optional[int], quarter: Optional[int], as_json: bool):
    """Count workdays, weekends, holidays and pre-holiday days."""
    try:
        calendar = hub.get(year)
        if quarter is not None:
            calendar = calendar.extract_dates_in_quarter(quarter)
    except ProductCalendarError as e:
        _fail(e)

    statistic = calendar.statistic()
    if as_json:
        click.echo(json.dumps(statistic.as_map()))
        return

    title = f"{calendar.year}" if quarter is None else f"{calendar.year} Q{quarter}"
    click.echo(title)
    click.echo(f"  work days:    {statistic.work_days}")
    click.echo(f"  preholidays:  {statistic.preholidays}")
    click.echo(f"  weekends:     {statistic.weekends}")
    click.echo(f"  holidays:     {statistic.holidays}")
    click.echo(f"  rest days:    {statistic.rest_days()}")
    click.echo(f"  work hours:   {statistic.work_hours()}")


@main.command()
@click.argument('day')
@click.option('--json', 'as_json', is_flag=True, help='Print the day as JSON')
@click.pass_obj
def day(hub: ProductCalendarHub, day: str, as_json: bool):
    """Show the classification of a date (YYYY-MM-DD or DD.MM.YYYY)."""
    try:
        d = to_date(day)
        info = hub.get(d.year).info_by_date(d)
    except (ProductCalendarError, ValueError) as e:
        _fail(e)

    click.echo(json.dumps(info.as_map()) if as_json else str(info))


@main.command(name='next-workday')
@click.argument('day')
@click.pass_obj
def next_workday(hub: ProductCalendarHub, day: str):
    """Show the first working day after a date."""
    try:
        d = to_date(day)
        click.echo(str(hub.get(d.year).next_work_day(d)))
    except (ProductCalendarError, ValueError) as e:
        _fail(e)


@main.command()
@click.argument('day')
@click.argument('count', type=click.IntRange(min=0))
@click.option('-w', '--work-days', is_flag=True, help='Count working days only')
@click.option('--json', 'as_json', is_flag=True, help='Print the days as JSON')
@click.pass_obj
def period(hub: ProductCalendarHub, day: str, count: int, work_days: bool, as_json: bool):
    """List COUNT days (or working days) starting at a date."""
    try:
        d = to_date(day)
        calendar = hub.get(d.year)
        if work_days:
            result = calendar.period_by_number_of_work_days(d, count)
        else:
            result = calendar.period_by_number_of_days(d, count)
    except (ProductCalendarError, ValueError) as e:
        _fail(e)

    _echo_days(result, as_json)


@main.command()
@click.argument('year', type=int, required=False)
@click.pass_obj
def export(hub: ProductCalendarHub, year: Optional[int]):
    """Export every day of a year as JSON records."""
    try:
        calendar = hub.get(year)
    except ProductCalendarError as e:
        _fail(e)

    _echo_days(calendar, as_json=True)


if __name__ == '__main__':
    main()
