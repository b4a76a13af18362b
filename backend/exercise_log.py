"""Date handling and log filtering for the exercise log endpoint.

Stored exercise dates are calendar-date strings ("Mon Jan 01 2024"); the
`from`/`to` bounds are compared as dates, never as strings.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional

DATE_FORMAT = "%a %b %d %Y"


def format_day(day: Optional[date] = None) -> str:
    """Render a day in the stored form, defaulting to today (server local time)."""
    if day is None:
        day = date.today()
    return day.strftime(DATE_FORMAT)


def parse_day(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def filter_log(
    exercises: Iterable[dict],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    """Apply inclusive date bounds, then keep the first `limit` entries.

    Input order is preserved. Entries with an unreadable date are dropped
    only when a bound is given.
    """
    entries = list(exercises)

    if date_from is not None:
        entries = [e for e in entries if _on_or_after(e, date_from)]
    if date_to is not None:
        entries = [e for e in entries if _on_or_before(e, date_to)]
    if limit is not None:
        entries = entries[:limit]

    return entries


def _on_or_after(entry: dict, bound: date) -> bool:
    day = parse_day(entry.get("date"))
    return day is not None and day >= bound


def _on_or_before(entry: dict, bound: date) -> bool:
    day = parse_day(entry.get("date"))
    return day is not None and day <= bound
