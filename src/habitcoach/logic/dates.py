from datetime import date, datetime
from typing import Dict, List, Optional, Union

DateLike = Union[date, str, None]


def to_local_iso_date(d: Optional[date] = None) -> str:
    """Local calendar date as YYYY-MM-DD (today when not given)."""
    if d is None:
        d = date.today()
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()


def parse_local_date(iso_date: str) -> date:
    """Parse a YYYY-MM-DD string. Missing month/day parts default to 1; empty input means today."""
    if not iso_date:
        return date.today()
    parts = iso_date.split("-")
    year = int(parts[0])
    month = int(parts[1]) if len(parts) > 1 and parts[1] else 1
    day = int(parts[2][:2]) if len(parts) > 2 and parts[2] else 1
    return date(year, month, day)


def coerce_date(value: DateLike) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_local_date(value)


def recent_dates(logs: Dict[str, object], count: int) -> List[str]:
    """Last `count` keys of a date-keyed mapping in chronological order.

    ISO dates sort lexicographically, so a plain string sort is chronological.
    """
    if count <= 0:
        return []
    return sorted(logs.keys())[-count:]
