"""Date parsing helpers shared by the filter and sort engines."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)


def parse_date(value: Any) -> datetime | None:
    """
    Parse *value* into a naive local ``datetime``.

    Accepts ``date``/``datetime`` objects, ISO-8601 strings and the slash
    separated layouts used by grid data (``2022/12/02``, ``12/02/2022``).
    Date-only strings resolve to local midnight rather than UTC midnight.

    Returns:
        Parsed datetime, or None when the input cannot be interpreted.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo is not None else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date_only(value: Any) -> datetime | None:
    """Parse *value* and truncate it to midnight, dropping the time of day."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return parsed.replace(hour=0, minute=0, second=0, microsecond=0)
