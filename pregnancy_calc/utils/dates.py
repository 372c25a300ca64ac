"""
Input coercion and date formatting helpers for the dating calculator
"""
from datetime import datetime, date
import math
import re
from typing import Any, Optional

# Fixed English abbreviations; strftime('%b') follows the process locale
MONTH_ABBR = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
              'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a raw input to a calendar date

    Args:
        value: datetime.date, datetime.datetime, ISO date (YYYY-MM-DD) or ISO datetime string

    Returns:
        datetime.date object or None when the value is not a valid calendar date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip()
    try:
        if len(value) == 10:
            return datetime.strptime(value, '%Y-%m-%d').date()
        if len(value) > 10 and value[10] in 'T ':
            return datetime.fromisoformat(value).date()
    except (ValueError, TypeError):
        return None
    return None


def parse_int(value: Any) -> Optional[int]:
    """
    Parse an integer the way a form field does: leading digits win, trailing
    text is ignored, and no digits at all means the field is empty.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def format_short(d: date) -> str:
    """'Mar 11'"""
    return f"{MONTH_ABBR[d.month - 1]} {d.day}"


def format_long(d: date) -> str:
    """'Mar 11, 2024'"""
    return f"{format_short(d)}, {d.year}"


def format_date_range(start: date, end: date) -> str:
    """
    Render a milestone window.

    A window that starts and ends on the same day collapses to the single
    long date; otherwise 'Mar 11 - Apr 7, 2024'.
    """
    if start == end:
        return format_long(end)
    return f"{format_short(start)} - {format_long(end)}"
