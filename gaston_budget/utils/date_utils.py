"""Date manipulation utilities"""

import calendar
import re
from datetime import date
from typing import List

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

# Last day of the first half-month period
PERIOD_ONE_LAST_DAY = 15


def to_year_month(on: date) -> str:
    """Format a date as the YYYY-MM ledger key"""
    return f"{on.year:04d}-{on.month:02d}"


def parse_year_month(value: str) -> date:
    """Parse a YYYY-MM key into the first day of that month"""
    match = _YEAR_MONTH_RE.match(value)
    if not match:
        raise ValueError(f"Invalid year-month: {value!r}")
    return date(int(match.group(1)), int(match.group(2)), 1)


def period_for_day(day: int) -> int:
    """Half-month period (1 or 2) a calendar day belongs to"""
    return 1 if day <= PERIOD_ONE_LAST_DAY else 2


def day_in_month(reference: date, day: int) -> date:
    """Date for `day` in the month of `reference`, clamped to the month length"""
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return date(reference.year, reference.month, max(1, min(day, last_day)))


def sort_year_months(keys: List[str]) -> List[str]:
    return sorted(keys, key=parse_year_month)
