"""
Month/year date helpers for CV entries

Policy: a month is only meaningful once a year is chosen. A month without a
year is rejected instead of being silently attached to the current year.
"""
import re
from typing import Optional, Union

from cvstudio.utils.exceptions import ValidationError

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

_ISO_RE = re.compile(r'^(\d{4})-(\d{2})(?:-(\d{2}))?(?:[T ].*)?$')
_YEAR_RE = re.compile(r'^\d{4}$')


def compose_month_year(year: Optional[Union[int, str]], month: Optional[Union[int, str]] = None) -> str:
    """
    Build the stored value for a month/year picker.

    Returns 'YYYY-MM', 'YYYY' or '' when nothing is selected.
    Raises ValidationError when a month is chosen before a year.
    """
    year = str(year).strip() if year not in (None, '') else ''
    month = str(month).strip() if month not in (None, '') else ''

    if not year:
        if month:
            raise ValidationError("Select a year before choosing a month", field='month')
        return ''

    if not _YEAR_RE.match(year):
        raise ValidationError("Year must have four digits", field='year')

    if not month:
        return year

    try:
        month_number = int(month)
    except ValueError:
        raise ValidationError("Month must be a number between 1 and 12", field='month')
    if not 1 <= month_number <= 12:
        raise ValidationError("Month must be a number between 1 and 12", field='month')

    return f"{year}-{month_number:02d}"


def format_date(value: Optional[str]) -> str:
    """Render stored dates as 'Mon YYYY'; free text like 'Present' passes through"""
    if not value:
        return ''
    value = str(value).strip()
    match = _ISO_RE.match(value)
    if not match:
        return value
    year, month = match.group(1), int(match.group(2))
    if not 1 <= month <= 12:
        return value
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def format_date_range(start: Optional[str], end: Optional[str], current: bool = False) -> str:
    start_text = format_date(start)
    end_text = 'Present' if current else format_date(end)
    if start_text and end_text:
        return f"{start_text} - {end_text}"
    return start_text or end_text