"""
Utilities Package

Date formatting helpers shared by the models' derived display fields, and
parsing of record ids submitted through forms.
"""

from datetime import date

# Largest value an INTEGER primary key holds on PostgreSQL.
MAX_ID = 2**31 - 1


def parse_id(value: str) -> int | None:
    """
    Parse a submitted record id.

    Returns None for anything that is not a positive ASCII integer within
    the INTEGER column range.

    >>> parse_id("42"), parse_id("²"), parse_id("-1"), parse_id("")
    (42, None, None, None)
    """
    if not (value.isascii() and value.isdecimal()):
        return None
    number = int(value)
    if not 0 < number <= MAX_ID:
        return None
    return number


def ordinal(day: int) -> str:
    """
    Return the day of month with its English ordinal suffix.

    >>> ordinal(1), ordinal(2), ordinal(11), ordinal(23)
    ('1st', '2nd', '11th', '23rd')
    """
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: date | None) -> str:
    """Format a date as 'June 25th, 1903', or '' when the date is unknown."""
    if value is None:
        return ""
    return f"{value.strftime('%B')} {ordinal(value.day)}, {value.year}"


def format_input_date(value: date | None) -> str:
    """Format a date for an <input type="date"> value (YYYY-MM-DD)."""
    if value is None:
        return ""
    return value.isoformat()


def whole_years_between(start: date, end: date) -> int:
    """Count complete years from start to end."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years
