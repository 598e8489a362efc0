"""Date utilities for cashflow.

Pure functions for month keys, labels and lenient date parsing.
"""

from datetime import date

MonthKey = tuple[int, int]


def parse_date(value: str) -> date:
    """Parse an ISO date, ignoring any time component.

    Accepts both "2024-01-15" and the timestamp form "2024-01-15T00:00:00.000Z".

    Raises:
        ValueError: If the value is not an ISO date.
    """
    return date.fromisoformat(value.strip()[:10])


def month_key(value: date) -> MonthKey:
    """Sortable (year, month) key for a date."""
    return value.year, value.month


def month_label(key: MonthKey) -> str:
    """Short human-readable label for a month key (e.g., "Jan 2024")."""
    year, month = key
    return date(year, month, 1).strftime("%b %Y")


def first_of_month(value: date) -> date:
    """First day of the month containing value."""
    return value.replace(day=1)
