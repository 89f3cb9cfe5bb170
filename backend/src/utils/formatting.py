"""
Formatting utilities for human-readable event output.

Provides functions for formatting:
- Long dates ("April 5, 2025")
- 12-hour clock times ("7:00 PM")
- Event titles from template placeholders
"""

import re
from datetime import date, datetime
from typing import Optional

# Placeholder name inside curly braces, e.g. {venue}
PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")

DEFAULT_VENUE_NAME = "Venue"

# English month names; strftime("%B") follows the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_long_date(value: date) -> str:
    """
    Format a date as "<Month> <day>, <year>" without zero padding.

    Examples:
        >>> format_long_date(date(2025, 4, 5))
        'April 5, 2025'
    """
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def format_time_12h(value: datetime) -> str:
    """
    Format a time as a 12-hour clock string.

    Examples:
        >>> format_time_12h(datetime(2025, 4, 5, 19, 0))
        '7:00 PM'
        >>> format_time_12h(datetime(2025, 4, 5, 0, 5))
        '12:05 AM'
    """
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def format_event_title(
    title_format: str,
    venue_name: Optional[str] = None,
    event_date: Optional[date] = None,
    start_time: Optional[datetime] = None,
) -> str:
    """
    Substitute {venue}, {date} and {time} placeholders in a title format.

    Unknown placeholders are left in place literally. A missing venue name
    is rendered as "Venue".

    Args:
        title_format: Template title, e.g. "Fight Night at {venue} - {date}"
        venue_name: Venue display name
        event_date: Calendar day of the event
        start_time: Event start timestamp

    Returns:
        Formatted title

    Examples:
        >>> format_event_title(
        ...     "Fight Night at {venue} - {date} {time} {foo}",
        ...     "Lumpinee", date(2025, 4, 5), datetime(2025, 4, 5, 19, 0))
        'Fight Night at Lumpinee - April 5, 2025 7:00 PM {foo}'
    """
    if not title_format:
        return ""

    values = {"venue": venue_name or DEFAULT_VENUE_NAME}
    if event_date is not None:
        values["date"] = format_long_date(event_date)
    if start_time is not None:
        values["time"] = format_time_12h(start_time)

    def _replace(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return PLACEHOLDER_PATTERN.sub(_replace, title_format)
