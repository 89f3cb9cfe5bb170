"""
Utility modules for the Muay Thai events backend.

This package contains shared utilities used across the application:
- formatting: Event title, date and time formatting
- logging_config: Structured logging setup
"""

from backend.src.utils.formatting import (
    format_event_title,
    format_long_date,
    format_time_12h,
)

__all__ = [
    "format_event_title",
    "format_long_date",
    "format_time_12h",
]
