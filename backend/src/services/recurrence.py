"""
Recurrence calculator for event templates.

Pure date arithmetic: given a recurrence rule and a generation window,
yield the calendar days (with combined start/end timestamps) on which an
event should exist. Nothing here touches the database, so the same code
backs the admin preview, the scheduled run and the tests.

Weekday convention: Sunday = 0 ... Saturday = 6.

Example:
    >>> rule = RecurrenceRule(
    ...     recurrence_type=RecurrenceType.WEEKLY,
    ...     days_of_week=frozenset({1, 3}),
    ...     start_time="19:00",
    ... )
    >>> [c.event_date.isoformat() for c in compute_dates(
    ...     rule, date(2025, 4, 1), date(2025, 4, 7))]
    ['2025-04-02', '2025-04-07']
"""

import enum
import json
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union


# HH:MM with an optional :SS suffix, 24-hour clock
TIME_OF_DAY_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")

DateLike = Union[date, datetime]


class RecurrenceType(enum.Enum):
    """Recurrence rule kinds supported by event templates."""
    NONE = "none"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class CandidateOccurrence:
    """
    One calendar day on which a template wants an event.

    start_time is None when the template's start time could not be parsed;
    such candidates are reported but never materialized.
    """
    event_date: date
    start_time: Optional[datetime]
    end_time: Optional[datetime] = None


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Normalized, immutable view of a template's recurrence configuration.

    Attributes:
        recurrence_type: none | weekly | monthly
        days_of_week: Weekdays 0-6 (Sunday = 0) for weekly rules
        days_of_month: Days 1-31 for monthly rules
        start_time: "HH:MM" default start time
        end_time: Optional "HH:MM" default end time
        start_date: Optional lower bound (inclusive)
        end_date: Optional upper bound (inclusive)
    """
    recurrence_type: RecurrenceType
    days_of_week: FrozenSet[int] = frozenset()
    days_of_month: FrozenSet[int] = frozenset()
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def from_template(cls, template: Any) -> "RecurrenceRule":
        """
        Build a rule from an EventTemplate (or any object with the same fields).

        Raises:
            ValueError: If the template's recurrence_type is unknown
        """
        raw_type = template.recurrence_type
        if isinstance(raw_type, RecurrenceType):
            recurrence_type = raw_type
        else:
            recurrence_type = RecurrenceType((raw_type or "none").lower())

        return cls(
            recurrence_type=recurrence_type,
            days_of_week=_int_set(template.recurring_days_of_week),
            days_of_month=_int_set(template.days_of_month),
            start_time=template.default_start_time,
            end_time=template.default_end_time,
            start_date=_as_date(template.start_date),
            end_date=_as_date(template.end_date),
        )


def _int_set(values: Optional[Iterable[Any]]) -> FrozenSet[int]:
    if not values:
        return frozenset()
    return frozenset(int(v) for v in values)


def _as_date(value: Optional[DateLike]) -> Optional[date]:
    # datetime is a subclass of date, so test it first
    if isinstance(value, datetime):
        return value.date()
    return value


def normalize_int_list(value: Any) -> List[int]:
    """
    Normalize a loosely-typed day list to a sorted list of unique ints.

    Accepts None, a list/tuple/set, a JSON array string ("[1, 3]"), a
    comma-separated string ("1,3") or a single number (legacy scalar
    day_of_month).

    Raises:
        ValueError: If the value is not list-shaped or an element is not
            an integer
    """
    if value is None:
        return []

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid day list: {e.msg}")
        else:
            value = [part for part in text.split(",") if part.strip()]

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = [value]

    if not isinstance(value, (list, tuple, set)):
        raise ValueError("Day list must be an array of integers")

    result = set()
    for item in value:
        if isinstance(item, bool):
            raise ValueError(f"Invalid day value: {item}")
        try:
            number = float(str(item).strip())
        except ValueError:
            raise ValueError(f"Invalid day value: {item}")
        if not number.is_integer():
            raise ValueError(f"Invalid day value: {item}")
        result.add(int(number))
    return sorted(result)


def parse_time_of_day(value: Optional[str]) -> Optional[time]:
    """
    Parse an "HH:MM" (or "HH:MM:SS") string.

    Returns:
        The parsed time, or None if the value is empty or malformed

    Examples:
        >>> parse_time_of_day("19:30")
        datetime.time(19, 30)
        >>> parse_time_of_day("25:00") is None
        True
    """
    if not value:
        return None
    match = TIME_OF_DAY_PATTERN.match(value.strip())
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


def combine_date_and_time(day: date, value: Optional[str]) -> Optional[datetime]:
    """Combine a calendar day with an "HH:MM" string, or None if unparseable."""
    parsed = parse_time_of_day(value)
    if parsed is None:
        return None
    return datetime.combine(day, parsed)


def effective_window(
    rule: RecurrenceRule,
    window_start: DateLike,
    window_end: DateLike,
) -> Optional[Tuple[date, date]]:
    """
    Intersect the caller's window with the rule's own date bounds.

    Returns:
        (start, end) inclusive, or None when the intersection is empty
    """
    start = _as_date(window_start)
    end = _as_date(window_end)

    if rule.start_date is not None and rule.start_date > start:
        start = rule.start_date
    if rule.end_date is not None and rule.end_date < end:
        end = rule.end_date

    if start > end:
        return None
    return start, end


def matches(rule: RecurrenceRule, day: date) -> bool:
    """Check whether a single day satisfies a weekly or monthly rule."""
    if rule.recurrence_type is RecurrenceType.WEEKLY:
        return day.isoweekday() % 7 in rule.days_of_week
    if rule.recurrence_type is RecurrenceType.MONTHLY:
        # Short months simply never match day 29-31; no rollover
        return day.day in rule.days_of_month
    return False


def _candidate(rule: RecurrenceRule, day: date) -> CandidateOccurrence:
    return CandidateOccurrence(
        event_date=day,
        start_time=combine_date_and_time(day, rule.start_time),
        end_time=combine_date_and_time(day, rule.end_time),
    )


def compute_dates(
    rule: RecurrenceRule,
    window_start: DateLike,
    window_end: DateLike,
) -> Iterator[CandidateOccurrence]:
    """
    Yield candidate occurrences of a rule inside a window, in ascending order.

    The window is inclusive on both ends and is first narrowed by the
    rule's own start_date/end_date. A rule of type ``none`` describes a
    single event on its start_date: it yields that one day when start_date
    falls inside the caller's window and nothing otherwise. Weekly and
    monthly rules with no configured days yield nothing.

    Args:
        rule: Normalized recurrence rule
        window_start: First day to consider (inclusive)
        window_end: Last day to consider (inclusive)

    Yields:
        CandidateOccurrence for each matching day
    """
    window = effective_window(rule, window_start, window_end)
    if window is None:
        return

    start, end = window

    if rule.recurrence_type is RecurrenceType.NONE:
        if rule.start_date is not None and rule.start_date == start:
            yield _candidate(rule, start)
        return

    if rule.recurrence_type is RecurrenceType.WEEKLY and not rule.days_of_week:
        return
    if rule.recurrence_type is RecurrenceType.MONTHLY and not rule.days_of_month:
        return

    day = start
    one_day = timedelta(days=1)
    while day <= end:
        if matches(rule, day):
            yield _candidate(rule, day)
        day += one_day
