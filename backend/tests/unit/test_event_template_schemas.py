"""
Unit tests for event template and generation schemas.

Tests normalization of loose recurrence arrays, recurrence consistency
checks, time format validation and generation window validation.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from backend.src.schemas.event_generation import GenerateEventsRequest
from backend.src.schemas.event_template import (
    EventTemplateCreate,
    TemplateTicketCreate,
    normalize_int_list,
)
from backend.src.services.recurrence import RecurrenceType


def template_data(**overrides):
    data = {
        "template_name": "Tuesday Fights",
        "venue_guid": "ven_01hgw2bbg00000000000000001",
        "region_guid": "reg_01hgw2bbg00000000000000001",
        "default_title_format": "Fight Night at {venue} - {date}",
        "recurrence_type": "weekly",
        "recurring_days_of_week": [2],
        "default_start_time": "19:00",
        "tickets": [
            {"seat_type": "Ringside", "default_price": "2500.00", "default_capacity": 50},
        ],
    }
    data.update(overrides)
    return data


class TestNormalizeIntList:
    """Tests for normalize_int_list."""

    @pytest.mark.parametrize("value,expected", [
        (None, []),
        ([], []),
        ([3, 1, 3], [1, 3]),
        ("[3, 1]", [1, 3]),
        ("1,3, 5", [1, 3, 5]),
        ("", []),
        (15, [15]),
        ("15", [15]),
        (["2", 4.0], [2, 4]),
    ])
    def test_accepted_shapes(self, value, expected):
        """Test lists, JSON strings, comma strings and scalars."""
        assert normalize_int_list(value) == expected

    @pytest.mark.parametrize("value", ["[1,", "mon,wed", [1.5], [True], {"a": 1}])
    def test_rejected_shapes(self, value):
        """Test malformed input raises ValueError."""
        with pytest.raises(ValueError):
            normalize_int_list(value)


class TestEventTemplateCreate:
    """Tests for EventTemplateCreate validation."""

    def test_weekly_from_json_string(self):
        """Test weekdays given as a JSON string are normalized."""
        data = EventTemplateCreate(**template_data(recurring_days_of_week="[6, 2, 2]"))
        assert data.recurrence_type is RecurrenceType.WEEKLY
        assert data.recurring_days_of_week == [2, 6]

    def test_weekly_requires_days(self):
        """Test weekly templates need at least one weekday."""
        with pytest.raises(ValidationError) as exc_info:
            EventTemplateCreate(**template_data(recurring_days_of_week=[]))
        assert "day of week" in str(exc_info.value)

    def test_weekday_out_of_range(self):
        """Test weekdays must be within 0-6."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(recurring_days_of_week=[7]))

    def test_monthly_requires_days(self):
        """Test monthly templates need at least one day of month."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(
                recurrence_type="monthly", recurring_days_of_week=[], days_of_month=None
            ))

    def test_monthly_legacy_scalar(self):
        """Test a legacy scalar day of month is accepted."""
        data = EventTemplateCreate(**template_data(
            recurrence_type="monthly", days_of_month=15
        ))
        assert data.days_of_month == [15]
        # weekly days do not apply to a monthly template
        assert data.recurring_days_of_week == []

    def test_day_of_month_out_of_range(self):
        """Test days of month must be within 1-31."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(recurrence_type="monthly", days_of_month=[0]))

    def test_single_occurrence_requires_start_date(self):
        """Test recurrence none needs a start_date."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(recurrence_type="none"))

    def test_single_occurrence_clears_arrays(self):
        """Test recurrence none drops both day lists."""
        data = EventTemplateCreate(**template_data(
            recurrence_type="none", start_date="2025-04-12", days_of_month=[3]
        ))
        assert data.recurring_days_of_week == []
        assert data.days_of_month == []

    def test_end_date_before_start_date(self):
        """Test an inverted template date range is rejected."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(
                start_date="2025-05-01", end_date="2025-04-01"
            ))

    @pytest.mark.parametrize("value", ["24:00", "19:60", "7pm", "19"])
    def test_invalid_start_time(self, value):
        """Test start times must be HH:MM."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(default_start_time=value))

    def test_single_digit_hour_allowed(self):
        """Test H:MM start times are accepted."""
        data = EventTemplateCreate(**template_data(default_start_time="9:30"))
        assert data.default_start_time == "9:30"

    def test_blank_end_time_is_none(self):
        """Test an empty end time is treated as absent."""
        data = EventTemplateCreate(**template_data(default_end_time=""))
        assert data.default_end_time is None

    def test_unknown_recurrence_type(self):
        """Test unknown recurrence types are rejected."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(recurrence_type="yearly"))

    def test_requires_ticket(self):
        """Test at least one ticket type is required."""
        with pytest.raises(ValidationError):
            EventTemplateCreate(**template_data(tickets=[]))


class TestTemplateTicketCreate:
    """Tests for TemplateTicketCreate validation."""

    def test_valid(self):
        """Test a valid ticket type."""
        ticket = TemplateTicketCreate(seat_type=" VIP ", default_price=4000, default_capacity=10)
        assert ticket.seat_type == "VIP"
        assert ticket.default_price == Decimal("4000")

    @pytest.mark.parametrize("field,value", [
        ("default_price", 0),
        ("default_capacity", 0),
        ("seat_type", "   "),
    ])
    def test_invalid(self, field, value):
        """Test non-positive price/capacity and blank seat types are rejected."""
        data = {"seat_type": "VIP", "default_price": 4000, "default_capacity": 10}
        data[field] = value
        with pytest.raises(ValidationError):
            TemplateTicketCreate(**data)


class TestGenerateEventsRequest:
    """Tests for GenerateEventsRequest validation."""

    def test_valid_window(self):
        """Test a normal window with defaults."""
        request = GenerateEventsRequest(start_date="2025-04-01", end_date="2025-04-14")
        assert request.start_date == date(2025, 4, 1)
        assert request.template_guids is None
        assert request.preview_only is False

    def test_single_day_window(self):
        """Test start_date equal to end_date is allowed."""
        request = GenerateEventsRequest(start_date="2025-04-01", end_date="2025-04-01")
        assert request.start_date == request.end_date

    def test_inverted_window(self):
        """Test start_date after end_date is rejected."""
        with pytest.raises(ValidationError):
            GenerateEventsRequest(start_date="2025-04-14", end_date="2025-04-01")
