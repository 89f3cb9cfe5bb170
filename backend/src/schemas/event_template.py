"""
Pydantic schemas for event template API request/response validation.

Provides data validation and serialization for:
- Creating recurring event templates with their ticket types
- Replacing a template (configuration and ticket types)
- Toggling a template's active flag
- Template responses

Design:
- Recurrence arrays accept loose shapes (list, JSON string, comma-separated
  string, single number) and are normalized to sorted, unique int lists
- weekly templates need at least one weekday, monthly templates at least
  one day of month, single (none) templates a start_date
- Arrays that do not apply to the chosen recurrence type are cleared
- GUIDs are exposed via guid property, never internal IDs
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from backend.src.services.recurrence import RecurrenceType, normalize_int_list


# 24-hour HH:MM, single-digit hours allowed
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


# ============================================================================
# Request Schemas
# ============================================================================


class TemplateTicketCreate(BaseModel):
    """Ticket type offered on every event generated from a template."""

    seat_type: str = Field(..., min_length=1, max_length=100)
    default_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    default_capacity: int = Field(..., gt=0)
    default_description: Optional[str] = None

    @field_validator("seat_type")
    @classmethod
    def validate_seat_type(cls, v: str) -> str:
        """Strip whitespace and reject blank seat types."""
        v = v.strip()
        if not v:
            raise ValueError("Seat type is required")
        return v


class EventTemplateCreate(BaseModel):
    """
    Schema for creating an event template.

    Fields:
        template_name: Admin-facing name
        venue_guid: Venue GUID (ven_xxx)
        region_guid: Region GUID (reg_xxx)
        default_title_format: Title with {venue}, {date}, {time} placeholders
        default_description: Optional description for generated events
        recurrence_type: none | weekly | monthly
        recurring_days_of_week: Weekdays 0-6 (Sunday = 0), weekly only
        days_of_month: Days 1-31, monthly only
        default_start_time: "HH:MM"
        default_end_time: Optional "HH:MM"
        start_date: Optional first date (required for none)
        end_date: Optional last date
        is_active: Whether the template generates events
        tickets: Ticket types (at least one)
    """

    template_name: str = Field(..., min_length=1, max_length=255)
    venue_guid: str = Field(..., description="Venue GUID (ven_xxx)")
    region_guid: str = Field(..., description="Region GUID (reg_xxx)")
    default_title_format: str = Field(..., min_length=1, max_length=255)
    default_description: Optional[str] = None

    recurrence_type: RecurrenceType = RecurrenceType.NONE
    recurring_days_of_week: List[int] = Field(default_factory=list)
    days_of_month: List[int] = Field(default_factory=list)

    default_start_time: str = Field(..., pattern=TIME_PATTERN)
    default_end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    is_active: bool = True
    tickets: List[TemplateTicketCreate] = Field(..., min_length=1)

    @field_validator("default_end_time", mode="before")
    @classmethod
    def blank_end_time(cls, v: Any) -> Any:
        """Treat an empty end time as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("recurring_days_of_week", mode="before")
    @classmethod
    def normalize_days_of_week(cls, v: Any) -> List[int]:
        """Normalize and range-check weekdays (Sunday = 0)."""
        days = normalize_int_list(v)
        for day in days:
            if not 0 <= day <= 6:
                raise ValueError(f"Day of week must be between 0 and 6, got {day}")
        return days

    @field_validator("days_of_month", mode="before")
    @classmethod
    def normalize_days_of_month(cls, v: Any) -> List[int]:
        """Normalize and range-check days of month."""
        days = normalize_int_list(v)
        for day in days:
            if not 1 <= day <= 31:
                raise ValueError(f"Day of month must be between 1 and 31, got {day}")
        return days

    @model_validator(mode="after")
    def validate_recurrence(self) -> "EventTemplateCreate":
        """Check the recurrence configuration is complete and consistent."""
        if self.recurrence_type is RecurrenceType.WEEKLY:
            if not self.recurring_days_of_week:
                raise ValueError("Weekly templates need at least one day of week")
            self.days_of_month = []
        elif self.recurrence_type is RecurrenceType.MONTHLY:
            if not self.days_of_month:
                raise ValueError("Monthly templates need at least one day of month")
            self.recurring_days_of_week = []
        else:
            if self.start_date is None:
                raise ValueError("Single-occurrence templates need a start_date")
            self.recurring_days_of_week = []
            self.days_of_month = []

        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "template_name": "Lumpinee Tuesday & Saturday",
                "venue_guid": "ven_01hgw2bbg00000000000000001",
                "region_guid": "reg_01hgw2bbg00000000000000001",
                "default_title_format": "Fight Night at {venue} - {date}",
                "recurrence_type": "weekly",
                "recurring_days_of_week": [2, 6],
                "default_start_time": "18:30",
                "default_end_time": "23:00",
                "tickets": [
                    {"seat_type": "Ringside", "default_price": "2500.00", "default_capacity": 50},
                    {"seat_type": "Stadium", "default_price": "1500.00", "default_capacity": 300},
                ],
            }
        }
    }


class EventTemplateUpdate(EventTemplateCreate):
    """
    Schema for replacing an event template.

    Carries the complete configuration, validated and normalized exactly
    like EventTemplateCreate. The ticket list replaces the existing ticket
    types in order.
    """


class EventTemplateActiveUpdate(BaseModel):
    """Schema for activating or deactivating a template."""

    is_active: bool


# ============================================================================
# Response Schemas
# ============================================================================


class TemplateTicketResponse(BaseModel):
    """Ticket type definition on a template."""

    guid: str = Field(..., description="Template ticket GUID (ttk_xxx)")
    seat_type: str
    default_price: Decimal
    default_capacity: int
    default_description: Optional[str] = None

    model_config = {"from_attributes": True}


class EventTemplateResponse(BaseModel):
    """Schema for event template API responses."""

    guid: str = Field(..., description="Template GUID (tpl_xxx)")
    template_name: str

    venue_guid: Optional[str]
    venue_name: Optional[str]
    region_guid: Optional[str]
    region_name: Optional[str]

    default_title_format: str
    default_description: Optional[str]

    recurrence_type: str
    recurring_days_of_week: List[int]
    days_of_month: List[int]
    default_start_time: str
    default_end_time: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]

    is_active: bool
    tickets: List[TemplateTicketResponse] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone."""
        return v.isoformat() + "Z" if v else None


class EventTemplateListResponse(BaseModel):
    """List of event templates."""

    items: List[EventTemplateResponse]
    total: int = Field(..., ge=0)
