"""
Pydantic schemas for event generation requests and responses.

Provides data validation and serialization for:
- Manual generation over an explicit date window (with preview mode)
- The scheduled (cron) generation summary
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


# ============================================================================
# Request Schemas
# ============================================================================


class GenerateEventsRequest(BaseModel):
    """
    Schema for generating events from templates.

    Fields:
        start_date: First day of the window (inclusive)
        end_date: Last day of the window (inclusive)
        template_guids: Restrict to these templates; omitted or empty = all active
        preview_only: Compute events without saving them
    """

    start_date: date
    end_date: date
    template_guids: Optional[List[str]] = Field(
        default=None,
        description="Template GUIDs (tpl_xxx); omit for all active templates"
    )
    preview_only: bool = False

    @model_validator(mode="after")
    def validate_window(self) -> "GenerateEventsRequest":
        """Ensure the window is not inverted."""
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "start_date": "2025-04-01",
                "end_date": "2025-04-30",
                "template_guids": ["tpl_01hgw2bbg00000000000000001"],
                "preview_only": True,
            }
        }
    }


# ============================================================================
# Response Schemas
# ============================================================================


class GeneratedTicketResponse(BaseModel):
    """Ticket inventory row of a generated event."""

    guid: Optional[str] = Field(default=None, description="Ticket GUID (etk_xxx); null in preview")
    seat_type: str
    price: Decimal
    capacity: int
    description: Optional[str] = None
    sold_count: int = 0

    model_config = {"from_attributes": True}


class GeneratedEventResponse(BaseModel):
    """Generated event. guid is null for previews."""

    guid: Optional[str] = Field(default=None, description="Event GUID (evt_xxx); null in preview")
    title: str
    description: Optional[str] = None
    event_date: date
    start_time: datetime
    end_time: Optional[datetime] = None
    status: str
    uses_default_poster: bool

    model_config = {"from_attributes": True}


class GeneratedEventItem(BaseModel):
    """Generated event with its tickets and display names."""

    event: GeneratedEventResponse
    tickets: List[GeneratedTicketResponse]
    venue_name: Optional[str]
    region_name: Optional[str]
    template_name: str

    model_config = {"from_attributes": True}


class GenerateEventsResponse(BaseModel):
    """Result of a manual generation run."""

    generated_count: int = Field(..., ge=0)
    templates_processed: int = Field(..., ge=0)
    skipped_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)
    preview_only: bool
    items: List[GeneratedEventItem] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CronGenerateResponse(BaseModel):
    """Summary returned by the scheduled generation route."""

    success: bool
    message: str
    generated_count: int = Field(..., ge=0)
    templates_processed: int = Field(..., ge=0)
    failed_count: int = Field(default=0, ge=0)

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "Successfully generated 12 events from 3 templates",
                "generated_count": 12,
                "templates_processed": 3,
                "failed_count": 0,
            }
        }
    }
