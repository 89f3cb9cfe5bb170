"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.event_template import (
    normalize_int_list,
    TemplateTicketCreate,
    EventTemplateCreate,
    EventTemplateUpdate,
    EventTemplateActiveUpdate,
    TemplateTicketResponse,
    EventTemplateResponse,
    EventTemplateListResponse,
)
from backend.src.schemas.event_generation import (
    GenerateEventsRequest,
    GeneratedTicketResponse,
    GeneratedEventResponse,
    GeneratedEventItem,
    GenerateEventsResponse,
    CronGenerateResponse,
)

__all__ = [
    # Event template schemas
    "normalize_int_list",
    "TemplateTicketCreate",
    "EventTemplateCreate",
    "EventTemplateUpdate",
    "EventTemplateActiveUpdate",
    "TemplateTicketResponse",
    "EventTemplateResponse",
    "EventTemplateListResponse",
    # Event generation schemas
    "GenerateEventsRequest",
    "GeneratedTicketResponse",
    "GeneratedEventResponse",
    "GeneratedEventItem",
    "GenerateEventsResponse",
    "CronGenerateResponse",
]
