"""
Event templates API endpoints.

Provides template authoring and manual event generation:
- List templates (filtered by active flag, venue, region or name)
- Get template details
- Create templates with ticket types
- Replace or delete templates
- Activate / deactivate templates
- Generate (or preview) events from templates over a date window

Design:
- Uses dependency injection for services
- All endpoints use GUID format (tpl_xxx) for identifiers
- Generation is idempotent; re-running a window only fills gaps
- Preview mode returns events without saving anything
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.schemas.event_generation import (
    GenerateEventsRequest,
    GenerateEventsResponse,
    GeneratedEventItem,
    GeneratedEventResponse,
    GeneratedTicketResponse,
)
from backend.src.schemas.event_template import (
    EventTemplateActiveUpdate,
    EventTemplateCreate,
    EventTemplateListResponse,
    EventTemplateResponse,
    EventTemplateUpdate,
)
from backend.src.services.event_generation_service import (
    EventGenerationService,
    GenerationResult,
)
from backend.src.services.event_template_service import EventTemplateService
from backend.src.services.exceptions import (
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/event-templates",
    tags=["Event Templates"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_event_template_service(db: Session = Depends(get_db)) -> EventTemplateService:
    """Create EventTemplateService instance with database session."""
    return EventTemplateService(db=db)


def get_event_generation_service(db: Session = Depends(get_db)) -> EventGenerationService:
    """Create EventGenerationService instance with database session."""
    return EventGenerationService(db=db)


def build_generation_response(result: GenerationResult) -> GenerateEventsResponse:
    """Convert a GenerationResult into the API response model."""
    return GenerateEventsResponse(
        generated_count=result.generated_count,
        templates_processed=result.templates_processed,
        skipped_count=result.skipped_count,
        failed_count=result.failed_count,
        preview_only=result.preview_only,
        items=[
            GeneratedEventItem(
                event=GeneratedEventResponse.model_validate(item.event),
                tickets=[
                    GeneratedTicketResponse.model_validate(ticket)
                    for ticket in item.tickets
                ],
                venue_name=item.venue_name,
                region_name=item.region_name,
                template_name=item.template_name,
            )
            for item in result.items
        ],
    )


# ============================================================================
# API Endpoints
# ============================================================================


@router.get(
    "",
    response_model=EventTemplateListResponse,
    summary="List event templates",
)
async def list_event_templates(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    venue_guid: Optional[str] = Query(None, description="Filter by venue GUID"),
    region_guid: Optional[str] = Query(None, description="Filter by region GUID"),
    search: Optional[str] = Query(None, description="Search in template name"),
    limit: int = Query(100, ge=1, le=500, description="Maximum results to return"),
    offset: int = Query(0, ge=0, description="Number of results to skip"),
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> EventTemplateListResponse:
    """
    List event templates ordered by name.

    Query Parameters:
        is_active: Only active (true) or inactive (false) templates
        venue_guid: Only templates at this venue (optional)
        region_guid: Only templates in this region (optional)
        search: Search term for the template name (optional)
        limit: Maximum number of results (default: 100, max: 500)
        offset: Number of results to skip (default: 0)

    Returns:
        EventTemplateListResponse with items and total count

    Raises:
        400 Bad Request: If the venue or region GUID is malformed or unknown

    Example:
        GET /api/event-templates?is_active=true
        GET /api/event-templates?venue_guid=ven_01hgw2bbg00000000000000001&search=tuesday
    """
    try:
        templates, total = template_service.list(
            is_active=is_active,
            venue_guid=venue_guid,
            region_guid=region_guid,
            search=search,
            limit=limit,
            offset=offset,
        )
        items = [
            EventTemplateResponse(**template_service.build_template_response(t))
            for t in templates
        ]
        return EventTemplateListResponse(items=items, total=total)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except Exception as e:
        logger.error(f"Error listing event templates: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list event templates: {str(e)}",
        )


@router.post(
    "",
    response_model=EventTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create event template",
)
async def create_event_template(
    template_data: EventTemplateCreate,
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> EventTemplateResponse:
    """
    Create a recurring event template with its ticket types.

    Request Body:
        EventTemplateCreate (recurrence arrays may be lists, JSON strings
        or comma-separated strings)

    Returns:
        Created EventTemplateResponse

    Raises:
        400 Bad Request: If the venue or region does not exist
        422 Unprocessable Entity: If the recurrence configuration is invalid

    Example:
        POST /api/event-templates
        {
          "template_name": "Lumpinee Tuesday",
          "venue_guid": "ven_...",
          "region_guid": "reg_...",
          "default_title_format": "Fight Night at {venue} - {date}",
          "recurrence_type": "weekly",
          "recurring_days_of_week": "[2]",
          "default_start_time": "18:30",
          "tickets": [{"seat_type": "Ringside", "default_price": 2500, "default_capacity": 50}]
        }
    """
    try:
        template = template_service.create(template_data)

        logger.info(
            f"Created event template: {template.template_name}",
            extra={"guid": template.guid},
        )

        return EventTemplateResponse(**template_service.build_template_response(template))

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except Exception as e:
        logger.error(f"Error creating event template: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create event template: {str(e)}",
        )


@router.post(
    "/generate",
    response_model=GenerateEventsResponse,
    summary="Generate events from templates",
)
async def generate_events(
    request: GenerateEventsRequest,
    generation_service: EventGenerationService = Depends(get_event_generation_service),
    settings: AppSettings = Depends(get_settings),
) -> GenerateEventsResponse:
    """
    Generate events from active templates over a date window.

    Dates that already have an event for a template are skipped, so the
    same window can be generated repeatedly. With preview_only the events
    are computed and returned but nothing is saved.

    Request Body:
        GenerateEventsRequest

    Returns:
        GenerateEventsResponse with counts and generated items

    Raises:
        400 Bad Request: If a template GUID is malformed or the window is too long
        422 Unprocessable Entity: If start_date is after end_date
        503 Service Unavailable: If the database cannot be reached

    Example:
        POST /api/event-templates/generate
        {"start_date": "2025-04-01", "end_date": "2025-04-14", "preview_only": true}
    """
    window_days = (request.end_date - request.start_date).days + 1
    if window_days > settings.max_generation_window_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Generation window of {window_days} days exceeds the maximum "
                f"of {settings.max_generation_window_days} days"
            ),
        )

    try:
        result = generation_service.generate(
            request.start_date,
            request.end_date,
            template_guids=request.template_guids,
            preview_only=request.preview_only,
        )

        logger.info(
            f"Generated {result.generated_count} events",
            extra={
                "templates_processed": result.templates_processed,
                "preview_only": result.preview_only,
            },
        )

        return build_generation_response(result)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except StoreUnavailableError as e:
        logger.error(f"Event generation aborted: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )
    except Exception as e:
        logger.error(f"Error generating events: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate events: {str(e)}",
        )


@router.get(
    "/{guid}",
    response_model=EventTemplateResponse,
    summary="Get event template",
)
async def get_event_template(
    guid: str,
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> EventTemplateResponse:
    """
    Get an event template by GUID.

    Path Parameters:
        guid: Template GUID (tpl_xxx)

    Raises:
        404 Not Found: If the template does not exist
    """
    try:
        template = template_service.get_by_guid(guid)
        return EventTemplateResponse(**template_service.build_template_response(template))

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event template not found: {guid}",
        )
    except Exception as e:
        logger.error(f"Error getting event template: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get event template: {str(e)}",
        )


@router.patch(
    "/{guid}/active",
    response_model=EventTemplateResponse,
    summary="Activate or deactivate event template",
)
async def set_event_template_active(
    guid: str,
    update: EventTemplateActiveUpdate,
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> EventTemplateResponse:
    """
    Activate or deactivate a template. Inactive templates never generate events.

    Raises:
        404 Not Found: If the template does not exist
    """
    try:
        template = template_service.set_active(guid, update.is_active)
        return EventTemplateResponse(**template_service.build_template_response(template))

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event template not found: {guid}",
        )
    except Exception as e:
        logger.error(f"Error updating event template: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update event template: {str(e)}",
        )


@router.put(
    "/{guid}",
    response_model=EventTemplateResponse,
    summary="Update event template",
)
async def update_event_template(
    guid: str,
    template_data: EventTemplateUpdate,
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> EventTemplateResponse:
    """
    Replace a template's configuration and ticket types.

    The body has the same shape and validation as creation. Events already
    generated are left unchanged.

    Path Parameters:
        guid: Template GUID (tpl_xxx)

    Raises:
        400 Bad Request: If the venue or region does not exist
        404 Not Found: If the template does not exist
        422 Unprocessable Entity: If the recurrence configuration is invalid
    """
    try:
        template = template_service.update(guid, template_data)
        return EventTemplateResponse(**template_service.build_template_response(template))

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event template not found: {guid}",
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except Exception as e:
        logger.error(f"Error updating event template: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update event template: {str(e)}",
        )


@router.delete(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event template",
)
async def delete_event_template(
    guid: str,
    template_service: EventTemplateService = Depends(get_event_template_service),
) -> None:
    """
    Delete a template and its ticket types.

    Events generated from the template are kept and lose their template
    reference.

    Path Parameters:
        guid: Template GUID (tpl_xxx)

    Returns:
        204 No Content on success

    Raises:
        404 Not Found: If the template does not exist
    """
    try:
        template_service.delete(guid)

    except NotFoundError:
        logger.warning(f"Event template not found for deletion: {guid}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event template not found: {guid}",
        )
    except Exception as e:
        logger.error(f"Error deleting event template: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete event template: {str(e)}",
        )
