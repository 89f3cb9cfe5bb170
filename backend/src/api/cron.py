"""
Scheduled generation endpoint.

Called by an external scheduler (e.g. a daily cron job) to keep the next
N days of events materialized from active templates.

Design:
- Protected by a shared secret: Authorization: Bearer <CRON_SECRET>
- 500 when the secret is not configured, 401 when it does not match
- Look-ahead defaults to MUAYTHAI_GENERATION_LOOKAHEAD_DAYS (30)
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.schemas.event_generation import CronGenerateResponse
from backend.src.services.event_generation_service import EventGenerationService
from backend.src.services.exceptions import StoreUnavailableError
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
)


# ============================================================================
# Dependencies
# ============================================================================


def verify_cron_secret(
    authorization: Optional[str] = Header(None),
    settings: AppSettings = Depends(get_settings),
) -> None:
    """
    Check the bearer secret sent by the scheduler.

    Raises:
        500 Internal Server Error: If CRON_SECRET is not configured
        401 Unauthorized: If the header is missing or does not match
    """
    if not settings.cron_configured:
        logger.error("CRON_SECRET is not configured; refusing scheduled generation")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        )

    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not hmac.compare_digest(
        authorization.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected scheduled generation request with invalid secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


def get_event_generation_service(db: Session = Depends(get_db)) -> EventGenerationService:
    """Create EventGenerationService instance with database session."""
    return EventGenerationService(db=db)


# ============================================================================
# API Endpoints
# ============================================================================


@router.get(
    "/generate-events",
    response_model=CronGenerateResponse,
    summary="Generate upcoming events",
    dependencies=[Depends(verify_cron_secret)],
)
async def cron_generate_events(
    days: Optional[int] = Query(
        None, ge=0, le=366, description="Days ahead to generate (default from settings)"
    ),
    generation_service: EventGenerationService = Depends(get_event_generation_service),
    settings: AppSettings = Depends(get_settings),
) -> CronGenerateResponse:
    """
    Generate events for all active templates from today through today + days.

    Query Parameters:
        days: Look-ahead in days (default: MUAYTHAI_GENERATION_LOOKAHEAD_DAYS)

    Returns:
        CronGenerateResponse summary

    Raises:
        401 Unauthorized: Missing or wrong bearer secret
        503 Service Unavailable: Database unreachable

    Example:
        GET /api/cron/generate-events?days=14
        Authorization: Bearer <CRON_SECRET>

        Response:
        {
          "success": true,
          "message": "Successfully generated 4 events from 2 templates",
          "generated_count": 4,
          "templates_processed": 2,
          "failed_count": 0
        }
    """
    look_ahead_days = days if days is not None else settings.generation_lookahead_days

    try:
        result = generation_service.generate_upcoming_events(look_ahead_days)

    except StoreUnavailableError as e:
        logger.error(f"Scheduled generation aborted: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        )
    except Exception as e:
        logger.error(f"Error in scheduled generation: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate events",
        )

    message = (
        f"Successfully generated {result.generated_count} events "
        f"from {result.templates_processed} templates"
    )
    logger.info(message, extra={"look_ahead_days": look_ahead_days})

    return CronGenerateResponse(
        success=True,
        message=message,
        generated_count=result.generated_count,
        templates_processed=result.templates_processed,
        failed_count=result.failed_count,
    )
