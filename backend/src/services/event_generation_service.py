"""
Event generation service for materializing events from recurring templates.

For each active template, asks the recurrence calculator for candidate
dates inside the requested window, drops dates that already have an event,
and either returns transient previews or persists each event with its
ticket inventory.

Design:
- Idempotent: an occurrence is identified by (template_id, event_date,
  venue_id); the unique constraint on events is the final arbiter when
  two runs race
- One commit per event so a failure never undoes earlier successes
- Per-event failures are logged and counted, never fatal
- An unreachable database aborts the whole run (StoreUnavailableError)
- Preview mode never writes
- "Today" comes from an injected provider for the scheduled entry point
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session

from backend.src.models import Event, EventStatus, EventTemplate, EventTicket
from backend.src.services.event_store import EventStore
from backend.src.services.exceptions import StoreUnavailableError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.services.recurrence import CandidateOccurrence, compute_dates
from backend.src.utils.formatting import format_event_title
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


@dataclass
class MaterializedEvent:
    """
    A generated (or previewed) event with its tickets and display names.

    Attributes:
        event: Event instance (transient in preview mode)
        tickets: Ticket rows created for the event
        venue_name: Venue display name
        region_name: Region display name
        template_name: Name of the template that produced the event
        persisted: True when the event was written to the database
    """
    event: Event
    tickets: List[EventTicket]
    venue_name: Optional[str]
    region_name: Optional[str]
    template_name: str
    persisted: bool = False


@dataclass
class GenerationResult:
    """
    Outcome of a generation run.

    Attributes:
        items: Generated events in template order, then date order
        templates_processed: Number of eligible templates examined
        skipped_count: Candidates skipped (already existing or no start time)
        failed_count: Candidates whose persistence failed
        preview_only: True when nothing was written
        errors: Error messages for failed candidates
    """
    items: List[MaterializedEvent] = field(default_factory=list)
    templates_processed: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    preview_only: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def generated_count(self) -> int:
        """Number of events generated (or that would be, in preview)."""
        return len(self.items)


def _is_connection_error(error: Exception) -> bool:
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and bool(error.connection_invalidated)


class EventGenerationService:
    """
    Service for generating events from active event templates.

    Usage:
        >>> service = EventGenerationService(db)
        >>> result = service.generate(date(2025, 4, 1), date(2025, 4, 30))
        >>> result.generated_count
        9
    """

    def __init__(
        self,
        db: Session,
        store: Optional[EventStore] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize event generation service.

        Args:
            db: SQLAlchemy database session
            store: Event store (defaults to one bound to db)
            today_provider: Callable returning the current calendar day
                (defaults to date.today)
        """
        self.db = db
        self.store = store or EventStore(db)
        self.today_provider = today_provider or date.today

    def generate(
        self,
        window_start: date,
        window_end: date,
        template_guids: Optional[Sequence[str]] = None,
        preview_only: bool = False,
    ) -> GenerationResult:
        """
        Generate events for active templates inside a date window.

        Args:
            window_start: First day (inclusive)
            window_end: Last day (inclusive)
            template_guids: Restrict to these templates (tpl_xxx). None or
                empty means every active template.
            preview_only: Build events without persisting them

        Returns:
            GenerationResult with generated items and counters

        Raises:
            ValidationError: If a template GUID is malformed
            StoreUnavailableError: If the database cannot be reached
        """
        template_uuids = None
        if template_guids:
            try:
                template_uuids = [
                    GuidService.parse_guid(guid, "tpl") for guid in template_guids
                ]
            except ValueError as e:
                raise ValidationError(str(e), field="template_guids")

        templates = self.store.list_active_templates(template_uuids)
        result = GenerationResult(
            templates_processed=len(templates),
            preview_only=preview_only,
        )

        logger.info(
            "Generating events from templates",
            extra={
                "window_start": window_start.isoformat(),
                "window_end": window_end.isoformat(),
                "template_count": len(templates),
                "preview_only": preview_only,
            },
        )

        for template in templates:
            self._generate_for_template(
                template, window_start, window_end, preview_only, result
            )

        logger.info(
            f"Generated {result.generated_count} events from "
            f"{result.templates_processed} templates",
            extra={
                "generated_count": result.generated_count,
                "skipped_count": result.skipped_count,
                "failed_count": result.failed_count,
                "preview_only": preview_only,
            },
        )
        return result

    def generate_upcoming_events(self, look_ahead_days: int = 30) -> GenerationResult:
        """
        Generate events from today through today + look_ahead_days.

        Used by the scheduled run (cron route and CLI). Covers every active
        template and always persists.

        Args:
            look_ahead_days: Days past today to cover (0 = today only)

        Returns:
            GenerationResult

        Raises:
            ValidationError: If look_ahead_days is negative
            StoreUnavailableError: If the database cannot be reached
        """
        if look_ahead_days < 0:
            raise ValidationError(
                "look_ahead_days must not be negative", field="look_ahead_days"
            )
        today = self.today_provider()
        return self.generate(
            today, today + timedelta(days=look_ahead_days), preview_only=False
        )

    def _generate_for_template(
        self,
        template: EventTemplate,
        window_start: date,
        window_end: date,
        preview_only: bool,
        result: GenerationResult,
    ) -> None:
        try:
            rule = template.recurrence_rule
        except ValueError as e:
            logger.warning(
                f"Skipping template with invalid recurrence: {e}",
                extra={"template_guid": template.guid},
            )
            return

        # Snapshot template data; commits below expire loaded instances
        template_id = template.id
        template_guid = template.guid
        template_name = template.template_name
        venue_id = template.venue_id
        region_id = template.region_id
        venue_name = template.venue.name if template.venue else None
        region_name = template.region.name if template.region else None
        title_format = template.default_title_format
        description = template.default_description
        ticket_definitions = [
            (t.seat_type, t.default_price, t.default_capacity, t.default_description)
            for t in template.template_tickets
        ]

        for candidate in compute_dates(rule, window_start, window_end):
            if self.store.event_exists(template_id, candidate.event_date, venue_id):
                result.skipped_count += 1
                continue

            if candidate.start_time is None:
                logger.warning(
                    "Skipping occurrence with unparseable start time",
                    extra={
                        "template_guid": template_guid,
                        "event_date": candidate.event_date.isoformat(),
                    },
                )
                result.skipped_count += 1
                continue

            event = self._build_event(
                candidate, template_id, venue_id, region_id,
                venue_name, title_format, description,
            )
            tickets = [
                EventTicket(
                    seat_type=seat_type,
                    price=price,
                    capacity=capacity,
                    description=ticket_description,
                    sold_count=0,
                )
                for seat_type, price, capacity, ticket_description in ticket_definitions
            ]

            item = MaterializedEvent(
                event=event,
                tickets=tickets,
                venue_name=venue_name,
                region_name=region_name,
                template_name=template_name,
            )

            if preview_only:
                result.items.append(item)
                continue

            if self._persist(item, template_id, template_guid, venue_id, candidate, result):
                result.items.append(item)

    def _build_event(
        self,
        candidate: CandidateOccurrence,
        template_id: int,
        venue_id: int,
        region_id: int,
        venue_name: Optional[str],
        title_format: str,
        description: Optional[str],
    ) -> Event:
        # Only foreign keys are set; assigning relationships would cascade
        # preview instances into the session
        return Event(
            title=format_event_title(
                title_format, venue_name, candidate.event_date, candidate.start_time
            ),
            description=description,
            event_date=candidate.event_date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            venue_id=venue_id,
            region_id=region_id,
            template_id=template_id,
            status=EventStatus.SCHEDULED.value,
            uses_default_poster=True,
        )

    def _persist(
        self,
        item: MaterializedEvent,
        template_id: int,
        template_guid: str,
        venue_id: int,
        candidate: CandidateOccurrence,
        result: GenerationResult,
    ) -> bool:
        """Persist one event; returns True when it was written."""
        log_extra = {
            "template_guid": template_guid,
            "event_date": candidate.event_date.isoformat(),
        }
        try:
            self.store.insert_event(item.event, item.tickets)
        except IntegrityError:
            # Another run may have created the same occurrence concurrently
            if self.store.event_exists(template_id, candidate.event_date, venue_id):
                logger.info("Event already created by a concurrent run", extra=log_extra)
                result.skipped_count += 1
            else:
                logger.error("Integrity error creating event", extra=log_extra, exc_info=True)
                result.failed_count += 1
                result.errors.append(
                    f"{template_guid} {candidate.event_date.isoformat()}: integrity error"
                )
            return False
        except Exception as e:
            if _is_connection_error(e):
                logger.error(f"Event store unavailable: {e}", extra=log_extra)
                raise StoreUnavailableError() from e
            logger.error(f"Failed to create event: {e}", extra=log_extra, exc_info=True)
            result.failed_count += 1
            result.errors.append(f"{template_guid} {candidate.event_date.isoformat()}: {e}")
            return False

        item.persisted = True
        return True
