"""
Event store for the event generator.

Thin persistence boundary over a SQLAlchemy session:
- list_active_templates: template source with venue, region and ticket
  definitions eagerly loaded
- event_exists: idempotency lookup on (template_id, event_date, venue_id)
- insert_event: persist one event and its ticket rows as a single commit

Read failures are reported as StoreUnavailableError so that the caller can
abort the whole batch; insert failures are rolled back and re-raised for
the caller to classify per candidate.
"""

from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from backend.src.models import Event, EventTemplate, EventTicket
from backend.src.services.exceptions import StoreUnavailableError
from backend.src.utils.logging_config import get_logger


logger = get_logger("db")


class EventStore:
    """SQLAlchemy-backed template source and event store."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_templates(
        self,
        template_uuids: Optional[Sequence[UUID]] = None,
    ) -> List[EventTemplate]:
        """
        Load active templates, optionally restricted to a set of UUIDs.

        Args:
            template_uuids: Only return templates with these UUIDs
                (None or empty means all active templates)

        Returns:
            Active templates ordered by name, with relations loaded

        Raises:
            StoreUnavailableError: If the query fails
        """
        try:
            query = (
                self.db.query(EventTemplate)
                .options(
                    joinedload(EventTemplate.venue),
                    joinedload(EventTemplate.region),
                    selectinload(EventTemplate.template_tickets),
                )
                .filter(EventTemplate.is_active.is_(True))
            )
            if template_uuids:
                query = query.filter(EventTemplate.uuid.in_(list(template_uuids)))
            return query.order_by(EventTemplate.template_name, EventTemplate.id).all()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to load event templates: {e}",
                extra={"template_count": len(template_uuids or [])},
            )
            raise StoreUnavailableError() from e

    def event_exists(self, template_id: int, event_date: date, venue_id: int) -> bool:
        """
        Check whether an event already exists for a template occurrence.

        Raises:
            StoreUnavailableError: If the query fails
        """
        try:
            found = (
                self.db.query(Event.id)
                .filter(
                    Event.template_id == template_id,
                    Event.event_date == event_date,
                    Event.venue_id == venue_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to look up existing event: {e}",
                extra={"template_id": template_id, "event_date": event_date.isoformat()},
            )
            raise StoreUnavailableError() from e
        return found is not None

    def insert_event(self, event: Event, tickets: List[EventTicket]) -> Event:
        """
        Persist an event together with its ticket rows in one transaction.

        Args:
            event: Transient event
            tickets: Transient ticket rows for the event

        Returns:
            The persisted event. If reloading it after the commit fails the
            event is still returned, unrefreshed.

        Raises:
            Exception: Any error before the commit completes, after rolling back
        """
        event_date = event.event_date
        try:
            event.tickets = list(tickets)
            self.db.add(event)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        # Committed; a failed reload must not report the event as lost
        try:
            self.db.refresh(event)
            for ticket in event.tickets:
                self.db.refresh(ticket)
        except SQLAlchemyError as e:
            logger.warning(
                f"Event saved but could not be reloaded: {e}",
                extra={"event_date": event_date.isoformat()},
            )
        return event
