"""
Event template service for authoring recurring event templates.

Provides business logic for creating, listing, retrieving, updating,
deleting and activating/deactivating templates. Recurrence input has
already been validated and normalized by EventTemplateCreate.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from backend.src.models import EventTemplate, EventTemplateTicket, Region, Venue
from backend.src.schemas.event_template import EventTemplateCreate, EventTemplateUpdate
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class EventTemplateService:
    """
    Service for managing event templates.

    Usage:
        >>> service = EventTemplateService(db_session)
        >>> template = service.create(EventTemplateCreate(...))
        >>> service.set_active(template.guid, False)
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_guid(self, guid: str) -> EventTemplate:
        """
        Get a template by GUID.

        Args:
            guid: Template GUID (tpl_xxx)

        Returns:
            EventTemplate instance

        Raises:
            NotFoundError: If the GUID is malformed or no template matches
        """
        if not GuidService.validate_guid(guid, "tpl"):
            raise NotFoundError("EventTemplate", guid)

        uuid_value = GuidService.parse_guid(guid, "tpl")
        template = (
            self._query()
            .filter(EventTemplate.uuid == uuid_value)
            .first()
        )
        if not template:
            raise NotFoundError("EventTemplate", guid)
        return template

    def list(
        self,
        is_active: Optional[bool] = None,
        venue_guid: Optional[str] = None,
        region_guid: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[EventTemplate], int]:
        """
        List templates ordered by name, with optional filtering.

        Args:
            is_active: Filter by active flag (None = all)
            venue_guid: Only templates at this venue (ven_xxx)
            region_guid: Only templates in this region (reg_xxx)
            search: Case-insensitive search in template name
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Tuple of (list of EventTemplate instances, total count)

        Raises:
            ValidationError: If a venue or region GUID is malformed or unknown
        """
        query = self._query()
        if is_active is not None:
            query = query.filter(EventTemplate.is_active.is_(is_active))
        if venue_guid:
            venue = self._resolve(Venue, venue_guid, "ven", "venue_guid")
            query = query.filter(EventTemplate.venue_id == venue.id)
        if region_guid:
            region = self._resolve(Region, region_guid, "reg", "region_guid")
            query = query.filter(EventTemplate.region_id == region.id)
        if search:
            query = query.filter(EventTemplate.template_name.ilike(f"%{search.strip()}%"))

        total = query.count()
        templates = (
            query
            .order_by(EventTemplate.template_name, EventTemplate.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return templates, total

    def create(self, data: EventTemplateCreate) -> EventTemplate:
        """
        Create a template with its ticket types.

        Args:
            data: Validated template input

        Returns:
            Created EventTemplate

        Raises:
            ValidationError: If the venue or region does not exist
        """
        template = EventTemplate()
        self._apply(template, data)

        try:
            self.db.add(template)
            self.db.commit()
            self.db.refresh(template)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to create event template: {e}")
            raise ValidationError("Event template could not be saved")

        logger.info(
            f"Created event template: {template.template_name}",
            extra={
                "template_guid": template.guid,
                "recurrence_type": template.recurrence_type,
                "ticket_count": len(template.template_tickets),
            },
        )
        return template

    def update(self, guid: str, data: EventTemplateUpdate) -> EventTemplate:
        """
        Replace a template's configuration and ticket types.

        The ticket definitions are replaced as a whole, in the given order.
        Events already generated keep their own tickets; only future
        generation uses the new configuration.

        Args:
            guid: Template GUID (tpl_xxx)
            data: Validated template input

        Returns:
            Updated EventTemplate

        Raises:
            NotFoundError: If the template does not exist
            ValidationError: If the venue or region does not exist
        """
        template = self.get_by_guid(guid)
        self._apply(template, data)

        try:
            self.db.commit()
            self.db.refresh(template)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to update event template {guid}: {e}")
            raise ValidationError("Event template could not be saved")

        logger.info(
            f"Updated event template: {template.template_name}",
            extra={
                "template_guid": template.guid,
                "recurrence_type": template.recurrence_type,
                "ticket_count": len(template.template_tickets),
            },
        )
        return template

    def delete(self, guid: str) -> None:
        """
        Delete a template and its ticket types.

        Events generated from it are kept; their template reference is
        cleared by the database (ON DELETE SET NULL).

        Raises:
            NotFoundError: If the template does not exist
        """
        template = self.get_by_guid(guid)
        name = template.template_name

        self.db.delete(template)
        self.db.commit()

        logger.info(f"Deleted event template: {name}", extra={"template_guid": guid})

    def set_active(self, guid: str, is_active: bool) -> EventTemplate:
        """
        Activate or deactivate a template.

        Raises:
            NotFoundError: If the template does not exist
        """
        template = self.get_by_guid(guid)
        template.is_active = is_active
        self.db.commit()
        self.db.refresh(template)

        logger.info(
            f"{'Activated' if is_active else 'Deactivated'} event template",
            extra={"template_guid": template.guid},
        )
        return template

    def build_template_response(self, template: EventTemplate) -> Dict[str, Any]:
        """Build an API response dict for a template."""
        return {
            "guid": template.guid,
            "template_name": template.template_name,
            "venue_guid": template.venue.guid if template.venue else None,
            "venue_name": template.venue.name if template.venue else None,
            "region_guid": template.region.guid if template.region else None,
            "region_name": template.region.name if template.region else None,
            "default_title_format": template.default_title_format,
            "default_description": template.default_description,
            "recurrence_type": template.recurrence_type,
            "recurring_days_of_week": list(template.recurring_days_of_week or []),
            "days_of_month": list(template.days_of_month or []),
            "default_start_time": template.default_start_time,
            "default_end_time": template.default_end_time,
            "start_date": template.start_date,
            "end_date": template.end_date,
            "is_active": template.is_active,
            "tickets": [
                {
                    "guid": ticket.guid,
                    "seat_type": ticket.seat_type,
                    "default_price": ticket.default_price,
                    "default_capacity": ticket.default_capacity,
                    "default_description": ticket.default_description,
                }
                for ticket in template.template_tickets
            ],
            "created_at": template.created_at,
            "updated_at": template.updated_at,
        }

    def _query(self):
        return self.db.query(EventTemplate).options(
            joinedload(EventTemplate.venue),
            joinedload(EventTemplate.region),
            selectinload(EventTemplate.template_tickets),
        )

    def _resolve(self, model, guid: str, prefix: str, field: str):
        try:
            uuid_value = GuidService.parse_guid(guid, prefix)
        except ValueError as e:
            raise ValidationError(str(e), field=field)

        instance = self.db.query(model).filter(model.uuid == uuid_value).first()
        if not instance:
            raise ValidationError(f"{model.__name__} {guid} not found", field=field)
        return instance

    def _apply(self, template: EventTemplate, data: EventTemplateCreate) -> None:
        venue = self._resolve(Venue, data.venue_guid, "ven", "venue_guid")
        region = self._resolve(Region, data.region_guid, "reg", "region_guid")

        template.template_name = data.template_name.strip()
        template.venue_id = venue.id
        template.region_id = region.id
        template.default_title_format = data.default_title_format
        template.default_description = data.default_description
        template.recurrence_type = data.recurrence_type.value
        template.recurring_days_of_week = data.recurring_days_of_week
        template.days_of_month = data.days_of_month
        template.default_start_time = data.default_start_time
        template.default_end_time = data.default_end_time
        template.start_date = data.start_date
        template.end_date = data.end_date
        template.is_active = data.is_active
        # delete-orphan removes the previous ticket rows
        template.template_tickets = [
            EventTemplateTicket(
                position=index,
                seat_type=ticket.seat_type,
                default_price=ticket.default_price,
                default_capacity=ticket.default_capacity,
                default_description=ticket.default_description,
            )
            for index, ticket in enumerate(data.tickets)
        ]
