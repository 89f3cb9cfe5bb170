"""
EventTemplate model for recurring fight nights.

An EventTemplate describes a recurring pattern of events at one venue
(e.g. "Lumpinee Fight Night, every Tuesday and Saturday at 18:30") together
with the default ticket inventory each generated event receives.

Design Rationale:
- Recurrence arrays are stored as JSON integer lists (IntListType) and
  normalized at the schema boundary before they reach this table
- Times of day are stored as "HH:MM" strings, combined with a calendar
  date only when an event is generated
- start_date/end_date further bound the generation window
- Ticket definitions are owned by the template (CASCADE on delete)
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text, Numeric,
    ForeignKey
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin
from backend.src.models.types import IntListType
from backend.src.services.recurrence import RecurrenceRule, RecurrenceType


class EventTemplate(Base, GuidMixin):
    """
    Recurring event template.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (tpl_xxx, inherited from GuidMixin)
        template_name: Admin-facing template name
        venue_id: Venue copied onto generated events
        region_id: Region copied onto generated events
        default_title_format: Title with {venue}, {date}, {time} placeholders
        default_description: Description copied verbatim onto generated events
        recurrence_type: none | weekly | monthly
        recurring_days_of_week: Weekdays 0-6 (Sunday = 0) for weekly templates
        days_of_month: Days 1-31 for monthly templates
        default_start_time: "HH:MM" (24-hour), required
        default_end_time: "HH:MM" (24-hour), optional
        start_date: Optional first date the template may generate
        end_date: Optional last date the template may generate
        is_active: Only active templates are eligible for generation
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        venue: Venue (many-to-one, RESTRICT on delete)
        region: Region (many-to-one, RESTRICT on delete)
        template_tickets: Ticket-type definitions (one-to-many, CASCADE)
    """

    __tablename__ = "event_templates"

    GUID_PREFIX = "tpl"

    id = Column(Integer, primary_key=True, autoincrement=True)

    venue_id = Column(
        Integer,
        ForeignKey("venues.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    region_id = Column(
        Integer,
        ForeignKey("regions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    template_name = Column(String(255), nullable=False)
    default_title_format = Column(String(255), nullable=False)
    default_description = Column(Text, nullable=True)

    # Recurrence
    recurrence_type = Column(
        String(20),
        default=RecurrenceType.NONE.value,
        nullable=False
    )
    recurring_days_of_week = Column(IntListType, nullable=False, default=list)
    days_of_month = Column(IntListType, nullable=False, default=list)
    default_start_time = Column(String(8), nullable=False)
    default_end_time = Column(String(8), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    venue = relationship("Venue")
    region = relationship("Region")
    template_tickets = relationship(
        "EventTemplateTicket",
        back_populates="template",
        order_by="EventTemplateTicket.position",
        cascade="all, delete-orphan"
    )

    @property
    def recurrence_rule(self) -> RecurrenceRule:
        """
        Normalized recurrence rule for the date calculator.

        Raises:
            ValueError: If recurrence_type is not a known value
        """
        return RecurrenceRule.from_template(self)

    def __repr__(self) -> str:
        return (
            f"<EventTemplate("
            f"id={self.id}, "
            f"name='{self.template_name}', "
            f"recurrence={self.recurrence_type}, "
            f"active={self.is_active}"
            f")>"
        )

    def __str__(self) -> str:
        return self.template_name


class EventTemplateTicket(Base, GuidMixin):
    """
    Ticket-type definition on a template (e.g. Ringside, Stadium, VIP).

    Each generated event receives one EventTicket per definition, with
    default_price/default_capacity/default_description copied across.
    """

    __tablename__ = "event_template_tickets"

    GUID_PREFIX = "ttk"

    id = Column(Integer, primary_key=True, autoincrement=True)
    template_id = Column(
        Integer,
        ForeignKey("event_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Preserves the admin-entered order of ticket types
    position = Column(Integer, nullable=False, default=0)

    seat_type = Column(String(100), nullable=False)
    default_price = Column(Numeric(10, 2), nullable=False)
    default_capacity = Column(Integer, nullable=False)
    default_description = Column(Text, nullable=True)

    template = relationship("EventTemplate", back_populates="template_tickets")

    def __repr__(self) -> str:
        return (
            f"<EventTemplateTicket("
            f"id={self.id}, seat_type='{self.seat_type}', "
            f"price={self.default_price}, capacity={self.default_capacity}"
            f")>"
        )
