"""
Event model for concrete fight-night occurrences and their ticket inventory.

Events are either created by hand in the admin screens or materialized from
an EventTemplate by the event generator. Generated events carry a
template_id back-reference.

Design Rationale:
- start_time/end_time are absolute timestamps (event_date + template time)
- (template_id, event_date, venue_id) is unique so concurrent generation
  runs can never create the same occurrence twice; rows without a
  template_id are unaffected (NULLs never collide)
- EventTicket rows are owned by their event (CASCADE on delete)
- sold_count is mutated only by the booking flows
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text, Numeric,
    ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class EventStatus(enum.Enum):
    """Event lifecycle status."""
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Event(Base, GuidMixin):
    """
    Fight-night event.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (evt_xxx, inherited from GuidMixin)
        title: Event title (formatted from the template for generated events)
        description: Event description
        event_date: Calendar day of the event
        start_time: Absolute start timestamp
        end_time: Absolute end timestamp (optional)
        venue_id: FK to Venue
        region_id: FK to Region
        template_id: FK to the EventTemplate that generated it (NULL = manual)
        status: Lifecycle status (SCHEDULED at creation)
        uses_default_poster: True when no custom poster was uploaded
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        tickets: Ticket inventory (one-to-many, CASCADE on delete)
    """

    __tablename__ = "events"

    GUID_PREFIX = "evt"

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
    template_id = Column(
        Integer,
        ForeignKey("event_templates.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    event_date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)

    status = Column(String(20), default=EventStatus.SCHEDULED.value, nullable=False)
    uses_default_poster = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    tickets = relationship(
        "EventTicket",
        back_populates="event",
        order_by="EventTicket.id",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint(
            "template_id", "event_date", "venue_id",
            name="uq_events_template_date_venue"
        ),
        Index("idx_events_venue_date", "venue_id", "event_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"date={self.event_date}, "
            f"status={self.status}"
            f")>"
        )

    def __str__(self) -> str:
        return f"{self.title} - {self.event_date}"


class EventTicket(Base, GuidMixin):
    """
    Ticket inventory row for one seat type of one event.

    Attributes:
        event_id: Owning event
        seat_type: Seat type (e.g. "Ringside")
        price: Ticket price
        capacity: Number of seats on sale
        description: Optional seat description
        sold_count: Seats sold so far (0 at creation)
    """

    __tablename__ = "event_tickets"

    GUID_PREFIX = "etk"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    seat_type = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    sold_count = Column(Integer, default=0, nullable=False)

    event = relationship("Event", back_populates="tickets")

    @property
    def remaining(self) -> int:
        """Seats still available."""
        return max((self.capacity or 0) - (self.sold_count or 0), 0)

    def __repr__(self) -> str:
        return (
            f"<EventTicket("
            f"id={self.id}, seat_type='{self.seat_type}', "
            f"sold={self.sold_count}/{self.capacity}"
            f")>"
        )
