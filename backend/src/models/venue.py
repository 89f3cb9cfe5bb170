"""
Venue model for fight venues (stadiums, gyms, arenas).

Venues are maintained by the admin CRUD screens; the event generator only
reads them to copy venue_id onto generated events and to substitute the
venue name into event titles.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Venue(Base, GuidMixin):
    """
    Fight venue.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (ven_xxx, inherited from GuidMixin)
        name: Display name (e.g., "Lumpinee Stadium")
        address: Optional street address
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "venues"

    GUID_PREFIX = "ven"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        return self.name
