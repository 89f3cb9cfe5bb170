"""
Region model (e.g. Bangkok, Phuket, Koh Samui).
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Region(Base, GuidMixin):
    """Geographic region used to group venues and events."""

    __tablename__ = "regions"

    GUID_PREFIX = "reg"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Region(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        return self.name
