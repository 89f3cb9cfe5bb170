"""
Service layer for business logic.

Service classes are imported from their own modules
(e.g. ``backend.src.services.event_generation_service``); this package
only re-exports the model-independent pieces so that models can use
GUID helpers without import cycles.
"""

from backend.src.services.guid import GuidService
from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ValidationError,
    StoreUnavailableError,
)

__all__ = [
    "GuidService",
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "StoreUnavailableError",
]
