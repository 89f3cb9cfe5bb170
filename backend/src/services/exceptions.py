"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class StoreUnavailableError(ServiceError):
    """
    Raised when the event/template store cannot be reached.

    Unlike a single failed insert, this aborts the whole generation batch;
    the caller decides whether to retry.
    """

    def __init__(self, message: str = "Event store is unavailable"):
        self.message = message
        super().__init__(message)
