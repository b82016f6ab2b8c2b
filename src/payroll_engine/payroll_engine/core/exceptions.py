from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class EntityNotFoundError(DomainError):
    """Raised when a referenced employee, store, relation or payroll does not exist."""

    def __init__(self, entity: str, entity_id: object = None, message: Optional[str] = None):
        if message is None:
            message = f"{entity} not found" if entity_id is None else f"{entity} not found (id={entity_id})"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class InvalidOperationError(DomainError):
    """Raised for illegal state transitions (duplicate check-in, illegal payroll transition, ...)."""


class LocationVerificationError(DomainError):
    """Raised when reported coordinates are missing or outside the store radius."""

    @classmethod
    def out_of_range(cls) -> "LocationVerificationError":
        return cls("Location is outside the store radius. Please check in from inside the store.")


class ConcurrencyConflictError(DomainError):
    """Optimistic-lock version mismatch. Safe for the caller to retry."""
