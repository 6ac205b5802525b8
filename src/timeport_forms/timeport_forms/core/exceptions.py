from __future__ import annotations

from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class SchemaIntegrityError(DomainError):
    """Raised when a form schema cannot be saved or published."""

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors is not None else [message]


class FieldNotFoundError(SchemaIntegrityError):
    """Raised when a builder operation targets a field id that is not in the schema."""

    def __init__(self, field_id: str):
        super().__init__(f"Field not found: {field_id}")
        self.field_id = field_id


class NotFoundError(DomainError):
    """Raised when a form template does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class FormulaError(DomainError):
    """Raised by the formula parser; never escapes the calculation engine."""
