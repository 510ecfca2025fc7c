"""Domain-level exception hierarchy for the sorting package."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for sorting failures."""


class PreconditionError(DomainError):
    """Raised when a caller breaks a contract (e.g. passes no query handle)."""


class SchemaError(PreconditionError):
    """Raised when an entity type cannot be reflected into sortable fields."""


class ValidationError(DomainError):
    """Raised when a sort descriptor is rejected by the active policy."""


class DuplicateSortFieldError(ValidationError):
    """Raised when a descriptor names the same field twice under the `error` policy."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"duplicate sort field: {field_name}")
        self.field_name = field_name
