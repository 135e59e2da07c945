"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class StorageError(DomainError):
    """The backing store failed for a reason other than a rule violation."""
