class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid (unknown checkpoint, bad bucket width, ...)."""


class NotFoundError(DomainError):
    """Raised when a student id is unknown to the store."""


class StoreUnavailableError(DomainError):
    """Raised when the record store cannot be read or written."""
