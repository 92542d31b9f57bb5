class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed; nothing is persisted."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule (active email)."""


class AlreadyDeletedError(ConflictError):
    """Raised when soft-deleting a user that is already soft-deleted."""


class NotFoundError(DomainError):
    """Raised when a referenced user or event does not exist."""
