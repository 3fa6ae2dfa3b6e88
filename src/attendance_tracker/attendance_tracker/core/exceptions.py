class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule (open session, duplicate checkinId)."""


class NotFoundError(DomainError):
    """Raised when no matching session or record exists."""


class TransientStoreError(Exception):
    """Raised when the store is unreachable, timed out or out of connections.

    Not a business outcome: callers may retry with backoff.
    """
