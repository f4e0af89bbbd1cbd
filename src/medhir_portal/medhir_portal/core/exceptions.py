class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StorageFailure(DomainError):
    """Raised by a storage substrate when a read/write/serialization fails.

    The session store catches it and reports it; it never crosses the store API.
    """


class DecodeFailure(DomainError):
    """Raised when a bearer token cannot be decoded into claims."""


class SessionNotFound(DomainError):
    """Raised when a request needs a live session and there is none."""
