"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
UNAUTHORIZED = "UNAUTHORIZED"
CANCELLED = "CANCELLED"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class AlreadyExistsError(DomainError):
    """Raised when attempting to create a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when input violates a business rule the schema layer cannot express alone."""

    pass


class UnauthorizedError(DomainError):
    """Raised when the caller could not be authenticated or is not allowed to act."""

    pass


class PasswordMismatchError(UnauthorizedError):
    """Raised when an existing volunteer account is accessed with the wrong password."""

    pass


class OperationCancelledError(DomainError):
    """Raised when an operation is aborted because its context was cancelled or timed out."""

    pass


class InternalStoreError(Exception):
    """Raised when the storage backend fails for a reason callers cannot act on.

    The original exception is chained as ``__cause__``; the message carries
    enough context for server-side diagnosis and is never sent to clients.
    """

    pass
