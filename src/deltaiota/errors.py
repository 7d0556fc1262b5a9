from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "not authorized") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class EmptyFieldError(ValidationError):
    """Raised when a required field is empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"empty field: {field}")


class InvalidFieldError(ValidationError):
    """Raised when a field is present but holds an unacceptable value."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"invalid field: {field}")


class ConflictError(UserError):
    """Raised when a write would violate a uniqueness constraint."""


class ReadOnlyError(Exception):
    """Raised by the store when the database does not currently accept writes.

    Not a UserError: callers decide whether the write was optional.
    """
