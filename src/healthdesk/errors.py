from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotAuthenticatedError(UserError):
    """Raised when a protected operation is called without a live session."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a write would break a uniqueness rule, e.g. a taken username."""

    def __init__(self, message: str = "Already exists") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DependencyError(Exception):
    """Raised when a backing store or the password hasher fails.

    Not a UserError: the message is logged, never shown to the caller.
    """
