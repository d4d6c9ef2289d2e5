from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Record not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when a session is missing, malformed, forged or expired.

    The message is the same for every cause so clients cannot tell them apart.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidCredentialError(UserError):
    """Raised when login fails, whether the email or the password was wrong."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class DuplicateIdentityError(UserError):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class StoreError(Exception):
    """Raised when the database fails. Details are logged, never shown to the user."""


class StoreUnavailableError(StoreError):
    """Raised when the database cannot be reached or a call times out."""


class DuplicateKeyError(StoreError):
    """Raised when a write violates a unique constraint."""
