"""Domain errors raised by the service layer.

The HTTP layer translates these into status codes in ``src.main``.
"""


class AppError(Exception):
    """Base class for expected application failures."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed input."""


class DuplicateEmailError(ValidationError):
    """Registration with an email that is already in use."""

    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    """Record is absent, not owned by the caller, or its id is malformed."""


class AuthenticationError(AppError):
    """Email/password pair did not match a user."""


class InvalidTokenError(AppError):
    """Bearer token is malformed, forged, or no longer held by its user."""
