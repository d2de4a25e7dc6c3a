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
    """Raised when a request has no valid session."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when the login identifier or the password is wrong.

    Both cases share one message so callers cannot tell which part failed.
    """

    def __init__(self, message: str = "Invalid email/username or password") -> None:
        super().__init__(message)


class AccountDeactivatedError(AuthenticationError):
    """Raised when valid credentials belong to a deactivated account."""

    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DuplicateIdentityError(ValidationError):
    """Raised when an email or username is already taken."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidOrExpiredTokenError(ValidationError):
    """Raised when a password reset token is unknown, used or expired."""

    def __init__(self, message: str = "Invalid or expired reset token") -> None:
        super().__init__(message)
