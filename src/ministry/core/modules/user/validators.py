from ministry.core.modules.user.models import UserRole
from ministry.errors import ValidationError

MIN_PASSWORD_LENGTH = 6


def validate_password(password: str | None) -> str:
    """Validate password meets requirements and return it.

    Requirements:
    - Minimum length of 6 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def parse_role(role: str | None) -> UserRole:
    """Convert a raw role string to UserRole, raising ValidationError if unknown."""
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationError("Invalid role") from None
