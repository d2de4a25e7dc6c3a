from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.core.db import MongoModel
from ministry.utils import now


class UserRole(StrEnum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email and username (unique when present) and reset_token.
    """

    email: str | None = None
    username: str | None = None
    password_hash: str | None = None  # "<hex key>.<hex salt>", None until a password is set
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    role: UserRole = UserRole.STUDENT
    is_active: bool = True
    last_login_at: datetime | None = None
    reset_token: str | None = None
    reset_token_expires: datetime | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str | None = Field(None, description="Email address")
    username: str | None = Field(None, description="Username")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    phone_number: str | None = Field(None, description="Phone number")
    role: UserRole = Field(..., description="User role")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            role=user.role,
        )


class AdminUserView(UserView):
    """User account information as shown to administrators."""

    is_active: bool = Field(..., description="Whether the account can log in")
    last_login_at: datetime | None = Field(None, description="Last successful login")
    created_at: datetime = Field(..., description="Account creation time")

    @classmethod
    def from_domain(cls, user: User) -> "AdminUserView":
        return cls(
            **UserView.from_domain(user).model_dump(),
            is_active=user.is_active,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )
