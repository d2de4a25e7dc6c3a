from datetime import datetime
from enum import StrEnum
from typing import Any, NamedTuple
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from ministry.core.db import MongoModel
from ministry.utils import now


class AuditAction(StrEnum):
    CREATE_USER = "create_user"
    UPDATE_USER_ROLE = "update_user_role"
    DEACTIVATE_USER = "deactivate_user"
    DELETE_USER = "delete_user"


class AuditLog(MongoModel):
    """Record of an administrative action."""

    user_id: UUID  # Admin who performed the action
    action: AuditAction
    resource_type: str
    resource_id: str
    details: dict[str, Any] = Field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=now)

    model_config = ConfigDict(alias_generator=to_camel)


class ClientInfo(NamedTuple):
    """Origin of an administrative request."""

    ip_address: str | None = None
    user_agent: str | None = None


class AuditLogView(AuditLog):
    """Audit log entry with the acting admin's name and email."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
