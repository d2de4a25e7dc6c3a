"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from ministry.core.db import MongoModel
from ministry.utils import now

SessionId = NewType("SessionId", str)


class Session(MongoModel):
    """Server-side login session, referenced by the session cookie.

    Indexed on session_id - unique, user_id, expires_at. Expiry is fixed at
    creation and never extended.
    """

    session_id: str
    user_id: UUID
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime
