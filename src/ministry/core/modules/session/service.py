import asyncio
import contextlib
import secrets
from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ministry.core.core import Service
from ministry.core.modules.session.models import Session, SessionId
from ministry.core.modules.user.models import User
from ministry.errors import AuthenticationError
from ministry.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._sweep_task: asyncio.Task[None] | None = None

    async def on_start(self) -> None:
        """Create indexes and start the expired-session sweep."""
        # Unique index for session_id (for authentication lookups)
        await self._collection.create_index([("session_id", 1)], unique=True)
        # Single index for user_id (for dropping all sessions of a user)
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("expires_at", 1)])
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def on_stop(self) -> None:
        """Stop the sweep task."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None

    async def create_session(self, user_id: UUID) -> SessionId:
        session_id = SessionId(secrets.token_urlsafe(32))
        created_at = now()
        new_session = Session(
            session_id=session_id,
            user_id=user_id,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self.core.config.session_max_age),
        )
        await self._collection.insert_one(new_session.to_mongo())
        return session_id

    async def get_authenticated_user(self, session_id: SessionId) -> User:
        """Resolve a session to its user, re-reading the user on every call."""
        session = await self._collection.find_one({"session_id": session_id, "expires_at": {"$gt": now()}})
        if session is None:
            raise AuthenticationError

        user = await self.core.services.user.find_user(session["user_id"])
        if user is None or not user.is_active:
            raise AuthenticationError
        return user

    async def is_session_valid(self, session_id: SessionId) -> bool:
        try:
            await self.get_authenticated_user(session_id)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, session_id: SessionId) -> None:
        """Invalidate a session by removing it from the database."""
        await self._collection.delete_one({"session_id": session_id})

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        """Remove every session belonging to a user."""
        result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count

    async def sweep_expired(self) -> int:
        """Delete sessions whose expiry has passed."""
        result = await self._collection.delete_many({"expires_at": {"$lte": now()}})
        if result.deleted_count:
            logger.info("sessions_swept", count=result.deleted_count)
        return result.deleted_count

    async def _sweep_loop(self) -> None:
        interval = self.core.config.session_sweep_interval
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep_expired()
            except Exception:
                logger.exception("session_sweep_failed")
