from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from ministry.core.core import Service
from ministry.core.modules.audit.models import AuditAction, AuditLog, AuditLogView, ClientInfo
from ministry.core.modules.user.models import User
from ministry.core.pagination import PaginationResult

logger = structlog.get_logger(__name__)


class AuditService(Service):
    """Append-only log of administrative actions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("audit_logs")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])
        await self._collection.create_index([("user_id", 1)])

    async def record(
        self,
        user_id: UUID,
        action: AuditAction,
        resource_id: str,
        *,
        resource_type: str = "user",
        details: dict[str, Any] | None = None,
        client: ClientInfo | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details or {},
            ip_address=client.ip_address if client else None,
            user_agent=client.user_agent if client else None,
        )
        await self._collection.insert_one(entry.to_mongo())
        logger.info("audit_recorded", action=action, user_id=str(user_id), resource_id=resource_id)
        return entry

    async def list_logs(self, limit: int = 50, offset: int = 0) -> PaginationResult[AuditLogView]:
        """Get paginated audit logs, newest first, with the acting admin's name and email.

        Actor fields are None when the admin has since been deleted.
        """
        total = await self._collection.count_documents({})
        cursor = self._collection.find({}).sort("created_at", -1).skip(offset).limit(limit)
        entries = await AuditLog.list_cursor(cursor)

        actors: dict[UUID, User | None] = {}
        for user_id in {entry.user_id for entry in entries}:
            actors[user_id] = await self.core.services.user.find_user(user_id)

        items: list[AuditLogView] = []
        for entry in entries:
            actor = actors[entry.user_id]
            items.append(
                AuditLogView(
                    **entry.model_dump(),
                    first_name=actor.first_name if actor else None,
                    last_name=actor.last_name if actor else None,
                    email=actor.email if actor else None,
                )
            )
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)
