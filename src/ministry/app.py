from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from ministry.config import Config
from ministry.core.core import Core
from ministry.core.modules.audit.models import AuditAction, AuditLogView, ClientInfo
from ministry.core.modules.session.models import SessionId
from ministry.core.modules.user.models import AdminUserView, UserView
from ministry.core.modules.user.validators import parse_role
from ministry.core.pagination import PaginationResult
from ministry.errors import ValidationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_session_valid(self, session_id: SessionId) -> bool:
        """Check if session is valid."""
        return await self._core.services.session.is_session_valid(session_id)

    # === Authentication ===
    async def register(
        self,
        email: str | None,
        username: str | None,
        password: str | None,
        first_name: str | None,
        last_name: str | None,
        phone_number: str | None,
    ) -> tuple[SessionId, UserView]:
        """Create a student account and open a session for it."""
        session_id, user = await self._core.services.auth.register(
            email, username, password, first_name, last_name, phone_number
        )
        return session_id, UserView.from_domain(user)

    async def login(self, login: str | None, password: str | None) -> tuple[SessionId, UserView]:
        """Authenticate user by email or username and create session."""
        session_id, user = await self._core.services.auth.login(login, password)
        return session_id, UserView.from_domain(user)

    async def logout(self, session_id: SessionId | None) -> None:
        """Invalidate user session, if any."""
        await self._core.services.auth.logout(session_id)

    async def get_current_user(self, session_id: SessionId) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.access.ensure_authenticated(session_id)
        return UserView.from_domain(current_user)

    async def update_profile(
        self, session_id: SessionId, first_name: str | None, last_name: str | None, phone_number: str | None
    ) -> UserView:
        """Update the current user's name and phone number."""
        current_user = await self._core.services.access.ensure_authenticated(session_id)
        user = await self._core.services.user.update_profile(current_user.id, first_name, last_name, phone_number)
        return UserView.from_domain(user)

    # === Password reset ===
    async def request_password_reset(self, email: str | None) -> str:
        return await self._core.services.password_reset.request_reset(email)

    async def reset_password(self, token: str | None, new_password: str | None) -> str:
        return await self._core.services.password_reset.confirm_reset(token, new_password)

    # === User management ===
    async def get_all_users(self, session_id: SessionId) -> list[AdminUserView]:
        """Get all users (admin only)."""
        await self._core.services.access.ensure_admin(session_id)
        users = await self._core.services.user.get_all_users()
        return [AdminUserView.from_domain(user) for user in users]

    async def create_user(
        self,
        session_id: SessionId,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
        role: str | None,
        username: str | None = None,
        password: str | None = None,
        client: ClientInfo | None = None,
    ) -> AdminUserView:
        """Create a user account (admin only). Without a password the user sets one via reset."""
        admin = await self._core.services.access.ensure_admin(session_id)
        if not email or not first_name or not last_name or not role:
            raise ValidationError("All fields are required")
        user = await self._core.services.user.create_user(
            email=email,
            username=username or None,
            password=password or None,
            first_name=first_name,
            last_name=last_name,
            role=parse_role(role),
        )
        await self._core.services.audit.record(
            admin.id, AuditAction.CREATE_USER, str(user.id), details={"role": user.role}, client=client
        )
        await self._core.services.mail.send_welcome(user)
        return AdminUserView.from_domain(user)

    async def update_user_role(
        self, session_id: SessionId, user_id: UUID, role: str | None, client: ClientInfo | None = None
    ) -> AdminUserView:
        """Change a user's role (admin only). Applies from the user's next request."""
        admin = await self._core.services.access.ensure_admin(session_id)
        new_role = parse_role(role)
        user = await self._core.services.user.update_role(user_id, new_role)
        await self._core.services.audit.record(
            admin.id,
            AuditAction.UPDATE_USER_ROLE,
            str(user_id),
            details={"newRole": new_role},
            client=client,
        )
        return AdminUserView.from_domain(user)

    async def deactivate_user(
        self,
        session_id: SessionId,
        user_id: UUID,
        permanent: bool = False,
        client: ClientInfo | None = None,
    ) -> None:
        """Deactivate a user, or delete them when `permanent` (admin only, cannot target self)."""
        admin = await self._core.services.access.ensure_admin(session_id)
        if user_id == admin.id:
            raise ValidationError("Cannot deactivate yourself")

        if permanent:
            await self._core.services.user.delete_user(user_id)
            action = AuditAction.DELETE_USER
        else:
            await self._core.services.user.set_active(user_id, is_active=False)
            action = AuditAction.DEACTIVATE_USER
        await self._core.services.session.invalidate_user_sessions(user_id)
        await self._core.services.audit.record(admin.id, action, str(user_id), client=client)

    async def get_audit_logs(self, session_id: SessionId, limit: int = 50, offset: int = 0) -> PaginationResult[AuditLogView]:
        """Get paginated audit log (admin only)."""
        await self._core.services.access.ensure_admin(session_id)
        return await self._core.services.audit.list_logs(limit, offset)
