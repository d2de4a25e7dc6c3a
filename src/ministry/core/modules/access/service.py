from ministry.core.core import Service
from ministry.core.modules.session.models import SessionId
from ministry.core.modules.user.models import User, UserRole
from ministry.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, session_id: SessionId) -> User:
        """Ensure the request carries a valid session and return its user."""
        return await self.core.services.session.get_authenticated_user(session_id)

    async def ensure_admin(self, session_id: SessionId) -> User:
        """Ensure the authenticated user is admin, raise AccessDeniedError if not."""
        user = await self.core.services.session.get_authenticated_user(session_id)
        if user.role != UserRole.ADMIN:
            raise AccessDeniedError("Admin access required")
        return user
