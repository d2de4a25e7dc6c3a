import structlog

from ministry.core.core import Service
from ministry.core.modules.session.models import SessionId
from ministry.core.modules.user.models import User, UserRole
from ministry.core.modules.user.passwords import verify_password
from ministry.errors import AccountDeactivatedError, InvalidCredentialsError, ValidationError

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Registration, login and logout on top of the user directory and session store."""

    async def register(
        self,
        email: str | None,
        username: str | None,
        password: str | None,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
    ) -> tuple[SessionId, User]:
        """Create a student account and log it in."""
        if not email or not username or not password:
            raise ValidationError("Email, username, and password are required")

        user = await self.core.services.user.create_user(
            email=email,
            username=username,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            role=UserRole.STUDENT,
        )
        session_id = await self.core.services.session.create_session(user.id)
        logger.info("user_registered", user_id=str(user.id))
        return session_id, user

    async def login(self, login: str | None, password: str | None) -> tuple[SessionId, User]:
        """Authenticate by email or username and open a session.

        Email lookup wins over username when a value matches both.
        """
        if not login or not password:
            raise ValidationError("Login and password are required")

        users = self.core.services.user
        user = await users.find_user_by_email(login)
        if user is None:
            user = await users.find_user_by_username(login)

        if user is None or not await verify_password(password, user.password_hash):
            logger.info("login_failed", reason="invalid_credentials")
            raise InvalidCredentialsError
        if not user.is_active:
            logger.info("login_failed", reason="account_deactivated", user_id=str(user.id))
            raise AccountDeactivatedError

        session_id = await self.core.services.session.create_session(user.id)
        try:
            await users.record_login(user.id)
        except Exception:
            logger.exception("record_login_failed", user_id=str(user.id))
        logger.info("user_logged_in", user_id=str(user.id))
        return session_id, user

    async def logout(self, session_id: SessionId | None) -> None:
        """End the session if there is one. Safe to call when already logged out."""
        if session_id:
            await self.core.services.session.invalidate_session(session_id)
