import secrets
from datetime import timedelta

import structlog

from ministry.core.core import Service
from ministry.core.modules.user.validators import validate_password
from ministry.errors import InvalidOrExpiredTokenError, ValidationError
from ministry.utils import now

logger = structlog.get_logger(__name__)

RESET_REQUESTED_MESSAGE = "If the email exists, a reset link has been sent"
RESET_COMPLETED_MESSAGE = "Password has been reset successfully"


class PasswordResetService(Service):
    """Single-use, time-limited password reset tokens delivered by email."""

    async def request_reset(self, email: str | None) -> str:
        """Issue a reset token for `email` and mail it.

        The returned message is identical whether or not the email is registered.
        """
        if not email:
            raise ValidationError("Email is required")

        user = await self.core.services.user.find_user_by_email(email)
        if user is None:
            logger.info("password_reset_unknown_email")
            return RESET_REQUESTED_MESSAGE

        token = secrets.token_hex(32)
        expires = now() + timedelta(seconds=self.core.config.reset_token_ttl)
        await self.core.services.user.set_reset_token(user.id, token, expires)
        logger.info("password_reset_requested", user_id=str(user.id))

        await self.core.services.mail.send_password_reset(user, token)
        return RESET_REQUESTED_MESSAGE

    async def confirm_reset(self, token: str | None, new_password: str | None) -> str:
        """Set a new password using a reset token. The token is consumed on success."""
        password = validate_password(new_password)
        if not token:
            raise InvalidOrExpiredTokenError

        user = await self.core.services.user.find_user_by_reset_token(token, now())
        if user is None:
            raise InvalidOrExpiredTokenError

        await self.core.services.user.reset_password(user.id, password)
        logger.info("password_reset_completed", user_id=str(user.id))
        return RESET_COMPLETED_MESSAGE
