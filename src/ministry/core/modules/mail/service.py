import html
from urllib.parse import urlencode

import structlog

from ministry.core.core import Service
from ministry.core.modules.mail.sender import send_email
from ministry.core.modules.user.models import User

logger = structlog.get_logger(__name__)

PLATFORM_NAME = "PKCM Leadership and Ministry Class"


def _display_name(user: User) -> str:
    return user.first_name or user.username or user.email or "there"


class MailService(Service):
    """Transactional emails for account lifecycle events. Delivery is best-effort."""

    def reset_link(self, token: str) -> str:
        return f"{self.core.config.frontend_url.rstrip('/')}/reset-password?{urlencode({'token': token})}"

    async def send_password_reset(self, user: User, token: str) -> bool:
        if not user.email:
            return False
        link = self.reset_link(token)
        ttl_minutes = self.core.config.reset_token_ttl // 60
        text = (
            f"Hello {_display_name(user)},\n\n"
            f"We received a request to reset the password for your {PLATFORM_NAME} account.\n"
            f"Open the link below to choose a new password. It expires in {ttl_minutes} minutes.\n\n"
            f"{link}\n\n"
            "If you did not request a reset, you can ignore this email."
        )
        body = (
            f"<p>Hello {html.escape(_display_name(user))},</p>"
            f"<p>We received a request to reset the password for your {PLATFORM_NAME} account.</p>"
            f'<p><a href="{html.escape(link)}">Reset your password</a> (expires in {ttl_minutes} minutes)</p>'
            "<p>If you did not request a reset, you can ignore this email.</p>"
        )
        sent, error = await send_email(self.core.config, user.email, "Reset your password", text, body)
        if not sent:
            logger.warning("reset_email_failed", user_id=str(user.id), error=error)
        return sent

    async def send_welcome(self, user: User) -> bool:
        if not user.email:
            return False
        text = (
            f"Hello {_display_name(user)}!\n\n"
            f"Welcome to {PLATFORM_NAME}. An account has been created for you.\n\n"
            f"Email: {user.email}\n"
            f"Role: {user.role.capitalize()}\n\n"
            f"To sign in, set your password at {self.core.config.frontend_url.rstrip('/')}/forgot-password"
        )
        sent, error = await send_email(self.core.config, user.email, f"Welcome to {PLATFORM_NAME}", text)
        if not sent:
            logger.warning("welcome_email_failed", user_id=str(user.id), error=error)
        return sent
