"""Email sending over SMTP."""

from email.message import EmailMessage

import aiosmtplib
import structlog

from ministry.config import Config

logger = structlog.get_logger(__name__)


async def send_email(config: Config, to: str, subject: str, text: str, html: str | None = None) -> tuple[bool, str | None]:
    """Send an email through the configured SMTP server.

    Args:
        config: Application config holding SMTP settings
        to: Recipient address
        subject: Message subject
        text: Plain-text body
        html: Optional HTML alternative

    Returns:
        Tuple of (success: bool, error_message: str | None)
        - (True, None) on success
        - (False, error_message) on failure
    """
    if not config.smtp_host:
        logger.warning("email_not_configured", to=to, subject=subject)
        return False, "SMTP is not configured"

    message = EmailMessage()
    message["From"] = config.mail_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content(text)
    if html:
        message.add_alternative(html, subtype="html")

    try:
        await aiosmtplib.send(
            message,
            hostname=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username or None,
            password=config.smtp_password or None,
            use_tls=config.smtp_use_tls,
        )
    except aiosmtplib.SMTPException as e:
        error_msg = str(e)
        logger.exception("email_send_failed", to=to, error=error_msg)
        return False, error_msg
    except Exception as e:
        error_msg = str(e)
        logger.exception("email_send_error", to=to, error=error_msg)
        return False, error_msg
    else:
        logger.debug("email_sent", to=to, subject=subject)
        return True, None
