# This project was developed with assistance from AI tools.
"""SMTP email delivery.

Uses the blocking ``smtplib`` client run in a thread-pool executor for async
compatibility. The module exposes a singleton initialised at app startup via
``init_email_service()``; when SMTP_HOST is unset no service is created and
notifications stay in-app only.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from functools import partial

from ..core.config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    """Thin wrapper around an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        from_email: str,
        from_name: str,
        use_tls: bool = True,
        timeout: int = 10,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from = formataddr((from_name, from_email))
        self._use_tls = use_tls
        self._timeout = timeout

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        for label, value in (("recipient", to), ("subject", subject)):
            if any(c in value for c in ("\r", "\n")):
                raise ValueError(f"Email {label} must be a single line")
        msg = EmailMessage()
        msg["From"] = self._from
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls(context=ssl.create_default_context())
            if self._username and self._password:
                smtp.login(self._username, self._password)
            smtp.send_message(msg)

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send one plain-text email. Raises ValueError, smtplib.SMTPException or OSError on failure."""
        msg = self.build_message(to, subject, body)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, partial(self._send_sync, msg))
        logger.info("Email sent to %s (%s)", to, subject)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_service: EmailService | None = None


def init_email_service(cfg: Settings) -> EmailService | None:
    """Initialise the singleton (called once from app lifespan)."""
    global _service  # noqa: PLW0603
    if not cfg.SMTP_HOST:
        logger.warning("SMTP_HOST not set -- email notifications disabled (in-app only)")
        _service = None
        return None
    _service = EmailService(
        host=cfg.SMTP_HOST,
        port=cfg.SMTP_PORT,
        username=cfg.SMTP_USERNAME,
        password=cfg.SMTP_PASSWORD,
        from_email=cfg.SMTP_FROM_EMAIL,
        from_name=cfg.SMTP_FROM_NAME,
        use_tls=cfg.SMTP_USE_TLS,
        timeout=cfg.SMTP_TIMEOUT,
    )
    logger.info("EmailService initialised (host=%s:%s)", cfg.SMTP_HOST, cfg.SMTP_PORT)
    return _service


def get_email_service() -> EmailService | None:
    """Return the EmailService singleton, or None when email is disabled."""
    return _service
