# This project was developed with assistance from AI tools.
"""Client notifications for review outcomes and payment failures.

A Notification row is written inside the caller's transaction so it commits
with the status change it reports. Email delivery happens only after that
commit, is best effort, and is never retried: a failed send is logged and
leaves ``email_sent_at`` empty.
"""

import logging
import smtplib
from dataclasses import dataclass
from datetime import UTC, datetime

from db import Notification, Profile
from db.enums import NotificationTemplate
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from .email import get_email_service

logger = logging.getLogger(__name__)

TEMPLATES: dict[NotificationTemplate, tuple[str, str]] = {
    NotificationTemplate.DOCUMENT_APPROVED: (
        "Document approved",
        "Your document '{document_type}' has been approved.",
    ),
    NotificationTemplate.DOCUMENT_REJECTED: (
        "Document rejected",
        "Your document '{document_type}' was rejected: {reason}. "
        "Please submit a corrected version.",
    ),
    NotificationTemplate.DOSSIER_COMPLETED: (
        "Dossier completed",
        "All required documents for your {product_name} dossier are approved. "
        "Your dossier is now complete.",
    ),
    NotificationTemplate.PAYMENT_FAILED: (
        "Payment failed",
        "Your payment for {product_name} could not be processed. "
        "Your account is suspended until a payment succeeds.",
    ),
}


@dataclass
class PendingNotification:
    """A flushed notification awaiting post-commit email delivery."""

    notification: Notification
    email: str | None


def render(template: NotificationTemplate, context: dict) -> tuple[str, str]:
    """Return (title, message) for ``template`` filled from ``context``."""
    title, message = TEMPLATES[template]
    return title, message.format(**context)


def _action_url(dossier_id: str | None) -> str | None:
    if dossier_id is None:
        return None
    return f"{settings.APP_BASE_URL.rstrip('/')}/dashboard/dossiers/{dossier_id}"


async def queue_notification(
    session: AsyncSession,
    *,
    recipient: Profile,
    template: NotificationTemplate,
    context: dict,
    dossier_id: str | None = None,
    event_id: int | None = None,
) -> PendingNotification:
    """Add a notification row for ``recipient`` (flushed, not committed)."""
    title, message = render(template, context)
    notification = Notification(
        user_id=recipient.id,
        dossier_id=dossier_id,
        event_id=event_id,
        template_code=template.value,
        title=title,
        message=message,
        payload=context,
        action_url=_action_url(dossier_id),
    )
    session.add(notification)
    await session.flush()
    logger.info("Notification %s queued for user %s", template.value, recipient.id)
    return PendingNotification(notification=notification, email=recipient.email)


async def deliver_notifications(
    session: AsyncSession,
    pending: list[PendingNotification],
) -> int:
    """Email already-committed notifications. Returns the number sent.

    Send failures, and a failure to record ``email_sent_at``, are logged
    and swallowed; they never undo the committed status change.
    """
    service = get_email_service()
    if service is None or not pending:
        return 0

    sent = 0
    for item in pending:
        if not item.email:
            logger.info("No email on file for user %s, skipping", item.notification.user_id)
            continue
        body = item.notification.message
        if item.notification.action_url:
            body = f"{body}\n\n{item.notification.action_url}"
        try:
            await service.send(item.email, item.notification.title, body)
        except (smtplib.SMTPException, OSError, ValueError):
            logger.exception(
                "Email delivery failed for notification %s", item.notification.id,
            )
            continue
        item.notification.email_sent_at = datetime.now(UTC)
        sent += 1

    if sent:
        try:
            await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to record email delivery for %d notification(s)", sent)
            await session.rollback()
    return sent
