# This project was developed with assistance from AI tools.
"""Tests for notification rows and post-commit email delivery."""

import smtplib
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db import Notification
from db.enums import NotificationTemplate
from sqlalchemy.exc import OperationalError

from src.core.config import settings
from src.services.email import EmailService, get_email_service, init_email_service
from src.services.notification import (
    TEMPLATES,
    PendingNotification,
    deliver_notifications,
    queue_notification,
    render,
)

from .factories import make_profile


def test_every_template_has_text():
    assert set(TEMPLATES) == set(NotificationTemplate)


def test_render_rejection_includes_reason():
    title, message = render(
        NotificationTemplate.DOCUMENT_REJECTED,
        {"document_type": "passport", "reason": "expired passport"},
    )
    assert title == "Document rejected"
    assert "passport" in message
    assert "expired passport" in message


async def test_queue_adds_row_with_link(monkeypatch):
    monkeypatch.setattr(settings, "APP_BASE_URL", "https://portal.example.com/")
    session = AsyncMock()
    session.add = MagicMock()
    recipient = make_profile(id="client-1", email="jane@example.com")

    pending = await queue_notification(
        session,
        recipient=recipient,
        template=NotificationTemplate.DOCUMENT_APPROVED,
        context={"document_type": "passport"},
        dossier_id="dossier-1",
        event_id=5,
    )

    row = session.add.call_args[0][0]
    assert isinstance(row, Notification)
    assert row.user_id == "client-1"
    assert row.template_code == "DOCUMENT_APPROVED"
    assert row.action_url == "https://portal.example.com/dashboard/dossiers/dossier-1"
    assert row.email_sent_at is None
    assert pending.email == "jane@example.com"
    session.flush.assert_awaited_once()
    session.commit.assert_not_awaited()


def _pending(email="jane@example.com"):
    row = Notification(
        id="n-1", user_id="client-1", template_code="DOCUMENT_APPROVED",
        title="Document approved", message="Approved.", action_url=None,
    )
    return PendingNotification(notification=row, email=email)


async def test_delivery_skipped_when_email_disabled():
    session = AsyncMock()
    with patch("src.services.notification.get_email_service", return_value=None):
        assert await deliver_notifications(session, [_pending()]) == 0
    session.commit.assert_not_awaited()


async def test_delivery_marks_sent():
    service = MagicMock()
    service.send = AsyncMock()
    session = AsyncMock()
    item = _pending()

    with patch("src.services.notification.get_email_service", return_value=service):
        sent = await deliver_notifications(session, [item])

    assert sent == 1
    assert item.notification.email_sent_at is not None
    service.send.assert_awaited_once_with("jane@example.com", "Document approved", "Approved.")
    session.commit.assert_awaited_once()


async def test_failed_send_is_logged_and_not_retried(caplog):
    service = MagicMock()
    service.send = AsyncMock(side_effect=smtplib.SMTPServerDisconnected("gone"))
    session = AsyncMock()
    item = _pending()

    with patch("src.services.notification.get_email_service", return_value=service):
        sent = await deliver_notifications(session, [item])

    assert sent == 0
    assert item.notification.email_sent_at is None
    assert service.send.await_count == 1
    assert "Email delivery failed" in caplog.text
    session.commit.assert_not_awaited()


async def test_recipient_without_email_is_skipped():
    service = MagicMock()
    service.send = AsyncMock()
    with patch("src.services.notification.get_email_service", return_value=service):
        assert await deliver_notifications(AsyncMock(), [_pending(email=None)]) == 0
    service.send.assert_not_awaited()


async def test_malformed_recipient_is_skipped_and_others_still_sent(caplog):
    service = EmailService("smtp.example.com", 587, None, None, "noreply@example.com", "Partners")
    session = AsyncMock()
    bad = _pending(email="jane@example.com\r\nBcc: other@example.com")
    good = _pending()

    with (
        patch("src.services.notification.get_email_service", return_value=service),
        patch.object(service, "_send_sync") as send_sync,
    ):
        sent = await deliver_notifications(session, [bad, good])

    assert sent == 1
    assert bad.notification.email_sent_at is None
    assert good.notification.email_sent_at is not None
    send_sync.assert_called_once()
    assert "Email delivery failed" in caplog.text


async def test_failure_to_record_delivery_is_logged_and_rolled_back(caplog):
    service = MagicMock()
    service.send = AsyncMock()
    session = AsyncMock()
    session.commit.side_effect = OperationalError("UPDATE notifications", {}, Exception("down"))

    with patch("src.services.notification.get_email_service", return_value=service):
        sent = await deliver_notifications(session, [_pending()])

    assert sent == 1
    session.rollback.assert_awaited_once()
    assert "Failed to record email delivery" in caplog.text


# ---------------------------------------------------------------------------
# EmailService
# ---------------------------------------------------------------------------


def test_init_without_host_disables_email(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", None)
    assert init_email_service(settings) is None
    assert get_email_service() is None


def test_init_with_host(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
    service = init_email_service(settings)
    assert isinstance(service, EmailService)
    assert get_email_service() is service
    monkeypatch.setattr(settings, "SMTP_HOST", None)
    init_email_service(settings)


def test_build_message_headers():
    service = EmailService("smtp.example.com", 587, None, None, "noreply@example.com", "Partners")
    msg = service.build_message("jane@example.com", "Hello", "Body")
    assert msg["To"] == "jane@example.com"
    assert msg["From"] == "Partners <noreply@example.com>"
    assert msg.get_content().strip() == "Body"


def test_subject_must_be_single_line():
    service = EmailService("smtp.example.com", 587, None, None, "noreply@example.com", "Partners")
    with pytest.raises(ValueError):
        service.build_message("jane@example.com", "Hi\r\nBcc: x@example.com", "Body")



def test_recipient_must_be_single_line():
    service = EmailService("smtp.example.com", 587, None, None, "noreply@example.com", "Partners")
    with pytest.raises(ValueError, match="recipient"):
        service.build_message("jane@example.com\nBcc: x@example.com", "Hi", "Body")

async def test_send_uses_starttls_and_login():
    service = EmailService("smtp.example.com", 587, "user", "pw", "noreply@example.com", "Partners")
    with patch("src.services.email.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value.__enter__.return_value
        await service.send("jane@example.com", "Hello", "Body")

    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=10)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("user", "pw")
    smtp.send_message.assert_called_once()
