# This project was developed with assistance from AI tools.
"""Tests for order outcomes and their effect on profile, link, and dossier."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db import Dossier
from db.enums import (
    DossierStatus,
    EventType,
    NotificationTemplate,
    OrderStatus,
    PaymentLinkStatus,
    ProfileStatus,
    UserRole,
)

from src.core.errors import AuthorizationError, InvalidTransitionError, ValidationError
from src.services.order import update_order_status

from .factories import make_dossier, make_order, make_payment_link, make_product, make_profile, make_user

ADMIN = make_user("admin-1", UserRole.ADMIN)


def _result(single):
    r = MagicMock()
    r.scalar_one_or_none.return_value = single
    r.unique.return_value.scalar_one_or_none.return_value = single
    return r


def _session(order, profile, product=None, existing_dossier=None, link=None):
    """Queries run in order: order, profile, product, then the dossier lookup."""
    session = AsyncMock()
    session.add = MagicMock(side_effect=lambda obj: setattr(obj, "id", "dossier-new"))
    session.execute = AsyncMock(side_effect=[
        _result(order), _result(profile), _result(product), _result(existing_dossier),
    ])
    session.get = AsyncMock(return_value=link)
    return session


@pytest.fixture
def writers():
    with (
        patch("src.services.order.write_event", new_callable=AsyncMock) as order_w,
        patch("src.services.profile.write_event", new_callable=AsyncMock) as profile_w,
        patch("src.services.payment_link.write_event", new_callable=AsyncMock) as link_w,
    ):
        yield order_w, profile_w, link_w


@pytest.fixture
def notify():
    queue = AsyncMock(return_value=MagicMock())
    deliver = AsyncMock(return_value=0)
    with (
        patch("src.services.order.queue_notification", queue),
        patch("src.services.order.deliver_notifications", deliver),
    ):
        yield queue, deliver


async def test_paid_order_activates_and_opens_dossier(writers, notify):
    order_w, profile_w, link_w = writers
    order = make_order(payment_link_id="link-1")
    profile = make_profile(status=ProfileStatus.PENDING)
    link = make_payment_link()
    session = _session(order, profile, product=make_product(), link=link)

    result, profile_status, dossier_id = await update_order_status(session, ADMIN, "order-1", "PAID")

    assert result.status == OrderStatus.PAID
    assert result.paid_at is not None
    assert profile_status == ProfileStatus.ACTIVE
    assert link.status == PaymentLinkStatus.USED
    assert link.used_by == "client-1"

    created = session.add.call_args[0][0]
    assert isinstance(created, Dossier)
    assert created.status == DossierStatus.QUALIFICATION
    assert created.product_id == "prod-llc"
    assert dossier_id == "dossier-new"

    order_events = [c.kwargs["event_type"] for c in order_w.await_args_list]
    assert order_events == [EventType.PAYMENT_RECEIVED, EventType.DOSSIER_CREATED]
    assert profile_w.await_args.kwargs["event_type"] == EventType.CLIENT_STATUS_CHANGED
    assert link_w.await_args.kwargs["event_type"] == EventType.PAYMENT_LINK_USED
    session.commit.assert_awaited_once()


async def test_paid_order_reuses_existing_dossier(writers, notify):
    existing = make_dossier(id="dossier-9")
    session = _session(make_order(), make_profile(), product=make_product(), existing_dossier=existing)

    _, _, dossier_id = await update_order_status(session, ADMIN, "order-1", OrderStatus.PAID)

    assert dossier_id == "dossier-9"
    session.add.assert_not_called()


async def test_paid_order_leaves_used_link_alone(writers, notify):
    _, _, link_w = writers
    link = make_payment_link(status=PaymentLinkStatus.EXPIRED)
    session = _session(
        make_order(payment_link_id="link-1"), make_profile(), product=make_product(),
        existing_dossier=make_dossier(), link=link,
    )

    await update_order_status(session, ADMIN, "order-1", "PAID")

    assert link.status == PaymentLinkStatus.EXPIRED
    link_w.assert_not_awaited()


async def test_failed_order_suspends_and_notifies(writers, notify):
    order_w, profile_w, _ = writers
    queue, deliver = notify
    profile = make_profile(status=ProfileStatus.ACTIVE)
    session = _session(make_order(), profile, product=make_product())

    _, profile_status, dossier_id = await update_order_status(
        session, ADMIN, "order-1", "FAILED", "card_declined",
    )

    assert profile_status == ProfileStatus.SUSPENDED
    assert dossier_id is None
    assert order_w.await_args.kwargs["event_type"] == EventType.PAYMENT_FAILED
    assert order_w.await_args.kwargs["payload"]["reason"] == "card_declined"
    assert profile_w.await_args.kwargs["payload"]["reason"] == "card_declined"
    assert queue.await_args.kwargs["template"] == NotificationTemplate.PAYMENT_FAILED
    assert queue.await_args.kwargs["recipient"] is profile
    deliver.assert_awaited_once()


async def test_retry_after_failure_reactivates(writers, notify):
    profile = make_profile(status=ProfileStatus.SUSPENDED)
    session = _session(
        make_order(status=OrderStatus.FAILED), profile, product=make_product(),
        existing_dossier=make_dossier(),
    )

    _, profile_status, _ = await update_order_status(session, ADMIN, "order-1", "PAID")

    assert profile_status == ProfileStatus.ACTIVE


async def test_cancelled_order_only_records_event(writers, notify):
    order_w, profile_w, _ = writers
    profile = make_profile(status=ProfileStatus.PENDING)
    session = _session(make_order(), profile, product=make_product())

    await update_order_status(session, ADMIN, "order-1", "CANCELLED", "duplicate")

    assert order_w.await_args.kwargs["event_type"] == EventType.ORDER_STATUS_CHANGED
    assert profile.status == ProfileStatus.PENDING
    profile_w.assert_not_awaited()


async def test_refund_requires_paid(writers, notify):
    session = _session(make_order(status=OrderStatus.PENDING), make_profile())
    with pytest.raises(InvalidTransitionError):
        await update_order_status(session, ADMIN, "order-1", "REFUNDED")
    session.commit.assert_not_awaited()


async def test_unknown_order_status(writers, notify):
    session = _session(make_order(), make_profile())
    with pytest.raises(ValidationError):
        await update_order_status(session, ADMIN, "order-1", "SHIPPED")
    session.execute.assert_not_awaited()


async def test_agent_cannot_record_outcomes(writers, notify):
    with pytest.raises(AuthorizationError):
        await update_order_status(
            _session(make_order(), make_profile()), make_user("agent-1", UserRole.AGENT),
            "order-1", "PAID",
        )
