# This project was developed with assistance from AI tools.
"""Order outcomes and their effect on the client account.

A PAID order activates the client's profile, consumes its payment link, and
opens a QUALIFICATION dossier for the product when the client has none. A
FAILED order suspends the profile and notifies the client. Everything except
the email commits in one transaction.
"""

import logging
from datetime import UTC, datetime

from db import Dossier, Order, PaymentLink, Product
from db.enums import (
    DossierStatus,
    EntityType,
    EventType,
    NotificationTemplate,
    OrderStatus,
    ProfileStatus,
    UserRole,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import require_role
from ..core.errors import NotFoundError
from ..core.workflow import ensure_transition, parse_status
from ..schemas.auth import UserContext
from .audit import write_event
from .notification import PendingNotification, deliver_notifications, queue_notification
from .payment_link import consume_link
from .profile import apply_payment_outcome, get_profile

logger = logging.getLogger(__name__)

_EVENT_FOR_STATUS = {
    OrderStatus.PAID: EventType.PAYMENT_RECEIVED,
    OrderStatus.FAILED: EventType.PAYMENT_FAILED,
}


async def get_order(session: AsyncSession, order_id: str) -> Order:
    result = await session.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError("Order not found")
    return order


async def _get_product(session: AsyncSession, product_id: str | None) -> Product | None:
    if product_id is None:
        return None
    result = await session.execute(select(Product).where(Product.id == product_id))
    return result.scalar_one_or_none()


async def ensure_product_dossier(
    session: AsyncSession,
    actor: UserContext | None,
    user_id: str,
    product: Product,
) -> tuple[Dossier, bool]:
    """Return the client's dossier for ``product``, creating it if missing."""
    result = await session.execute(
        select(Dossier)
        .where(Dossier.user_id == user_id, Dossier.product_id == product.id)
        .order_by(Dossier.created_at.desc())
        .limit(1)
    )
    existing = result.unique().scalar_one_or_none()
    if existing is not None:
        return existing, False

    dossier = Dossier(
        user_id=user_id,
        product_id=product.id,
        type=product.dossier_type,
        status=DossierStatus.QUALIFICATION,
    )
    session.add(dossier)
    await session.flush()
    await write_event(
        session,
        entity_type=EntityType.DOSSIER,
        entity_id=dossier.id,
        event_type=EventType.DOSSIER_CREATED,
        actor=actor,
        description=f"Dossier opened for {product.name}",
        payload={"product_id": product.id, "status": DossierStatus.QUALIFICATION.value},
    )
    logger.info("Dossier %s created for user %s (product %s)", dossier.id, user_id, product.id)
    return dossier, True


async def update_order_status(
    session: AsyncSession,
    admin: UserContext,
    order_id: str,
    new_status,
    reason: str | None = None,
) -> tuple[Order, ProfileStatus, str | None]:
    """Record an order outcome. ADMIN only.

    Returns (order, resulting profile status, dossier id or None).
    """
    require_role(admin, UserRole.ADMIN)
    new_status = parse_status(OrderStatus, new_status)
    reason = (reason or "").strip() or None

    order = await get_order(session, order_id)
    old_status = OrderStatus(order.status)
    ensure_transition(old_status, new_status, entity="order")

    order.status = new_status
    if new_status == OrderStatus.PAID:
        order.paid_at = datetime.now(UTC)

    payload = {
        "old_status": old_status.value,
        "new_status": new_status.value,
        "amount": order.amount,
        "currency": order.currency,
    }
    if reason:
        payload["reason"] = reason
    event = await write_event(
        session,
        entity_type=EntityType.ORDER,
        entity_id=order.id,
        event_type=_EVENT_FOR_STATUS.get(new_status, EventType.ORDER_STATUS_CHANGED),
        actor=admin,
        description=f"Order moved from {old_status.value} to {new_status.value}",
        payload=payload,
    )

    profile = await get_profile(session, order.user_id)
    product = await _get_product(session, order.product_id)
    dossier_id = None
    pending: list[PendingNotification] = []

    if new_status == OrderStatus.PAID:
        await apply_payment_outcome(
            session, admin, profile, ProfileStatus.ACTIVE, reason or "payment_received",
        )
        if order.payment_link_id:
            link = await session.get(PaymentLink, order.payment_link_id)
            if link is not None:
                await consume_link(session, admin, link, order.user_id)
        if product is not None:
            dossier, _ = await ensure_product_dossier(session, admin, order.user_id, product)
            dossier_id = dossier.id
    elif new_status == OrderStatus.FAILED:
        await apply_payment_outcome(
            session, admin, profile, ProfileStatus.SUSPENDED, reason or "payment_failed",
        )
        pending.append(
            await queue_notification(
                session,
                recipient=profile,
                template=NotificationTemplate.PAYMENT_FAILED,
                context={"product_name": product.name if product else "your order"},
                event_id=event.id,
            )
        )

    await session.commit()
    logger.info("Order %s: %s -> %s by %s", order.id, old_status.value, new_status.value, admin.user_id)
    await deliver_notifications(session, pending)
    return order, ProfileStatus(profile.status), dossier_id
