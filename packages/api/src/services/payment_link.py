# This project was developed with assistance from AI tools.
"""Payment link lifecycle: lookup, consumption, and expiry.

Links are single-use checkout tokens. Only ACTIVE links ever change: they
become USED on a successful checkout or EXPIRED by an admin bulk action or
the natural-expiry sweep. Expiry statements filter on ``status = ACTIVE`` in
SQL, so repeating them is harmless.
"""

import logging
from datetime import UTC, datetime, timedelta

from db import PaymentLink
from db.enums import EntityType, EventType, PaymentLinkStatus, UserRole
from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import require_role
from ..core.config import settings
from ..core.errors import NotFoundError, ValidationError
from ..core.workflow import ensure_transition
from ..schemas.auth import UserContext
from .audit import write_event

logger = logging.getLogger(__name__)


def link_expiry(link: PaymentLink) -> datetime | None:
    """When ``link`` naturally expires: its expires_at, else created_at + TTL."""
    if link.expires_at is not None:
        return link.expires_at
    if link.created_at is None:
        return None
    return link.created_at + timedelta(hours=settings.PAYMENT_LINK_TTL_HOURS)


def _stale_condition(now: datetime):
    ttl_cutoff = now - timedelta(hours=settings.PAYMENT_LINK_TTL_HOURS)
    return or_(
        PaymentLink.expires_at <= now,
        and_(PaymentLink.expires_at.is_(None), PaymentLink.created_at <= ttl_cutoff),
    )


async def _expire_where(
    session: AsyncSession,
    actor: UserContext | None,
    condition,
    *,
    reason: str,
) -> list[str]:
    stmt = (
        update(PaymentLink)
        .where(condition, PaymentLink.status == PaymentLinkStatus.ACTIVE)
        .values(status=PaymentLinkStatus.EXPIRED)
        .returning(PaymentLink.id)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    expired_ids = list(result.scalars().all())
    for link_id in expired_ids:
        await write_event(
            session,
            entity_type=EntityType.PAYMENT_LINK,
            entity_id=link_id,
            event_type=EventType.PAYMENT_LINK_EXPIRED,
            actor=actor,
            description="Payment link expired",
            payload={"reason": reason},
        )
    return expired_ids


def _expire_message(count: int) -> str:
    return f"{count} link(s) expired successfully"


async def bulk_expire(
    session: AsyncSession,
    admin: UserContext,
    link_ids: list[str] | None,
) -> dict:
    """Expire the ACTIVE links among ``link_ids``. ADMIN only.

    Links already USED or EXPIRED, and unknown ids, are left alone and not
    counted.
    """
    require_role(admin, UserRole.ADMIN)
    if not link_ids:
        raise ValidationError("link_ids array is required")

    expired = await _expire_where(
        session, admin, PaymentLink.id.in_(list(dict.fromkeys(link_ids))), reason="admin_bulk_expire",
    )
    await session.commit()
    logger.info("Bulk expire by %s: %d of %d link(s) expired", admin.user_id, len(expired), len(link_ids))
    return {"success": True, "expired_count": len(expired), "message": _expire_message(len(expired))}


async def expire_stale_links(
    session: AsyncSession,
    actor: UserContext | None,
    now: datetime | None = None,
) -> dict:
    """Expire every ACTIVE link past its natural expiry."""
    if actor is not None:
        require_role(actor, UserRole.ADMIN)
    now = now or datetime.now(UTC)
    expired = await _expire_where(session, actor, _stale_condition(now), reason="natural_expiry")
    await session.commit()
    logger.info("Natural expiry sweep: %d link(s) expired", len(expired))
    return {"success": True, "expired_count": len(expired), "message": _expire_message(len(expired))}


async def get_link_for_checkout(
    session: AsyncSession,
    token: str,
    now: datetime | None = None,
) -> PaymentLink:
    """Look up a link by token, expiring it first if it is past its expiry."""
    result = await session.execute(select(PaymentLink).where(PaymentLink.token == token))
    link = result.unique().scalar_one_or_none()
    if link is None:
        raise NotFoundError("Payment link not found")

    now = now or datetime.now(UTC)
    expiry = link_expiry(link)
    if link.status == PaymentLinkStatus.ACTIVE and expiry is not None and expiry <= now:
        link.status = PaymentLinkStatus.EXPIRED
        await write_event(
            session,
            entity_type=EntityType.PAYMENT_LINK,
            entity_id=link.id,
            event_type=EventType.PAYMENT_LINK_EXPIRED,
            description="Payment link expired",
            payload={"reason": "natural_expiry"},
        )
        await session.commit()
        logger.info("Payment link %s expired on lookup", link.id)
    return link


async def consume_link(
    session: AsyncSession,
    actor: UserContext | None,
    link: PaymentLink,
    user_id: str,
) -> bool:
    """Mark an ACTIVE link USED by ``user_id`` (not committed).

    Returns False and leaves the link unchanged when it is no longer ACTIVE.
    """
    current = PaymentLinkStatus(link.status)
    if current != PaymentLinkStatus.ACTIVE:
        logger.warning("Payment link %s is %s, not marking as used", link.id, current.value)
        return False
    ensure_transition(current, PaymentLinkStatus.USED, entity="payment link")
    link.status = PaymentLinkStatus.USED
    link.used_at = datetime.now(UTC)
    link.used_by = user_id
    await write_event(
        session,
        entity_type=EntityType.PAYMENT_LINK,
        entity_id=link.id,
        event_type=EventType.PAYMENT_LINK_USED,
        actor=actor,
        description="Payment link used",
        payload={"used_by": user_id},
    )
    return True
