# This project was developed with assistance from AI tools.
"""Dossier service: scoped reads, progress, and lifecycle transitions.

Clients see only dossiers they own; agents and admins see every dossier.
Status changes go through the DossierStatus transition table and are
recorded as DOSSIER_STATUS_CHANGED events in the same transaction.
"""

import logging
from datetime import UTC, datetime

from db import Document, Dossier, Event
from db.enums import DocumentStatus, DossierStatus, EntityType, EventType, UserRole
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.auth import require_ownership, require_role
from ..core.errors import NotFoundError
from ..core.workflow import ensure_transition, require_reason
from ..schemas.auth import UserContext
from .audit import write_event
from .scope import apply_data_scope

logger = logging.getLogger(__name__)


async def list_dossiers(
    session: AsyncSession,
    user: UserContext,
    *,
    status: DossierStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Dossier], int]:
    """Return dossiers visible to the caller, newest first, and the total count."""
    count_stmt = apply_data_scope(select(func.count(Dossier.id)), user.data_scope)
    stmt = apply_data_scope(
        select(Dossier).order_by(Dossier.created_at.desc()).offset(offset).limit(limit),
        user.data_scope,
    )
    if status is not None:
        count_stmt = count_stmt.where(Dossier.status == status)
        stmt = stmt.where(Dossier.status == status)

    total = (await session.execute(count_stmt)).scalar() or 0
    result = await session.execute(stmt)
    return list(result.unique().scalars().all()), total


async def load_dossier(session: AsyncSession, dossier_id: str) -> Dossier:
    """Fetch a dossier with its documents, or raise NotFoundError."""
    stmt = (
        select(Dossier)
        .options(selectinload(Dossier.documents))
        .where(Dossier.id == dossier_id)
    )
    result = await session.execute(stmt)
    dossier = result.unique().scalar_one_or_none()
    if dossier is None:
        raise NotFoundError("Dossier not found")
    return dossier


async def get_dossier(session: AsyncSession, user: UserContext, dossier_id: str) -> Dossier:
    """Return a dossier the caller may see.

    A missing dossier is a 404; a CLIENT asking for someone else's is a 403.
    """
    dossier = await load_dossier(session, dossier_id)
    require_ownership(user, dossier.user_id)
    return dossier


def required_document_types(dossier: Dossier) -> list[str]:
    if dossier.product is None:
        return []
    return list(dossier.product.required_document_types or [])


def is_dossier_complete(required: list[str], approved: set[str]) -> bool:
    """True when there is at least one required type and all are approved."""
    return bool(required) and set(required) <= approved


def dossier_progress(dossier: Dossier) -> dict:
    """Summarise which required document types have an approved document."""
    required = required_document_types(dossier)
    approved = {
        d.document_type for d in dossier.documents if d.status == DocumentStatus.APPROVED
    }
    done = [t for t in required if t in approved]
    pct = round(100 * len(done) / len(required)) if required else 0
    return {
        "required_document_types": required,
        "approved_document_types": done,
        "progress_percentage": pct,
    }


async def transition_dossier(
    session: AsyncSession,
    actor: UserContext | None,
    dossier: Dossier,
    new_status: DossierStatus,
    *,
    reason: str | None = None,
) -> Event:
    """Move a dossier to ``new_status`` and record the change (not committed).

    ``actor`` is None for system-driven transitions such as automatic
    completion after the last required approval.
    """
    old_status = DossierStatus(dossier.status)
    ensure_transition(old_status, new_status, entity="dossier")

    dossier.status = new_status
    if new_status == DossierStatus.COMPLETED:
        dossier.completed_at = datetime.now(UTC)

    payload = {"old_status": old_status.value, "new_status": new_status.value}
    if reason:
        payload["reason"] = reason
    event = await write_event(
        session,
        entity_type=EntityType.DOSSIER,
        entity_id=dossier.id,
        event_type=EventType.DOSSIER_STATUS_CHANGED,
        actor=actor,
        description=f"Dossier moved from {old_status.value} to {new_status.value}",
        payload=payload,
    )
    logger.info("Dossier %s: %s -> %s", dossier.id, old_status.value, new_status.value)
    return event


async def cancel_dossier(
    session: AsyncSession,
    admin: UserContext,
    dossier_id: str,
    reason: str | None,
) -> Dossier:
    """Cancel a non-terminal dossier. ADMIN only; a reason is required."""
    require_role(admin, UserRole.ADMIN)
    reason = require_reason(reason)
    dossier = await load_dossier(session, dossier_id)
    await transition_dossier(session, admin, dossier, DossierStatus.CANCELLED, reason=reason)
    await session.commit()
    return dossier


async def get_dossier_events(
    session: AsyncSession,
    user: UserContext,
    dossier_id: str,
    *,
    limit: int = 100,
) -> list[Event]:
    """Events for a dossier and its documents, newest first."""
    dossier = await get_dossier(session, user, dossier_id)
    doc_ids = [d.id for d in dossier.documents]

    condition = and_(
        Event.entity_type == EntityType.DOSSIER.value, Event.entity_id == dossier.id,
    )
    if doc_ids:
        condition = or_(
            condition,
            and_(Event.entity_type == EntityType.DOCUMENT.value, Event.entity_id.in_(doc_ids)),
        )
    stmt = (
        select(Event)
        .where(condition)
        .order_by(Event.created_at.desc(), Event.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def approved_document_types(session: AsyncSession, dossier_id: str) -> set[str]:
    """Distinct document types with at least one APPROVED document."""
    stmt = (
        select(Document.document_type)
        .where(Document.dossier_id == dossier_id, Document.status == DocumentStatus.APPROVED)
        .distinct()
    )
    result = await session.execute(stmt)
    return set(result.scalars().all())
