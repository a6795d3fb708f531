# This project was developed with assistance from AI tools.
"""Audit event service.

Writes append-only event rows keyed by (entity_type, entity_id, created_at)
with a SHA-256 hash chain for tamper evidence. A PostgreSQL advisory lock
serializes hash computation across concurrent writers. Events are written in
the caller's transaction, so they commit or roll back with the status change
they describe.
"""

import hashlib
import json
import logging

from db import Event
from db.enums import ActorType, EntityType, EventType, UserRole
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)

# Fixed advisory lock key for audit trail serialization.
AUDIT_LOCK_KEY = 900_001

GENESIS_HASH = "genesis"


def _compute_hash(event_id: int, created_at: str, entity_id: str, payload: dict | None) -> str:
    """Compute SHA-256 hash of an event's key fields."""
    body = f"{event_id}|{created_at}|{entity_id}|{json.dumps(payload, sort_keys=True, default=str)}"
    return hashlib.sha256(body.encode()).hexdigest()


def actor_type_for(user: UserContext | None) -> ActorType:
    """Classify the caller for the event's actor_type column."""
    if user is None:
        return ActorType.SYSTEM
    if user.role in (UserRole.AGENT, UserRole.ADMIN):
        return ActorType.AGENT
    return ActorType.USER


async def write_event(
    session: AsyncSession,
    *,
    entity_type: EntityType,
    entity_id: str,
    event_type: EventType,
    actor: UserContext | None = None,
    description: str | None = None,
    payload: dict | None = None,
) -> Event:
    """Append a single event with hash chain linkage.

    Args:
        session: Database session (not committed here).
        entity_type: Kind of entity the event concerns.
        entity_id: Id of that entity.
        event_type: What happened.
        actor: Caller who triggered it; None for system-initiated events.
        description: Short human-readable summary.
        payload: JSON-serializable details (old/new status, reason, ...).

    Returns:
        The flushed Event row (id and prev_hash set).
    """
    # Released automatically when the transaction commits or rolls back.
    await session.execute(text(f"SELECT pg_advisory_xact_lock({AUDIT_LOCK_KEY})"))

    latest = await session.execute(select(Event).order_by(Event.id.desc()).limit(1))
    prev_event = latest.scalar_one_or_none()

    if prev_event is not None:
        prev_hash = _compute_hash(
            prev_event.id, str(prev_event.created_at), prev_event.entity_id, prev_event.payload,
        )
    else:
        prev_hash = GENESIS_HASH

    event = Event(
        entity_type=entity_type.value,
        entity_id=entity_id,
        event_type=event_type.value,
        actor_type=actor_type_for(actor).value,
        actor_id=actor.user_id if actor is not None else None,
        description=description,
        payload=payload,
        prev_hash=prev_hash,
    )
    session.add(event)
    await session.flush()
    logger.info("Event %s recorded for %s:%s", event_type.value, entity_type.value, entity_id)
    return event


async def get_entity_events(
    session: AsyncSession,
    entity_type: EntityType,
    entity_id: str,
    *,
    limit: int = 50,
) -> list[Event]:
    """Return events for one entity, newest first."""
    stmt = (
        select(Event)
        .where(Event.entity_type == entity_type.value, Event.entity_id == entity_id)
        .order_by(Event.created_at.desc(), Event.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def verify_event_chain(session: AsyncSession) -> dict:
    """Verify the integrity of the event hash chain.

    Returns:
        {"status": "OK", "events_checked": N} on success, or
        {"status": "TAMPERED", "first_break_id": id, "events_checked": N}
        if a mismatch is found.
    """
    result = await session.execute(select(Event).order_by(Event.id.asc()))
    events = list(result.scalars().all())

    for i, event in enumerate(events):
        if i == 0:
            expected = GENESIS_HASH
        else:
            prev = events[i - 1]
            expected = _compute_hash(prev.id, str(prev.created_at), prev.entity_id, prev.payload)

        if event.prev_hash != expected:
            logger.error("Event chain broken at id=%s", event.id)
            return {
                "status": "TAMPERED",
                "first_break_id": event.id,
                "events_checked": i + 1,
            }

    return {"status": "OK", "events_checked": len(events)}
