# This project was developed with assistance from AI tools.
"""Client profile listing and status changes.

Payment outcomes move a profile through the ProfileStatus transition table.
An admin override may set any status but must give a reason; both paths
record a CLIENT_STATUS_CHANGED event.
"""

import logging

from db import Profile
from db.enums import EntityType, EventType, ProfileStatus, UserRole
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import STAFF_ROLES, require_role
from ..core.errors import NotFoundError
from ..core.workflow import allowed_transitions, parse_status, require_reason
from ..schemas.auth import UserContext
from .audit import write_event

logger = logging.getLogger(__name__)


async def list_clients(
    session: AsyncSession,
    user: UserContext,
    *,
    status: ProfileStatus | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Profile], int]:
    """Staff-only listing of client profiles, newest first."""
    require_role(user, *STAFF_ROLES)

    filters = []
    if status is not None:
        filters.append(Profile.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(or_(Profile.full_name.ilike(pattern), Profile.email.ilike(pattern)))

    count_stmt = select(func.count(Profile.id)).where(*filters)
    total = (await session.execute(count_stmt)).scalar() or 0

    stmt = (
        select(Profile)
        .where(*filters)
        .order_by(Profile.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def get_profile(session: AsyncSession, profile_id: str) -> Profile:
    result = await session.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise NotFoundError("Client not found")
    return profile


async def _record_status_change(
    session: AsyncSession,
    actor: UserContext | None,
    profile: Profile,
    old_status: ProfileStatus,
    new_status: ProfileStatus,
    reason: str,
) -> None:
    profile.status = new_status
    await write_event(
        session,
        entity_type=EntityType.PROFILE,
        entity_id=profile.id,
        event_type=EventType.CLIENT_STATUS_CHANGED,
        actor=actor,
        description=f"Client status changed from {old_status.value} to {new_status.value}",
        payload={
            "old_status": old_status.value,
            "new_status": new_status.value,
            "reason": reason,
            "changed_by": actor.user_id if actor else None,
            "client_name": profile.full_name,
        },
    )
    logger.info("Profile %s: %s -> %s", profile.id, old_status.value, new_status.value)


async def update_client_status(
    session: AsyncSession,
    admin: UserContext,
    client_id: str,
    new_status,
    reason: str | None,
) -> tuple[Profile, ProfileStatus]:
    """Admin override of a client's status. Returns (profile, old_status).

    Any of the three statuses may be set; the transition table does not
    apply here, but a non-blank reason is mandatory.
    """
    require_role(admin, UserRole.ADMIN)
    new_status = parse_status(ProfileStatus, new_status)
    reason = require_reason(reason)

    profile = await get_profile(session, client_id)
    old_status = ProfileStatus(profile.status)
    await _record_status_change(session, admin, profile, old_status, new_status, reason)
    await session.commit()
    return profile, old_status


async def apply_payment_outcome(
    session: AsyncSession,
    actor: UserContext | None,
    profile: Profile,
    target: ProfileStatus,
    reason: str,
) -> bool:
    """Move a profile to ``target`` after a payment outcome (not committed).

    Returns False, without writing anything, when the profile is already
    there or the table has no such transition.
    """
    current = ProfileStatus(profile.status)
    if current == target:
        return False
    if target not in allowed_transitions(current):
        logger.warning(
            "Profile %s: no transition %s -> %s, leaving unchanged",
            profile.id, current.value, target.value,
        )
        return False
    await _record_status_change(session, actor, profile, current, target, reason)
    return True
