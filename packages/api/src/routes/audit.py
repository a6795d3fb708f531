# This project was developed with assistance from AI tools.
"""Audit trail queries for staff."""

from db import get_db
from db.enums import EntityType, UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.audit import AuditChainVerifyResponse, EntityEventsResponse, EventItem
from ..services.audit import get_entity_events, verify_event_chain

router = APIRouter()


@router.get(
    "/events/{entity_type}/{entity_id}",
    response_model=EntityEventsResponse,
    dependencies=[Depends(require_roles(UserRole.AGENT, UserRole.ADMIN))],
)
async def entity_events(
    entity_type: EntityType,
    entity_id: str,
    session: AsyncSession = Depends(get_db),
    limit: int = Query(default=50, ge=1, le=500),
) -> EntityEventsResponse:
    events = await get_entity_events(session, entity_type, entity_id, limit=limit)
    return EntityEventsResponse(
        entity_type=entity_type.value,
        entity_id=entity_id,
        count=len(events),
        events=[EventItem.model_validate(e) for e in events],
    )


@router.get(
    "/audit/verify",
    response_model=AuditChainVerifyResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def verify_audit_chain(
    session: AsyncSession = Depends(get_db),
) -> AuditChainVerifyResponse:
    """Walk the event hash chain and report the first break, if any."""
    result = await verify_event_chain(session)
    return AuditChainVerifyResponse(**result)
