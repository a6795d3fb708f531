# This project was developed with assistance from AI tools.
"""Admin console: client profiles and their status."""

from db import get_db
from db.enums import EntityType, ProfileStatus, UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas import Pagination
from ..schemas.audit import EntityEventsResponse, EventItem
from ..schemas.auth import UserContext
from ..schemas.client import (
    ClientListResponse,
    ClientResponse,
    ClientStatusUpdateRequest,
    ClientStatusUpdateResponse,
)
from ..services import profile as profile_service
from ..services.audit import get_entity_events

router = APIRouter()


@router.get("", response_model=ClientListResponse)
async def list_clients(
    user: UserContext = Depends(require_roles(UserRole.AGENT, UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
    status_filter: ProfileStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> ClientListResponse:
    clients, total = await profile_service.list_clients(
        session, user, status=status_filter, search=search, offset=offset, limit=limit,
    )
    return ClientListResponse(
        data=[ClientResponse.model_validate(c) for c in clients],
        pagination=Pagination.of(total, offset, limit),
    )


@router.post("/{client_id}/status", response_model=ClientStatusUpdateResponse)
async def update_client_status(
    client_id: str,
    body: ClientStatusUpdateRequest,
    user: UserContext = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> ClientStatusUpdateResponse:
    """Override a client's profile status. A reason is mandatory."""
    profile, old_status = await profile_service.update_client_status(
        session, user, client_id, body.status, body.reason,
    )
    return ClientStatusUpdateResponse(
        client_id=profile.id,
        old_status=old_status,
        new_status=profile.status,
    )


@router.get(
    "/{client_id}/events",
    response_model=EntityEventsResponse,
    dependencies=[Depends(require_roles(UserRole.AGENT, UserRole.ADMIN))],
)
async def get_client_events(
    client_id: str,
    session: AsyncSession = Depends(get_db),
    limit: int = Query(default=50, ge=1, le=200),
) -> EntityEventsResponse:
    """Recent events recorded against a client profile."""
    await profile_service.get_profile(session, client_id)
    events = await get_entity_events(session, EntityType.PROFILE, client_id, limit=limit)
    return EntityEventsResponse(
        entity_type=EntityType.PROFILE.value,
        entity_id=client_id,
        count=len(events),
        events=[EventItem.model_validate(e) for e in events],
    )
