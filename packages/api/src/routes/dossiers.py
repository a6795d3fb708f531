# This project was developed with assistance from AI tools.
"""Dossier routes for clients and staff.

Clients need an ACTIVE profile and see only their own dossiers; agents and
admins see all of them.
"""

from db import Dossier, get_db
from db.enums import DossierStatus
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import ActiveUser
from ..schemas import Pagination
from ..schemas.audit import EntityEventsResponse, EventItem
from ..schemas.document import DocumentResponse, DocumentSubmitRequest
from ..schemas.dossier import (
    DossierDetailResponse,
    DossierListResponse,
    DossierProgress,
    DossierResponse,
)
from ..services import dossier as dossier_service
from ..services.document import submit_document

router = APIRouter()


def build_dossier_response(dossier: Dossier) -> DossierResponse:
    return DossierResponse(
        id=dossier.id,
        user_id=dossier.user_id,
        product_id=dossier.product_id,
        product_name=dossier.product.name if dossier.product else None,
        type=dossier.type,
        status=dossier.status,
        created_at=dossier.created_at,
        updated_at=dossier.updated_at,
        completed_at=dossier.completed_at,
    )


@router.get("", response_model=DossierListResponse)
async def list_dossiers(
    user: ActiveUser,
    session: AsyncSession = Depends(get_db),
    status_filter: DossierStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> DossierListResponse:
    """List dossiers visible to the caller."""
    dossiers, total = await dossier_service.list_dossiers(
        session, user, status=status_filter, offset=offset, limit=limit,
    )
    return DossierListResponse(
        data=[build_dossier_response(d) for d in dossiers],
        pagination=Pagination.of(total, offset, limit),
    )


@router.get("/{dossier_id}", response_model=DossierDetailResponse)
async def get_dossier(
    dossier_id: str,
    user: ActiveUser,
    session: AsyncSession = Depends(get_db),
) -> DossierDetailResponse:
    """Dossier detail with its documents and required-document progress."""
    dossier = await dossier_service.get_dossier(session, user, dossier_id)
    return DossierDetailResponse(
        **build_dossier_response(dossier).model_dump(),
        documents=[DocumentResponse.model_validate(d) for d in dossier.documents],
        progress=DossierProgress(**dossier_service.dossier_progress(dossier)),
    )


@router.get("/{dossier_id}/events", response_model=EntityEventsResponse)
async def get_dossier_events(
    dossier_id: str,
    user: ActiveUser,
    session: AsyncSession = Depends(get_db),
    limit: int = Query(default=100, ge=1, le=500),
) -> EntityEventsResponse:
    """Timeline of the dossier and its documents, newest first."""
    events = await dossier_service.get_dossier_events(session, user, dossier_id, limit=limit)
    return EntityEventsResponse(
        entity_type="dossier",
        entity_id=dossier_id,
        count=len(events),
        events=[EventItem.model_validate(e) for e in events],
    )


@router.post(
    "/{dossier_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_dossier_document(
    dossier_id: str,
    body: DocumentSubmitRequest,
    user: ActiveUser,
    session: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    """Submit a document for review. It starts PENDING."""
    document = await submit_document(
        session, user, dossier_id, body.document_type, body.file_name,
    )
    return DocumentResponse.model_validate(document)
