# This project was developed with assistance from AI tools.
"""Staff document review and dossier cancellation."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas import ReasonRequest
from ..schemas.auth import UserContext
from ..schemas.document import DocumentRejectRequest, DocumentResponse, DocumentReviewResponse
from ..schemas.dossier import DossierCancelResponse
from ..services import document as document_service
from ..services.dossier import cancel_dossier
from .dossiers import build_dossier_response

router = APIRouter()


@router.post(
    "/dossiers/{dossier_id}/documents/{document_id}/approve",
    response_model=DocumentReviewResponse,
)
async def approve_document(
    dossier_id: str,
    document_id: str,
    user: UserContext = Depends(require_roles(UserRole.AGENT, UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> DocumentReviewResponse:
    """Approve a PENDING document; completes the dossier when it was the last one needed."""
    document, dossier_status = await document_service.approve_document(
        session, user, dossier_id, document_id,
    )
    return DocumentReviewResponse(
        document=DocumentResponse.model_validate(document),
        dossier_status=dossier_status,
    )


@router.post(
    "/dossiers/{dossier_id}/documents/{document_id}/reject",
    response_model=DocumentReviewResponse,
)
async def reject_document(
    dossier_id: str,
    document_id: str,
    body: DocumentRejectRequest,
    user: UserContext = Depends(require_roles(UserRole.AGENT, UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> DocumentReviewResponse:
    """Reject a PENDING document. The reason must not be blank."""
    document, dossier_status = await document_service.reject_document(
        session, user, dossier_id, document_id, body.reason,
    )
    return DocumentReviewResponse(
        document=DocumentResponse.model_validate(document),
        dossier_status=dossier_status,
    )


@router.post("/dossiers/{dossier_id}/cancel", response_model=DossierCancelResponse)
async def cancel(
    dossier_id: str,
    body: ReasonRequest,
    user: UserContext = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> DossierCancelResponse:
    dossier = await cancel_dossier(session, user, dossier_id, body.reason)
    return DossierCancelResponse(dossier=build_dossier_response(dossier))
