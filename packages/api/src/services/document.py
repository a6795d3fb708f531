# This project was developed with assistance from AI tools.
"""Document submission and review.

Submission moves a QUALIFICATION dossier into IN_PROGRESS. Review is staff
only: approve or reject a PENDING document, notify the dossier owner, and
complete the dossier once every required document type has an approved
document. The review, its event, the notification rows, and any dossier
completion commit together; emails go out afterwards.
"""

import logging
from datetime import UTC, datetime

from db import Document, Dossier
from db.enums import (
    DocumentStatus,
    DossierStatus,
    EntityType,
    EventType,
    NotificationTemplate,
    UserRole,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.auth import STAFF_ROLES, require_active_profile, require_role
from ..core.errors import InvalidTransitionError, NotFoundError
from ..core.workflow import ensure_transition, require_reason
from ..schemas.auth import UserContext
from .audit import write_event
from .dossier import (
    approved_document_types,
    get_dossier,
    is_dossier_complete,
    required_document_types,
    transition_dossier,
)
from .notification import PendingNotification, deliver_notifications, queue_notification

logger = logging.getLogger(__name__)


async def submit_document(
    session: AsyncSession,
    user: UserContext,
    dossier_id: str,
    document_type: str,
    file_name: str | None = None,
) -> Document:
    """Record a new PENDING document on a dossier the caller may access."""
    require_active_profile(user)
    dossier = await get_dossier(session, user, dossier_id)

    current = DossierStatus(dossier.status)
    if current in DossierStatus.terminal_statuses():
        raise InvalidTransitionError(
            f"Cannot submit documents to a dossier in status '{current.value}'"
        )

    document = Document(
        dossier_id=dossier.id,
        document_type=document_type.strip(),
        file_name=file_name,
        status=DocumentStatus.PENDING,
        uploaded_by=user.user_id,
    )
    session.add(document)
    await session.flush()

    await write_event(
        session,
        entity_type=EntityType.DOCUMENT,
        entity_id=document.id,
        event_type=EventType.DOCUMENT_UPLOADED,
        actor=user,
        description=f"Document '{document.document_type}' submitted",
        payload={
            "dossier_id": dossier.id,
            "document_type": document.document_type,
            "file_name": file_name,
        },
    )

    if current == DossierStatus.QUALIFICATION:
        await transition_dossier(session, user, dossier, DossierStatus.IN_PROGRESS)

    await session.commit()
    logger.info("Document %s submitted on dossier %s by %s", document.id, dossier.id, user.user_id)
    return document


async def _load_for_review(session: AsyncSession, dossier_id: str, document_id: str) -> Document:
    stmt = (
        select(Document)
        .options(selectinload(Document.dossier).selectinload(Dossier.owner))
        .where(Document.id == document_id)
    )
    result = await session.execute(stmt)
    document = result.unique().scalar_one_or_none()
    # A document addressed through the wrong dossier is reported as missing.
    if document is None or document.dossier_id != dossier_id:
        raise NotFoundError("Document not found")
    return document


async def _review(
    session: AsyncSession,
    reviewer: UserContext,
    dossier_id: str,
    document_id: str,
    new_status: DocumentStatus,
    reason: str | None = None,
) -> tuple[Document, DossierStatus]:
    require_role(reviewer, *STAFF_ROLES)
    document = await _load_for_review(session, dossier_id, document_id)
    dossier_status = DossierStatus(document.dossier.status)
    if dossier_status in DossierStatus.terminal_statuses():
        raise InvalidTransitionError(
            f"Cannot review documents on a dossier in status '{dossier_status.value}'"
        )
    ensure_transition(DocumentStatus(document.status), new_status, entity="document")

    dossier = document.dossier
    document.status = new_status
    document.reviewed_by = reviewer.user_id
    document.reviewed_at = datetime.now(UTC)
    document.rejection_reason = reason if new_status == DocumentStatus.REJECTED else None

    payload = {
        "dossier_id": dossier.id,
        "document_type": document.document_type,
        "decision": new_status.value,
    }
    if reason:
        payload["reason"] = reason
    event = await write_event(
        session,
        entity_type=EntityType.DOCUMENT,
        entity_id=document.id,
        event_type=EventType.DOCUMENT_REVIEWED,
        actor=reviewer,
        description=f"Document '{document.document_type}' {new_status.value.lower()}",
        payload=payload,
    )

    pending: list[PendingNotification] = []
    owner = dossier.owner
    if owner is not None:
        template = (
            NotificationTemplate.DOCUMENT_APPROVED
            if new_status == DocumentStatus.APPROVED
            else NotificationTemplate.DOCUMENT_REJECTED
        )
        pending.append(
            await queue_notification(
                session,
                recipient=owner,
                template=template,
                context={"document_type": document.document_type, "reason": reason or ""},
                dossier_id=dossier.id,
                event_id=event.id,
            )
        )

    if new_status == DocumentStatus.APPROVED and DossierStatus(dossier.status) == DossierStatus.IN_PROGRESS:
        approved = await approved_document_types(session, dossier.id)
        if is_dossier_complete(required_document_types(dossier), approved):
            completed = await transition_dossier(session, None, dossier, DossierStatus.COMPLETED)
            if owner is not None:
                product_name = dossier.product.name if dossier.product else "your"
                pending.append(
                    await queue_notification(
                        session,
                        recipient=owner,
                        template=NotificationTemplate.DOSSIER_COMPLETED,
                        context={"product_name": product_name},
                        dossier_id=dossier.id,
                        event_id=completed.id,
                    )
                )

    await session.commit()
    logger.info(
        "Document %s %s by %s (dossier %s now %s)",
        document.id,
        new_status.value,
        reviewer.user_id,
        dossier.id,
        DossierStatus(dossier.status).value,
    )
    await deliver_notifications(session, pending)
    return document, DossierStatus(dossier.status)


async def approve_document(
    session: AsyncSession,
    reviewer: UserContext,
    dossier_id: str,
    document_id: str,
) -> tuple[Document, DossierStatus]:
    """Approve a PENDING document. AGENT or ADMIN only."""
    return await _review(session, reviewer, dossier_id, document_id, DocumentStatus.APPROVED)


async def reject_document(
    session: AsyncSession,
    reviewer: UserContext,
    dossier_id: str,
    document_id: str,
    reason: str | None,
) -> tuple[Document, DossierStatus]:
    """Reject a PENDING document with a non-blank reason shown to the client."""
    require_role(reviewer, UserRole.AGENT, UserRole.ADMIN)
    reason = require_reason(reason, what="Rejection reason")
    return await _review(
        session, reviewer, dossier_id, document_id, DocumentStatus.REJECTED, reason,
    )
