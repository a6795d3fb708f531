# This project was developed with assistance from AI tools.
"""Document request/response schemas."""

from datetime import datetime

from db.enums import DocumentStatus, DossierStatus
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DocumentSubmitRequest(BaseModel):
    """Submit a document for review on a dossier."""

    document_type: str = Field(min_length=1, max_length=100)
    file_name: str | None = Field(default=None, max_length=255)


class DocumentRejectRequest(BaseModel):
    """Reject a pending document. The reason is shown to the client."""

    reason: str = Field(
        default="",
        validation_alias=AliasChoices("reason", "rejection_reason"),
    )


class DocumentResponse(BaseModel):
    """Document metadata and review outcome."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    dossier_id: str
    document_type: str
    file_name: str | None = None
    status: DocumentStatus
    rejection_reason: str | None = None
    uploaded_by: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime


class DocumentReviewResponse(BaseModel):
    """Result of an approve/reject action."""

    success: bool = True
    document: DocumentResponse
    dossier_status: DossierStatus
