# This project was developed with assistance from AI tools.
"""Dossier request/response schemas."""

from datetime import datetime

from db.enums import DossierStatus, DossierType
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination
from .document import DocumentResponse


class DossierResponse(BaseModel):
    """Dossier summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_id: str | None = None
    product_name: str | None = None
    type: DossierType
    status: DossierStatus
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class DossierProgress(BaseModel):
    """Required-document progress toward completion."""

    required_document_types: list[str] = Field(default_factory=list)
    approved_document_types: list[str] = Field(default_factory=list)
    progress_percentage: int = 0


class DossierDetailResponse(DossierResponse):
    """Dossier with its documents and completion progress."""

    documents: list[DocumentResponse] = Field(default_factory=list)
    progress: DossierProgress = Field(default_factory=DossierProgress)


class DossierListResponse(BaseModel):
    """Paginated list of dossiers."""

    data: list[DossierResponse]
    pagination: Pagination


class DossierCancelResponse(BaseModel):
    success: bool = True
    dossier: DossierResponse
