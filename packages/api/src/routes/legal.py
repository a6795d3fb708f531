# This project was developed with assistance from AI tools.
"""Public legal documents (terms of sale, refund policy)."""

from fastapi import APIRouter

from ..schemas.health import LegalDocumentResponse
from ..services.legal import read_legal_document

router = APIRouter()


@router.get("/{name}", response_model=LegalDocumentResponse)
async def get_legal_document(name: str) -> LegalDocumentResponse:
    return LegalDocumentResponse(content=await read_legal_document(name))
