# This project was developed with assistance from AI tools.
"""Health check and legal document schemas."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    database: str
    timestamp: datetime | None = None
    error: str | None = None


class LegalDocumentResponse(BaseModel):
    content: str
