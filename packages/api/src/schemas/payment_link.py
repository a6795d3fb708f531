# This project was developed with assistance from AI tools.
"""Payment link schemas."""

from datetime import datetime

from db.enums import PaymentLinkStatus
from pydantic import BaseModel, Field


class BulkExpireRequest(BaseModel):
    """Expire a selection of payment links."""

    link_ids: list[str] = Field(default_factory=list)


class ExpireLinksResponse(BaseModel):
    success: bool = True
    expired_count: int
    message: str


class PaymentLinkPublicResponse(BaseModel):
    """What a prospect sees when opening a payment link."""

    token: str
    status: PaymentLinkStatus
    product_id: str | None = None
    product_name: str | None = None
    prospect_email: str | None = None
    expires_at: datetime | None = None
