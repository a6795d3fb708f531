# This project was developed with assistance from AI tools.
"""Payment link routes: admin expiry actions and the public token lookup."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.auth import UserContext
from ..schemas.payment_link import (
    BulkExpireRequest,
    ExpireLinksResponse,
    PaymentLinkPublicResponse,
)
from ..services import payment_link as link_service

admin_router = APIRouter()
router = APIRouter()


@admin_router.post("/bulk-expire", response_model=ExpireLinksResponse)
async def bulk_expire(
    body: BulkExpireRequest,
    user: UserContext = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> ExpireLinksResponse:
    """Expire the selected links. Only ACTIVE ones change."""
    result = await link_service.bulk_expire(session, user, body.link_ids)
    return ExpireLinksResponse(**result)


@admin_router.post("/expire-stale", response_model=ExpireLinksResponse)
async def expire_stale(
    user: UserContext = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> ExpireLinksResponse:
    result = await link_service.expire_stale_links(session, user)
    return ExpireLinksResponse(**result)


@router.get("/{token}", response_model=PaymentLinkPublicResponse)
async def get_payment_link(
    token: str,
    session: AsyncSession = Depends(get_db),
) -> PaymentLinkPublicResponse:
    """Look up a link for checkout. A link past its expiry reports EXPIRED."""
    link = await link_service.get_link_for_checkout(session, token)
    return PaymentLinkPublicResponse(
        token=link.token,
        status=link.status,
        product_id=link.product_id,
        product_name=link.product.name if link.product else None,
        prospect_email=link.prospect_email,
        expires_at=link_service.link_expiry(link),
    )
