# This project was developed with assistance from AI tools.
"""Admin recording of order outcomes."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.auth import UserContext
from ..schemas.order import OrderResponse, OrderStatusUpdateRequest, OrderStatusUpdateResponse
from ..services.order import update_order_status

router = APIRouter()


@router.post("/{order_id}/status", response_model=OrderStatusUpdateResponse)
async def set_order_status(
    order_id: str,
    body: OrderStatusUpdateRequest,
    user: UserContext = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_db),
) -> OrderStatusUpdateResponse:
    """Apply an order outcome and its effect on the client's profile and dossier."""
    order, profile_status, dossier_id = await update_order_status(
        session, user, order_id, body.status, body.reason,
    )
    return OrderStatusUpdateResponse(
        order=OrderResponse.model_validate(order),
        profile_status=profile_status,
        dossier_id=dossier_id,
    )
