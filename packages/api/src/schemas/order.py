# This project was developed with assistance from AI tools.
"""Order status schemas."""

from datetime import datetime

from db.enums import OrderStatus, ProfileStatus
from pydantic import BaseModel, ConfigDict


class OrderStatusUpdateRequest(BaseModel):
    """Record a verified checkout outcome or an order lifecycle change."""

    status: OrderStatus
    reason: str | None = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_id: str | None = None
    payment_link_id: str | None = None
    status: OrderStatus
    amount: int | None = None
    currency: str = "EUR"
    paid_at: datetime | None = None


class OrderStatusUpdateResponse(BaseModel):
    success: bool = True
    order: OrderResponse
    profile_status: ProfileStatus | None = None
    dossier_id: str | None = None
