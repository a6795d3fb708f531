# This project was developed with assistance from AI tools.
"""Client profile schemas for the admin console."""

from datetime import datetime

from db.enums import ProfileStatus
from pydantic import BaseModel, ConfigDict

from . import Pagination


class ClientResponse(BaseModel):
    """Client profile row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    status: ProfileStatus
    created_at: datetime


class ClientListResponse(BaseModel):
    data: list[ClientResponse]
    pagination: Pagination


class ClientStatusUpdateRequest(BaseModel):
    """Admin override of a client's profile status.

    Unknown status values are rejected by validation before the service runs.
    """

    status: ProfileStatus
    reason: str = ""


class ClientStatusUpdateResponse(BaseModel):
    success: bool = True
    client_id: str
    old_status: ProfileStatus
    new_status: ProfileStatus
