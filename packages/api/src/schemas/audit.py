# This project was developed with assistance from AI tools.
"""Pydantic response schemas for audit event endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class EventItem(BaseModel):
    """Single audit event in a query response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    entity_type: str
    entity_id: str
    event_type: str
    actor_type: str | None = None
    actor_id: str | None = None
    description: str | None = None
    payload: dict | None = None


class EntityEventsResponse(BaseModel):
    """Events recorded for one entity, newest first."""

    entity_type: str
    entity_id: str
    count: int
    events: list[EventItem]


class AuditChainVerifyResponse(BaseModel):
    """Response for audit hash chain verification."""

    status: str
    events_checked: int
    first_break_id: int | None = None
