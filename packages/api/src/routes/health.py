# This project was developed with assistance from AI tools.
"""Liveness and database connectivity check."""

import logging
from datetime import UTC, datetime

from db import get_db, get_db_service
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(session: AsyncSession = Depends(get_db)):
    """Report healthy when the database answers a trivial query, else 503."""
    try:
        await get_db_service(session).ping()
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        body = HealthResponse(
            status="unhealthy",
            database="disconnected",
            error="Database connection failed",
        )
        return JSONResponse(status_code=503, content=body.model_dump(mode="json", exclude_none=True))
    return HealthResponse(status="healthy", database="connected", timestamp=datetime.now(UTC))
