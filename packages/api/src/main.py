# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import DownstreamError, PortalError
from .routes import (
    audit,
    clients,
    documents,
    dossiers,
    health,
    legal,
    orders,
    payment_links,
)
from .schemas.error import ErrorResponse
from .services.email import init_email_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    if settings.AUTH_DISABLED:
        logger.warning("AUTH_DISABLED is set -- every request runs as a dev admin")
    init_email_service(settings)
    yield


app = FastAPI(
    title="Partners Portal API",
    description="Client dossiers, document review, and payment workflows for Partners LLC",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _problem(request: Request, status_code: int, detail: str, request_id: str) -> JSONResponse:
    body = ErrorResponse.build(status_code, detail, request_id, instance=request.url.path)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Map domain errors to RFC 7807 Problem Details using their status code."""
    request_id = _request_id(request)
    if isinstance(exc, DownstreamError):
        logger.exception("Downstream failure (request_id=%s)", request_id, exc_info=exc)
        return _problem(request, exc.status_code, "A required service is unavailable.", request_id)
    return _problem(request, exc.status_code, str(exc), request_id)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Store failures surface as 503 with a generic message."""
    request_id = _request_id(request)
    logger.exception("Database error (request_id=%s)", request_id, exc_info=exc)
    return _problem(request, 503, "The database is unavailable.", request_id)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    return _problem(request, exc.status_code, str(exc.detail), _request_id(request))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters are client errors (400)."""
    return _problem(request, 400, str(exc.errors()), _request_id(request))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id, exc_info=exc)
    return _problem(request, 500, "An unexpected error occurred.", request_id)


# Include routers
app.include_router(health.router, prefix="/api/health", tags=["health"])
app.include_router(legal.router, prefix="/api/legal-documents", tags=["public"])
app.include_router(payment_links.router, prefix="/api/payment-links", tags=["public"])
app.include_router(dossiers.router, prefix="/api/dossiers", tags=["dossiers"])
app.include_router(documents.router, prefix="/api/admin", tags=["admin"])
app.include_router(clients.router, prefix="/api/admin/clients", tags=["admin"])
app.include_router(orders.router, prefix="/api/admin/orders", tags=["admin"])
app.include_router(payment_links.admin_router, prefix="/api/admin/payment-links", tags=["admin"])
app.include_router(audit.router, prefix="/api/admin", tags=["audit"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "Welcome to the Partners Portal API"}
