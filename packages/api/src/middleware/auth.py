# This project was developed with assistance from AI tools.
"""
JWT authentication for the hosted auth provider.

Validates Bearer tokens (HS256 shared secret, or the provider's JWKS when no
secret is configured), resolves the caller's role and profile status from the
store, and provides FastAPI dependencies for route-level auth.

Set AUTH_DISABLED=true to bypass validation (tests / local dev).
"""

import logging
import time
from typing import Annotated

import httpx
import jwt
import pydantic
from db import Agent, Profile, get_db
from db.enums import ProfileStatus, UserRole
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import build_data_scope, require_active_profile, require_role, resolve_role
from ..core.config import settings
from ..core.errors import AuthenticationError, DownstreamError
from ..schemas.auth import DataScope, TokenPayload, UserContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JWKS cache
# ---------------------------------------------------------------------------

_jwks_data: dict | None = None
_jwks_fetched_at: float = 0


def _fetch_jwks() -> dict:
    """Fetch the JSON Web Key Set from the auth provider. Raises on failure."""
    url = f"{settings.SUPABASE_URL}/auth/v1/.well-known/jwks.json"
    response = httpx.get(url, timeout=5)
    response.raise_for_status()
    return response.json()


def _get_jwks(force_refresh: bool = False) -> dict:
    """Return cached JWKS, refreshing if stale or forced."""
    global _jwks_data, _jwks_fetched_at  # noqa: PLW0603

    now = time.time()
    if _jwks_data is None or force_refresh or (now - _jwks_fetched_at) > settings.JWKS_CACHE_TTL:
        _jwks_data = _fetch_jwks()
        _jwks_fetched_at = now

    return _jwks_data


def _get_signing_key(token: str) -> jwt.PyJWK:
    """Find the signing key for the given token from the JWKS."""
    try:
        kid = jwt.get_unverified_header(token).get("kid")

        for force_refresh in (False, True):
            # second pass cache-busts for key rotation
            jwk_set = jwt.PyJWKSet.from_dict(_get_jwks(force_refresh=force_refresh))
            for key in jwk_set.keys:
                if key.key_id == kid:
                    return key

        raise jwt.InvalidTokenError(f"No matching key found for kid={kid}")

    except httpx.HTTPError as exc:
        logger.error("Failed to fetch JWKS from auth provider: %s", exc)
        raise DownstreamError("Authentication service unavailable") from exc


# ---------------------------------------------------------------------------
# Token validation
# ---------------------------------------------------------------------------

def _extract_token(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


def _decode_token(token: str) -> TokenPayload:
    """Validate and decode a JWT issued by the auth provider."""
    if settings.SUPABASE_JWT_SECRET:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.JWT_AUDIENCE,
        )
    else:
        signing_key = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
            audience=settings.JWT_AUDIENCE,
            issuer=f"{settings.SUPABASE_URL}/auth/v1",
        )
    return TokenPayload(**payload)


async def _lookup_identity(session: AsyncSession, user_id: str) -> tuple[Agent | None, Profile | None]:
    """Load the caller's staff row and profile.

    A failed lookup yields ``(None, None)`` so the caller falls back to the
    least-privileged role instead of failing open.
    """
    try:
        agent = (
            await session.execute(select(Agent).where(Agent.id == user_id))
        ).scalar_one_or_none()
        profile = (
            await session.execute(select(Profile).where(Profile.id == user_id))
        ).scalar_one_or_none()
    except SQLAlchemyError:
        logger.warning("Identity lookup failed for user %s, using least privilege", user_id, exc_info=True)
        await session.rollback()
        return None, None
    return agent, profile


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

_DISABLED_USER = UserContext(
    user_id="dev-user",
    role=UserRole.ADMIN,
    email="dev@partnersllc.local",
    name="Dev User",
    profile_status=ProfileStatus.ACTIVE,
    data_scope=DataScope(full_pipeline=True),
)


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> UserContext:
    """FastAPI dependency: validate JWT and return UserContext.

    When AUTH_DISABLED=true, returns a dev admin user without token validation.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = _extract_token(request)
    if not token:
        raise AuthenticationError("Missing authentication token")

    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc
    except pydantic.ValidationError as exc:
        raise AuthenticationError("Token is missing required claims") from exc

    agent, profile = await _lookup_identity(session, payload.sub)
    role = resolve_role(agent)

    name = (
        (agent.name if agent is not None and role != UserRole.CLIENT else None)
        or (profile.full_name if profile is not None else None)
        or (payload.user_metadata or {}).get("full_name")
        or ""
    )

    return UserContext(
        user_id=payload.sub,
        role=role,
        email=payload.email or "",
        name=name,
        profile_status=profile.status if profile is not None else None,
        data_scope=build_data_scope(role, payload.sub),
    )


# Type alias for use in route signatures
CurrentUser = Annotated[UserContext, Depends(get_current_user)]


async def get_active_user(user: CurrentUser) -> UserContext:
    """FastAPI dependency: CurrentUser whose profile is ACTIVE (staff always pass)."""
    return require_active_profile(user)


ActiveUser = Annotated[UserContext, Depends(get_active_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles.

    Usage:
        @router.post("/bulk-expire", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """

    async def _check(user: CurrentUser) -> UserContext:
        return require_role(user, *allowed_roles)

    return _check
