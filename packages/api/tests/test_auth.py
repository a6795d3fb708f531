# This project was developed with assistance from AI tools.
"""Tests for JWT authentication middleware."""

import time
from unittest.mock import AsyncMock, MagicMock, patch

import jwt
import pytest
from db.enums import ProfileStatus, UserRole
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from src.core.config import settings
from src.core.errors import AuthenticationError
from src.middleware.auth import _lookup_identity, get_current_user

SECRET = "test-secret-with-enough-length-for-hs256"


def _request(token: str | None = None) -> Request:
    headers = []
    if token is not None:
        headers.append((b"authorization", f"Bearer {token}".encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def _token(sub="user-1", exp_offset=3600, **extra) -> str:
    claims = {
        "sub": sub,
        "email": f"{sub}@example.com",
        "aud": "authenticated",
        "exp": int(time.time()) + exp_offset,
        **extra,
    }
    return jwt.encode(claims, SECRET, algorithm="HS256")


@pytest.fixture
def hs256(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", SECRET)


def _profile(status=ProfileStatus.ACTIVE):
    p = MagicMock()
    p.full_name = "Jane Client"
    p.status = status
    return p


def _agent(role="AGENT", active=True):
    a = MagicMock()
    a.id = "user-1"
    a.name = "Staff Member"
    a.role = role
    a.active = active
    return a


# ---------------------------------------------------------------------------
# AUTH_DISABLED bypass
# ---------------------------------------------------------------------------


async def test_auth_disabled_returns_dev_admin(monkeypatch):
    """When AUTH_DISABLED=true, any request gets a dev admin user."""
    monkeypatch.setattr(settings, "AUTH_DISABLED", True)
    user = await get_current_user(_request(), AsyncMock())
    assert user.user_id == "dev-user"
    assert user.role == UserRole.ADMIN


# ---------------------------------------------------------------------------
# Token failures are 401
# ---------------------------------------------------------------------------


async def test_missing_token_raises_authentication_error(hs256):
    with pytest.raises(AuthenticationError, match="Missing authentication token"):
        await get_current_user(_request(), AsyncMock())


async def test_expired_token_rejected(hs256):
    with pytest.raises(AuthenticationError, match="Token has expired"):
        await get_current_user(_request(_token(exp_offset=-60)), AsyncMock())


async def test_bad_signature_rejected(hs256):
    forged = jwt.encode(
        {"sub": "user-1", "aud": "authenticated", "exp": int(time.time()) + 60},
        "another-secret-entirely-of-sufficient-len",
        algorithm="HS256",
    )
    with pytest.raises(AuthenticationError, match="Invalid token"):
        await get_current_user(_request(forged), AsyncMock())


async def test_wrong_audience_rejected(hs256):
    with pytest.raises(AuthenticationError, match="Invalid token"):
        await get_current_user(_request(_token(aud="service_role")), AsyncMock())


async def test_token_without_subject_rejected(hs256):
    claims = {"email": "x@example.com", "aud": "authenticated", "exp": int(time.time()) + 3600}
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(AuthenticationError, match="missing required claims"):
        await get_current_user(_request(token), AsyncMock())


async def test_null_email_and_name_claims_tolerated(hs256):
    token = _token(email=None, user_metadata={"full_name": None})
    with patch(
        "src.middleware.auth._lookup_identity",
        new=AsyncMock(return_value=(None, None)),
    ):
        user = await get_current_user(_request(token), AsyncMock())

    assert user.user_id == "user-1"
    assert user.email == ""
    assert user.name == ""
    assert user.role == UserRole.CLIENT


# ---------------------------------------------------------------------------
# Role resolution from the staff directory
# ---------------------------------------------------------------------------


async def test_client_identity(hs256):
    with patch(
        "src.middleware.auth._lookup_identity",
        new=AsyncMock(return_value=(None, _profile(ProfileStatus.PENDING))),
    ):
        user = await get_current_user(_request(_token()), AsyncMock())

    assert user.role == UserRole.CLIENT
    assert user.profile_status == ProfileStatus.PENDING
    assert user.data_scope.own_data_only is True
    assert user.data_scope.user_id == "user-1"


async def test_active_admin_row_grants_admin(hs256):
    with patch(
        "src.middleware.auth._lookup_identity",
        new=AsyncMock(return_value=(_agent("ADMIN"), None)),
    ):
        user = await get_current_user(_request(_token()), AsyncMock())

    assert user.role == UserRole.ADMIN
    assert user.name == "Staff Member"
    assert user.data_scope.full_pipeline is True


async def test_unknown_staff_role_falls_back_to_client(hs256):
    with patch(
        "src.middleware.auth._lookup_identity",
        new=AsyncMock(return_value=(_agent("SUPERUSER"), None)),
    ):
        user = await get_current_user(_request(_token()), AsyncMock())

    assert user.role == UserRole.CLIENT
    assert user.data_scope.full_pipeline is False


async def test_token_role_claim_is_ignored(hs256):
    """Privileges come from the staff directory, never from token claims."""
    with patch(
        "src.middleware.auth._lookup_identity",
        new=AsyncMock(return_value=(None, _profile())),
    ):
        user = await get_current_user(_request(_token(role="ADMIN")), AsyncMock())

    assert user.role == UserRole.CLIENT


async def test_lookup_failure_yields_no_identity():
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))

    agent, profile = await _lookup_identity(session, "user-1")

    assert agent is None
    assert profile is None
    session.rollback.assert_awaited_once()
