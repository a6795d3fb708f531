# This project was developed with assistance from AI tools.
"""Authorization gate: pure functions with no FastAPI or HTTP dependencies.

Every check takes the caller's ``UserContext`` as an argument and raises an
error from ``core.errors`` when unmet. The route layer wires them up as
dependencies; services call them directly before mutating anything.
"""

import logging

from db.enums import ProfileStatus, UserRole

from ..schemas.auth import DataScope, UserContext
from .errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

# Any identity lookup that cannot positively establish a staff role resolves
# to this role. Never widen it.
LEAST_PRIVILEGED_ROLE = UserRole.CLIENT

STAFF_ROLES = UserRole.staff_roles()


def resolve_role(agent) -> UserRole:
    """Map a staff directory row (or None) to the caller's role.

    Applies the least-privilege fallback: no row, an inactive row, or a row
    carrying an unrecognised role all resolve to ``LEAST_PRIVILEGED_ROLE``.
    """
    if agent is None or not agent.active:
        return LEAST_PRIVILEGED_ROLE
    try:
        role = UserRole(agent.role)
    except ValueError:
        logger.warning(
            "Agent %s has unrecognised role %r, using %s",
            agent.id,
            agent.role,
            LEAST_PRIVILEGED_ROLE.value,
        )
        return LEAST_PRIVILEGED_ROLE
    return role


def build_data_scope(role: UserRole, user_id: str) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role in STAFF_ROLES:
        return DataScope(full_pipeline=True)
    return DataScope(own_data_only=True, user_id=user_id)


def require_authenticated(user: UserContext | None) -> UserContext:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


def require_role(user: UserContext, *allowed_roles: UserRole) -> UserContext:
    """Raise AuthorizationError unless the caller holds one of ``allowed_roles``."""
    if user.role not in allowed_roles:
        logger.warning(
            "RBAC denied: user=%s role=%s required %s",
            user.user_id,
            user.role.value,
            sorted(r.value for r in allowed_roles),
        )
        raise AuthorizationError("Insufficient permissions")
    return user


def require_ownership(user: UserContext, owner_id: str) -> UserContext:
    """CLIENT callers may only access resources they own; staff pass."""
    if user.role in STAFF_ROLES:
        return user
    if owner_id != user.user_id:
        logger.warning(
            "Ownership denied: user=%s attempted resource owned by %s",
            user.user_id,
            owner_id,
        )
        raise AuthorizationError("Access to this resource is not allowed")
    return user


def require_active_profile(user: UserContext) -> UserContext:
    """CLIENT callers need an ACTIVE profile to use the dashboard."""
    if user.role in STAFF_ROLES:
        return user
    if user.profile_status != ProfileStatus.ACTIVE:
        status = user.profile_status.value if user.profile_status else "missing"
        raise AuthorizationError(f"Account is not active (profile status: {status})")
    return user
