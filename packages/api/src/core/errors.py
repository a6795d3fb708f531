# This project was developed with assistance from AI tools.
"""Domain error taxonomy.

Services raise these; ``main.py`` converts them to RFC 7807 responses using
each class's ``status_code``. Validation and authorization errors are raised
before any mutation so a failed request leaves the store untouched.
"""


class PortalError(Exception):
    """Base class for errors with a defined HTTP mapping."""

    status_code: int = 500


class ValidationError(PortalError):
    """Missing or invalid request field (unknown status, blank reason, ...)."""

    status_code = 400


class InvalidTransitionError(ValidationError):
    """Requested status change is not allowed from the current status."""

    status_code = 409


class AuthorizationError(PortalError):
    """Caller lacks the role or ownership required for the operation."""

    status_code = 403


class AuthenticationError(AuthorizationError):
    """No valid caller identity (missing, expired, or invalid token)."""

    status_code = 401


class NotFoundError(PortalError):
    """Resource does not exist."""

    status_code = 404


class DownstreamError(PortalError):
    """An external collaborator (store, provider, file system) failed.

    The message is shown to callers; chain the underlying cause with
    ``raise ... from exc`` so it is logged.
    """

    status_code = 503
