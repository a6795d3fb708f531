# This project was developed with assistance from AI tools.
"""Status transition checks shared by every workflow service.

Each status enum publishes its own ``valid_transitions()`` table; this module
applies it uniformly so no service mutates a status without consulting it.
"""

import enum

from .errors import InvalidTransitionError, ValidationError


def allowed_transitions(current: enum.Enum) -> frozenset:
    """Return the statuses reachable from ``current`` (empty when terminal)."""
    return type(current).valid_transitions().get(current, frozenset())


def ensure_transition(current: enum.Enum, new: enum.Enum, *, entity: str) -> None:
    """Raise InvalidTransitionError unless ``current -> new`` is allowed."""
    allowed = allowed_transitions(current)
    if new not in allowed:
        raise InvalidTransitionError(
            f"Cannot transition {entity} from '{current.value}' to '{new.value}'. "
            f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
        )


def parse_status(enum_cls: type[enum.Enum], value) -> enum.Enum:
    """Coerce a raw value to ``enum_cls``, rejecting anything outside the enum."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        valid = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid status {value!r}. Expected one of: {valid}") from exc


def require_reason(reason: str | None, *, what: str = "Reason") -> str:
    """Return the stripped reason, or raise ValidationError when blank."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} is required")
    return cleaned
