# This project was developed with assistance from AI tools.
"""
Domain enums for the dossier / document / payment lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package). Values match the strings stored
by the hosted database.
"""

import enum


class UserRole(str, enum.Enum):
    CLIENT = "CLIENT"
    AGENT = "AGENT"
    ADMIN = "ADMIN"

    @classmethod
    def staff_roles(cls) -> frozenset["UserRole"]:
        """Roles that see every dossier, not only their own."""
        return frozenset({cls.AGENT, cls.ADMIN})


class ProfileStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"

    @classmethod
    def valid_transitions(cls) -> dict["ProfileStatus", frozenset["ProfileStatus"]]:
        """Transitions driven by payment outcomes.

        Admin overrides may set any status and do not consult this table.
        """
        return {
            cls.PENDING: frozenset({cls.ACTIVE, cls.SUSPENDED}),
            cls.ACTIVE: frozenset({cls.SUSPENDED}),
            cls.SUSPENDED: frozenset({cls.ACTIVE}),
        }


class DossierType(str, enum.Enum):
    LLC = "LLC"
    CORP = "CORP"
    BANKING = "BANKING"


class DossierStatus(str, enum.Enum):
    QUALIFICATION = "QUALIFICATION"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def terminal_statuses(cls) -> frozenset["DossierStatus"]:
        """Statuses with no outgoing transition."""
        return frozenset({cls.COMPLETED, cls.CANCELLED})

    @classmethod
    def valid_transitions(cls) -> dict["DossierStatus", frozenset["DossierStatus"]]:
        return {
            cls.QUALIFICATION: frozenset({cls.IN_PROGRESS, cls.CANCELLED}),
            cls.IN_PROGRESS: frozenset({cls.COMPLETED, cls.CANCELLED}),
            cls.COMPLETED: frozenset(),
            cls.CANCELLED: frozenset(),
        }


class DocumentStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def valid_transitions(cls) -> dict["DocumentStatus", frozenset["DocumentStatus"]]:
        return {
            cls.PENDING: frozenset({cls.APPROVED, cls.REJECTED}),
            cls.APPROVED: frozenset(),
            cls.REJECTED: frozenset(),
        }


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"

    @classmethod
    def valid_transitions(cls) -> dict["OrderStatus", frozenset["OrderStatus"]]:
        return {
            cls.PENDING: frozenset({cls.PAID, cls.FAILED, cls.CANCELLED}),
            # A user-initiated retry may fail again before it succeeds.
            cls.FAILED: frozenset({cls.PAID, cls.FAILED, cls.CANCELLED}),
            cls.PAID: frozenset({cls.REFUNDED}),
            cls.REFUNDED: frozenset(),
            cls.CANCELLED: frozenset(),
        }


class PaymentLinkStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    USED = "USED"
    EXPIRED = "EXPIRED"

    @classmethod
    def valid_transitions(cls) -> dict["PaymentLinkStatus", frozenset["PaymentLinkStatus"]]:
        return {
            cls.ACTIVE: frozenset({cls.USED, cls.EXPIRED}),
            cls.USED: frozenset(),
            cls.EXPIRED: frozenset(),
        }


class EntityType(str, enum.Enum):
    PROFILE = "profile"
    DOSSIER = "dossier"
    DOCUMENT = "document"
    ORDER = "order"
    PAYMENT_LINK = "payment_link"


class EventType(str, enum.Enum):
    DOSSIER_CREATED = "DOSSIER_CREATED"
    DOSSIER_STATUS_CHANGED = "DOSSIER_STATUS_CHANGED"
    DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
    DOCUMENT_REVIEWED = "DOCUMENT_REVIEWED"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    CLIENT_STATUS_CHANGED = "CLIENT_STATUS_CHANGED"
    PAYMENT_LINK_USED = "PAYMENT_LINK_USED"
    PAYMENT_LINK_EXPIRED = "PAYMENT_LINK_EXPIRED"


class ActorType(str, enum.Enum):
    USER = "USER"
    AGENT = "AGENT"
    SYSTEM = "SYSTEM"


class NotificationTemplate(str, enum.Enum):
    DOCUMENT_APPROVED = "DOCUMENT_APPROVED"
    DOCUMENT_REJECTED = "DOCUMENT_REJECTED"
    DOSSIER_COMPLETED = "DOSSIER_COMPLETED"
    PAYMENT_FAILED = "PAYMENT_FAILED"


class LegalDocument(str, enum.Enum):
    CGV = "cgv"
    REFUND_POLICY = "refund_policy"
