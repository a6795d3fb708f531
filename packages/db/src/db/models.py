# This project was developed with assistance from AI tools.
"""
Partners portal -- domain models

Client profiles, staff agents, products, dossiers with their documents,
orders, payment links, notifications, and the append-only event trail.
Primary keys are UUID strings issued by the hosted database / auth provider.
"""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    DocumentStatus,
    DossierStatus,
    DossierType,
    OrderStatus,
    PaymentLinkStatus,
    ProfileStatus,
    UserRole,
)


def _uuid() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    """Client profile keyed by the auth provider's user id."""

    __tablename__ = "profiles"
    # fetch server-side timestamps on UPDATE as well as INSERT
    __mapper_args__ = {"eager_defaults": True}

    id = Column(String(36), primary_key=True)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    status = Column(
        Enum(ProfileStatus, name="profile_status", native_enum=False),
        nullable=False,
        default=ProfileStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    dossiers = relationship("Dossier", back_populates="owner")

    def __repr__(self):
        return f"<Profile(id={self.id}, status='{self.status}')>"


class Agent(Base):
    """Staff member. An active row grants its role to the matching user id."""

    __tablename__ = "agents"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    role = Column(
        Enum(UserRole, name="agent_role", native_enum=False),
        nullable=False,
        default=UserRole.AGENT,
    )
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Agent(id={self.id}, role='{self.role}', active={self.active})>"


class Product(Base):
    """Purchasable service offering with its required document types."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    dossier_type = Column(
        Enum(DossierType, name="dossier_type", native_enum=False),
        nullable=False,
        default=DossierType.LLC,
    )
    price_amount = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="EUR")
    required_document_types = Column(JSON, nullable=False, default=list)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"


class Dossier(Base):
    """A client's case tracking one product's workflow to completion."""

    __tablename__ = "dossiers"
    # fetch server-side timestamps on UPDATE as well as INSERT
    __mapper_args__ = {"eager_defaults": True}

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    type = Column(
        Enum(DossierType, name="dossier_type", native_enum=False),
        nullable=False,
        default=DossierType.LLC,
    )
    status = Column(
        Enum(DossierStatus, name="dossier_status", native_enum=False),
        nullable=False,
        default=DossierStatus.QUALIFICATION,
    )
    details = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    owner = relationship("Profile", back_populates="dossiers")
    product = relationship("Product", lazy="joined")
    documents = relationship(
        "Document", back_populates="dossier", cascade="all, delete-orphan",
        order_by="Document.created_at",
    )

    def __repr__(self):
        return f"<Dossier(id={self.id}, status='{self.status}')>"


class Document(Base):
    """A submitted document awaiting or having received review."""

    __tablename__ = "documents"
    # fetch server-side timestamps on UPDATE as well as INSERT
    __mapper_args__ = {"eager_defaults": True}

    id = Column(String(36), primary_key=True, default=_uuid)
    dossier_id = Column(
        String(36), ForeignKey("dossiers.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    document_type = Column(String(100), nullable=False)
    file_name = Column(String(255), nullable=True)
    status = Column(
        Enum(DocumentStatus, name="document_status", native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    rejection_reason = Column(Text, nullable=True)
    uploaded_by = Column(String(36), nullable=True)
    reviewed_by = Column(String(36), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    dossier = relationship("Dossier", back_populates="documents")

    def __repr__(self):
        return f"<Document(id={self.id}, type='{self.document_type}', status='{self.status}')>"


class Order(Base):
    """Purchase of a product; its outcome drives profile status."""

    __tablename__ = "orders"
    # fetch server-side timestamps on UPDATE as well as INSERT
    __mapper_args__ = {"eager_defaults": True}

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True,
    )
    payment_link_id = Column(
        String(36), ForeignKey("payment_links.id", ondelete="SET NULL"), nullable=True,
    )
    status = Column(
        Enum(OrderStatus, name="order_status", native_enum=False),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    amount = Column(Integer, nullable=True)
    currency = Column(String(3), nullable=False, default="EUR")
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Order(id={self.id}, status='{self.status}')>"


class PaymentLink(Base):
    """Single-use token granting a prospect access to checkout."""

    __tablename__ = "payment_links"

    id = Column(String(36), primary_key=True, default=_uuid)
    token = Column(String(64), nullable=False, unique=True, index=True)
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True,
    )
    prospect_email = Column(String(255), nullable=True)
    status = Column(
        Enum(PaymentLinkStatus, name="payment_link_status", native_enum=False),
        nullable=False,
        default=PaymentLinkStatus.ACTIVE,
    )
    expires_at = Column(DateTime(timezone=True), nullable=True)
    used_at = Column(DateTime(timezone=True), nullable=True)
    used_by = Column(String(36), nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", lazy="joined")

    def __repr__(self):
        return f"<PaymentLink(id={self.id}, status='{self.status}')>"


class Event(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(36), nullable=False, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    actor_type = Column(String(20), nullable=True)
    actor_id = Column(String(36), nullable=True)
    description = Column(Text, nullable=True)
    payload = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Event(id={self.id}, type='{self.event_type}', entity={self.entity_type}:{self.entity_id})>"


class Notification(Base):
    """In-app notification; email delivery is recorded in email_sent_at."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    dossier_id = Column(
        String(36), ForeignKey("dossiers.id", ondelete="SET NULL"), nullable=True,
    )
    event_id = Column(Integer, nullable=True)
    template_code = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=True)
    action_url = Column(String(500), nullable=True)
    email_sent_at = Column(DateTime(timezone=True), nullable=True)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, template='{self.template_code}')>"
