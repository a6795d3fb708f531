# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, SessionLocal, get_db, get_db_service
from .enums import (
    ActorType,
    DocumentStatus,
    DossierStatus,
    DossierType,
    EntityType,
    EventType,
    LegalDocument,
    NotificationTemplate,
    OrderStatus,
    PaymentLinkStatus,
    ProfileStatus,
    UserRole,
)
from .models import (
    Agent,
    Document,
    Dossier,
    Event,
    Notification,
    Order,
    PaymentLink,
    Product,
    Profile,
)

__all__ = [
    "Base",
    "DatabaseService",
    "SessionLocal",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "ActorType",
    "DocumentStatus",
    "DossierStatus",
    "DossierType",
    "EntityType",
    "EventType",
    "LegalDocument",
    "NotificationTemplate",
    "OrderStatus",
    "PaymentLinkStatus",
    "ProfileStatus",
    "UserRole",
    # Models
    "Agent",
    "Document",
    "Dossier",
    "Event",
    "Notification",
    "Order",
    "PaymentLink",
    "Product",
    "Profile",
]
