# This project was developed with assistance from AI tools.
"""
Domain model structure tests
"""


def test_dossier_relationships():
    """Dossier model should have its owner, product and documents wired."""
    from db import Dossier

    rel_names = {r.key for r in Dossier.__mapper__.relationships}
    assert {"owner", "product", "documents"} <= rel_names


def test_document_belongs_to_one_dossier():
    from db import Document

    fk = next(iter(Document.__table__.c.dossier_id.foreign_keys))
    assert fk.column.table.name == "dossiers"
    assert Document.__table__.c.dossier_id.nullable is False


def test_dossier_details_stored_in_metadata_column():
    """``metadata`` is reserved on declarative classes, so the attribute is renamed."""
    from db import Dossier

    assert "metadata" in Dossier.__table__.c
    assert Dossier.details.property.columns[0].name == "metadata"


def test_mutable_models_fetch_server_timestamps():
    from db import Document, Dossier, Order, Profile

    for model in (Profile, Dossier, Document, Order):
        assert model.__mapper__.eager_defaults is True
        assert "updated_at" in model.__table__.c


def test_event_has_no_updated_at():
    """Events are append-only, so they carry a creation timestamp only."""
    from db import Event

    cols = set(Event.__table__.c.keys())
    assert "created_at" in cols
    assert "prev_hash" in cols
    assert "updated_at" not in cols


def test_payment_link_token_unique():
    from db import PaymentLink

    assert PaymentLink.__table__.c.token.unique is True


def test_all_portal_tables_registered():
    from db import Base

    assert set(Base.metadata.tables) == {
        "profiles",
        "agents",
        "products",
        "dossiers",
        "documents",
        "orders",
        "payment_links",
        "events",
        "notifications",
    }
