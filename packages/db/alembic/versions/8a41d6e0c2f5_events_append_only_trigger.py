# This project was developed with assistance from AI tools.
"""make events append-only

Revision ID: 8a41d6e0c2f5
Revises: 3f9c2a7d1b10
Create Date: 2026-03-02 09:40:03.518775
"""

from alembic import op

revision = "8a41d6e0c2f5"
down_revision = "3f9c2a7d1b10"
branch_labels = None
depends_on = None

TRIGGER_FUNCTION = """
CREATE OR REPLACE FUNCTION events_prevent_mutation()
RETURNS TRIGGER AS $$
BEGIN
    RAISE EXCEPTION 'events is append-only: % denied for row %', TG_OP, OLD.id;
    RETURN NULL;
END;
$$ LANGUAGE plpgsql;
"""

TRIGGER_UPDATE = """
CREATE TRIGGER events_no_update
    BEFORE UPDATE ON events
    FOR EACH ROW
    EXECUTE FUNCTION events_prevent_mutation();
"""

TRIGGER_DELETE = """
CREATE TRIGGER events_no_delete
    BEFORE DELETE ON events
    FOR EACH ROW
    EXECUTE FUNCTION events_prevent_mutation();
"""


def upgrade() -> None:
    op.execute(TRIGGER_FUNCTION)
    op.execute(TRIGGER_UPDATE)
    op.execute(TRIGGER_DELETE)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS events_no_delete ON events")
    op.execute("DROP TRIGGER IF EXISTS events_no_update ON events")
    op.execute("DROP FUNCTION IF EXISTS events_prevent_mutation()")
