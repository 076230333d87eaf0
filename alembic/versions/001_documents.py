"""Document store table.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # One row per document; collection is the full hierarchical path,
    # e.g. "{app_id}/users/{identity}/strains".
    op.execute("""
        CREATE TABLE documents (
            collection TEXT NOT NULL,
            id TEXT NOT NULL,
            data JSONB NOT NULL DEFAULT '{}'::jsonb,
            created_at TIMESTAMPTZ DEFAULT now(),
            updated_at TIMESTAMPTZ DEFAULT now(),
            PRIMARY KEY (collection, id)
        );
    """)

    op.execute("""
        CREATE INDEX idx_documents_collection ON documents(collection);
    """)

    # No RLS: identity scoping is by collection path, and the community
    # collection is readable by every identity.


def downgrade():
    op.execute("DROP TABLE IF EXISTS documents CASCADE;")
