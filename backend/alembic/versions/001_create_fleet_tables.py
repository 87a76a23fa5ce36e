"""Create fleet tables

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Creates users, buses, document_types and bus_documents.
Why:   Initial schema: buses own compliance documents, each filed under a
       document type; voice-app users are independent of the fleet.
How:   Plain portable types (String IDs, TIMESTAMP WITH TIME ZONE) so the
       same schema runs on PostgreSQL and SQLite.

Constraints that back service-level checks:
    - users.username, users.email, buses.registration_no, document_types.name
      are UNIQUE (authoritative duplicate guard under concurrent writes)
    - bus_documents.bus_id / doc_type_id are foreign keys WITHOUT cascade, so a
      bus or document type with documents can never be deleted underneath them

Rollback: downgrade() drops all four tables (destructive, all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true(),
                  comment="False once soft-deleted"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "buses",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("registration_no", sa.String(64), nullable=False),
        sa.Column("model", sa.String(255), nullable=True),
        sa.Column("manufacturer", sa.String(255), nullable=True),
        sa.Column("year_of_make", sa.Integer(), nullable=True),
        sa.Column("owner_name", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("registration_no", name="uq_buses_registration_no"),
    )
    # Listing is newest first
    op.create_index("ix_buses_created_at", "buses", ["created_at"])

    op.create_table(
        "document_types",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_document_types_name"),
    )

    op.create_table(
        "bus_documents",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("bus_id", sa.String(32), nullable=False),
        sa.Column("doc_type_id", sa.String(32), nullable=False),
        sa.Column("document_number", sa.String(255), nullable=True),
        sa.Column("issue_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expiry_date", sa.TIMESTAMP(timezone=True), nullable=True,
                  comment="NULL means the document never expires"),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("uploaded_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["bus_id"], ["buses.id"], name="fk_bus_documents_bus_id"),
        sa.ForeignKeyConstraint(
            ["doc_type_id"], ["document_types.id"], name="fk_bus_documents_doc_type_id"
        ),
    )
    op.create_index("ix_bus_documents_bus_id", "bus_documents", ["bus_id"])
    op.create_index("ix_bus_documents_doc_type_id", "bus_documents", ["doc_type_id"])
    # Range scans for the expiring/expired reports and dashboard counts
    op.create_index("ix_bus_documents_expiry_date", "bus_documents", ["expiry_date"])


def downgrade() -> None:
    op.drop_index("ix_bus_documents_expiry_date", table_name="bus_documents")
    op.drop_index("ix_bus_documents_doc_type_id", table_name="bus_documents")
    op.drop_index("ix_bus_documents_bus_id", table_name="bus_documents")
    op.drop_table("bus_documents")
    op.drop_table("document_types")
    op.drop_index("ix_buses_created_at", table_name="buses")
    op.drop_table("buses")
    op.drop_table("users")
