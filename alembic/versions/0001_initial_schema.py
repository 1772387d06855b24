"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="client"),
        *_timestamps(),
    )
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("target_schools", sa.JSON(), nullable=False),
        sa.Column("application_round", sa.String(length=80), nullable=True),
        sa.Column("status", sa.String(length=40), nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id", ondelete="CASCADE")),
        sa.Column("document_type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )
    op.create_index("ix_documents_client_id", "documents", ["client_id"])
    op.create_index("ix_documents_client_updated", "documents", ["client_id", "updated_at"])
    op.create_table(
        "school_deadlines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("school_name", sa.String(length=255), nullable=False),
        sa.Column("round_name", sa.String(length=120), nullable=False),
        sa.Column("deadline_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("school_name", "round_name", name="uq_school_round"),
    )
    op.create_index("ix_school_deadlines_school_name", "school_deadlines", ["school_name"])
    op.create_index("ix_school_deadlines_deadline_date", "school_deadlines", ["deadline_date"])


def downgrade() -> None:
    op.drop_index("ix_school_deadlines_deadline_date", table_name="school_deadlines")
    op.drop_index("ix_school_deadlines_school_name", table_name="school_deadlines")
    op.drop_table("school_deadlines")
    op.drop_index("ix_documents_client_updated", table_name="documents")
    op.drop_index("ix_documents_client_id", table_name="documents")
    op.drop_table("documents")
    op.drop_table("clients")
    op.drop_table("users")
