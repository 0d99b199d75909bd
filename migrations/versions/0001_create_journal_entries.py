"""create journal entries and tags tables

Revision ID: 0001_create_journal_entries
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_create_journal_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "journal_entries",
        sa.Column("seq", sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column(
            "custom_fields",
            postgresql.JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "journal_entries_owner_created_idx",
        "journal_entries",
        ["owner_id", sa.text("created_at DESC"), sa.text("seq DESC")],
    )

    op.create_table(
        "journal_entry_tags",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column(
            "entry_seq",
            sa.BigInteger(),
            sa.ForeignKey("journal_entries.seq", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
    )
    op.create_index(
        "journal_entry_tags_tag_idx",
        "journal_entry_tags",
        ["tag", "entry_seq"],
    )


def downgrade() -> None:
    op.drop_index("journal_entry_tags_tag_idx", table_name="journal_entry_tags")
    op.drop_table("journal_entry_tags")
    op.drop_index("journal_entries_owner_created_idx", table_name="journal_entries")
    op.drop_table("journal_entries")
