"""create books

Revision ID: 5f1c2a9d7b34
Revises:
Create Date: 2026-10-19 10:12:03.418220
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "5f1c2a9d7b34"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("genres", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("version", sa.BigInteger(), nullable=False, server_default=sa.text("1")),
    )

    # Title search and genre containment both need GIN to avoid sequential scans
    op.create_index(
        "ix_books_title_tsv",
        "books",
        [sa.text("to_tsvector('simple', title)")],
        postgresql_using="gin",
    )
    op.create_index("ix_books_genres", "books", ["genres"], postgresql_using="gin")


def downgrade() -> None:
    op.drop_index("ix_books_genres", table_name="books")
    op.drop_index("ix_books_title_tsv", table_name="books")
    op.drop_table("books")
