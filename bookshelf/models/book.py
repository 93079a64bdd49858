from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Identity, Index, Integer, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column
import sqlalchemy as sa

from bookshelf.db.base import Base


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        Index(
            "ix_books_title_tsv",
            sa.text("to_tsvector('simple', title)"),
            postgresql_using="gin",
        ),
        Index("ix_books_genres", "genres", postgresql_using="gin"),
    )

    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.text("now()")
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    genres: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)

    # Optimistic locking
    version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1, server_default=sa.text("1"))
    __mapper_args__ = {"version_id_col": version}
