from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# SQLite only autoincrements a plain INTEGER primary key.
SeqType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


class EntryTag(Base):
    __tablename__ = "journal_entry_tags"

    id: Mapped[int] = mapped_column(SeqType, primary_key=True, autoincrement=True)
    entry_seq: Mapped[int] = mapped_column(
        SeqType,
        ForeignKey("journal_entries.seq", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    tag: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("journal_entry_tags_tag_idx", "tag", "entry_seq"),
    )

    def __init__(self, tag: str, **kwargs: Any):
        super().__init__(tag=tag, **kwargs)


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    seq: Mapped[int] = mapped_column(SeqType, primary_key=True, autoincrement=True)
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), unique=True, nullable=False, default=uuid4)
    owner_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(Text)
    custom_fields: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    tag_rows: Mapped[list[EntryTag]] = relationship(
        order_by=EntryTag.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    tags: AssociationProxy[list[str]] = association_proxy("tag_rows", "tag")

    __table_args__ = (
        Index(
            "journal_entries_owner_created_idx",
            "owner_id",
            created_at.desc(),
            seq.desc(),
        ),
    )
