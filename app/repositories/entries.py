from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError, ValidationError
from ..models import JournalEntry
from .base import EntryFilter, EntryPage, entry_filters, owner_filters

_logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _entry_to_dict(entry: JournalEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "owner_id": entry.owner_id,
        "title": entry.title,
        "content": entry.content,
        "image": entry.image,
        "tags": list(entry.tags),
        "custom_fields": dict(entry.custom_fields or {}),
        "created_at": _as_utc(entry.created_at),
        "updated_at": _as_utc(entry.updated_at),
    }


def _require_text(value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError("Title and content are required")
    return value


def _clean_custom_fields(custom_fields: dict[str, Any] | None) -> dict[str, Any]:
    if not custom_fields:
        return {}
    for key, value in custom_fields.items():
        if not isinstance(key, str) or not isinstance(value, SCALAR_TYPES):
            raise ValidationError(f"Custom field {key!r} must be a string, number or boolean")
    return dict(custom_fields)


class EntryRepository:
    """Owner-scoped database operations for journal entries."""

    async def _get_owned(
        self, session: AsyncSession, owner_id: str, entry_id: UUID
    ) -> JournalEntry:
        result = await session.execute(
            select(JournalEntry).where(
                *owner_filters(owner_id), JournalEntry.id == entry_id
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError()
        return entry

    async def create(
        self,
        session: AsyncSession,
        owner_id: str,
        *,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        custom_fields: dict[str, Any] | None = None,
        image: str | None = None,
    ) -> dict[str, Any]:
        """Create an entry owned by ``owner_id``."""
        title = _require_text(title)
        content = _require_text(content)
        fields = _clean_custom_fields(custom_fields)
        now = _utcnow()
        entry = JournalEntry(
            id=uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            image=image or None,
            custom_fields=fields,
            created_at=now,
            updated_at=now,
        )
        entry.tags = list(tags or [])
        session.add(entry)
        await session.commit()
        _logger.info("Created journal entry %s", entry.id)
        return _entry_to_dict(entry)

    async def get(
        self, session: AsyncSession, owner_id: str, entry_id: UUID
    ) -> dict[str, Any]:
        """Get an entry by ID if it belongs to ``owner_id``."""
        return _entry_to_dict(await self._get_owned(session, owner_id, entry_id))

    async def update(
        self,
        session: AsyncSession,
        owner_id: str,
        entry_id: UUID,
        *,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        custom_fields: dict[str, Any] | None = None,
        image: str | None = None,
    ) -> dict[str, Any]:
        """Replace every editable field of an entry.

        Optional fields left out are reset to their empty value rather than
        kept, and ``updated_at`` moves forward even when nothing changed.
        """
        title = _require_text(title)
        content = _require_text(content)
        fields = _clean_custom_fields(custom_fields)
        entry = await self._get_owned(session, owner_id, entry_id)
        entry.title = title
        entry.content = content
        entry.tags = list(tags or [])
        entry.custom_fields = fields
        entry.image = image or None
        entry.updated_at = max(_utcnow(), _as_utc(entry.created_at))
        await session.commit()
        return _entry_to_dict(entry)

    async def delete(
        self, session: AsyncSession, owner_id: str, entry_id: UUID
    ) -> None:
        """Permanently delete an entry."""
        entry = await self._get_owned(session, owner_id, entry_id)
        await session.delete(entry)
        await session.commit()
        _logger.info("Deleted journal entry %s", entry_id)

    async def list_entries(
        self,
        session: AsyncSession,
        owner_id: str,
        entry_filter: EntryFilter,
    ) -> EntryPage:
        """List entries newest first, with the total match count.

        Entries sharing a ``created_at`` come back in reverse insertion order.
        """
        filters = entry_filters(owner_id, entry_filter)
        total = await session.scalar(
            select(func.count()).select_from(JournalEntry).where(*filters)
        ) or 0
        offset = entry_filter.offset
        if offset >= total:
            return EntryPage(entries=[], total=total)
        query = (
            select(JournalEntry)
            .where(*filters)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.seq.desc())
            .offset(offset)
        )
        if entry_filter.limit is not None:
            # Keeps the bound within what the driver can bind.
            query = query.limit(min(entry_filter.limit, total - offset))
        result = await session.execute(query)
        return EntryPage(
            entries=[_entry_to_dict(item) for item in result.scalars().all()],
            total=total,
        )
