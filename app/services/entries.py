from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..export import ExportDocument, normalize_format, render_export
from ..repositories import EntryFilter, EntryPage, EntryRepository


class EntryService:
    """Journal entry operations for one caller within one request."""

    def __init__(self, session: AsyncSession, owner_id: str):
        self._session = session
        self._owner_id = owner_id
        self._repo = EntryRepository()

    async def create_entry(
        self,
        *,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        custom_fields: dict[str, Any] | None = None,
        image: str | None = None,
    ) -> dict[str, Any]:
        return await self._repo.create(
            self._session,
            self._owner_id,
            title=title,
            content=content,
            tags=tags,
            custom_fields=custom_fields,
            image=image,
        )

    async def get_entry(self, entry_id: UUID) -> dict[str, Any]:
        return await self._repo.get(self._session, self._owner_id, entry_id)

    async def update_entry(
        self,
        entry_id: UUID,
        *,
        title: str | None,
        content: str | None,
        tags: list[str] | None = None,
        custom_fields: dict[str, Any] | None = None,
        image: str | None = None,
    ) -> dict[str, Any]:
        return await self._repo.update(
            self._session,
            self._owner_id,
            entry_id,
            title=title,
            content=content,
            tags=tags,
            custom_fields=custom_fields,
            image=image,
        )

    async def delete_entry(self, entry_id: UUID) -> None:
        await self._repo.delete(self._session, self._owner_id, entry_id)

    async def list_entries(
        self,
        *,
        search: str | None = None,
        tag: str | None = None,
        page: int = 1,
        limit: int | None = 10,
    ) -> EntryPage:
        return await self._repo.list_entries(
            self._session,
            self._owner_id,
            EntryFilter(search=search, tag=tag, page=page, limit=limit),
        )

    async def export_entries(self, export_format: str | None = None) -> ExportDocument:
        """Export every entry of the caller, newest first."""
        export_format = normalize_format(export_format)
        result = await self.list_entries(page=1, limit=None)
        return render_export(result.entries, export_format)
