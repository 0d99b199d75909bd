from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import ColumnElement, or_

from ..errors import ValidationError
from ..models import EntryTag, JournalEntry

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class EntryFilter:
    search: str | None = None
    tag: str | None = None
    page: int = 1
    limit: int | None = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if self.limit is not None and self.limit < 1:
            raise ValidationError("limit must be >= 1")

    @property
    def offset(self) -> int:
        if self.limit is None:
            return 0
        return (self.page - 1) * self.limit


@dataclass
class EntryPage:
    entries: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def owner_filters(owner_id: str) -> list[ColumnElement[bool]]:
    """Return the conditions every entry query starts from."""
    return [JournalEntry.owner_id == owner_id]


def entry_filters(owner_id: str, entry_filter: EntryFilter) -> list[ColumnElement[bool]]:
    """Return owner-scoped SQLAlchemy conditions for a list filter."""
    filters = owner_filters(owner_id)
    if entry_filter.search:
        pattern = f"%{escape_like(entry_filter.search)}%"
        filters.append(
            or_(
                JournalEntry.title.ilike(pattern, escape=LIKE_ESCAPE),
                JournalEntry.content.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    if entry_filter.tag:
        filters.append(JournalEntry.tag_rows.any(EntryTag.tag == entry_filter.tag))
    return filters
