from datetime import datetime
from typing import Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CustomFieldValue = Union[bool, int, float, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JournalEntryCreate(CamelModel):
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    custom_fields: dict[str, CustomFieldValue] | None = None
    image: str | None = None


class JournalEntryUpdate(JournalEntryCreate):
    pass


class JournalEntry(CamelModel):
    id: UUID
    owner_id: str
    title: str
    content: str
    image: str | None = None
    tags: list[str] = []
    custom_fields: dict[str, CustomFieldValue] = {}
    created_at: datetime
    updated_at: datetime


class JournalEntryList(CamelModel):
    entries: list[JournalEntry]
    total: int
    page: int
    total_pages: int


class Message(BaseModel):
    message: str
