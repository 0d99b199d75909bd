import json
from dataclasses import dataclass
from typing import Any

from .errors import ValidationError
from .schemas import JournalEntry

EXPORT_FORMATS = ("json", "markdown")
MARKDOWN_TITLE = "# My Journal Entries"


@dataclass(frozen=True)
class ExportDocument:
    body: str
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_json(entries: list[dict[str, Any]]) -> str:
    payload = [
        JournalEntry.model_validate(entry).model_dump(
            mode="json", by_alias=True, exclude={"image"}
        )
        for entry in entries
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_markdown(entries: list[dict[str, Any]]) -> str:
    chunks = [f"{MARKDOWN_TITLE}\n\n"]
    for entry in entries:
        chunks.append(f"## {entry['title']}\n\n")
        chunks.append(f"**Date:** {entry['created_at'].strftime('%a %b %d %Y')}\n\n")
        tags = entry.get("tags") or []
        if tags:
            chunks.append(f"**Tags:** {', '.join(tags)}\n\n")
        custom_fields = entry.get("custom_fields") or {}
        if custom_fields:
            chunks.append("**Custom Fields:**\n")
            for key, value in custom_fields.items():
                chunks.append(f"- {key}: {_format_value(value)}\n")
            chunks.append("\n")
        chunks.append(f"{entry['content']}\n\n---\n\n")
    return "".join(chunks)


def normalize_format(export_format: str | None) -> str:
    export_format = export_format or "json"
    if export_format not in EXPORT_FORMATS:
        raise ValidationError("Invalid format")
    return export_format


def render_export(entries: list[dict[str, Any]], export_format: str | None) -> ExportDocument:
    """Render entries, newest first, as a downloadable document.

    ``export_format`` defaults to JSON when missing or empty. Images are left
    out of both formats.
    """
    export_format = normalize_format(export_format)
    if export_format == "json":
        return ExportDocument(
            body=render_json(entries),
            media_type="application/json",
            filename="journal-entries.json",
        )
    return ExportDocument(
        body=render_markdown(entries),
        media_type="text/markdown",
        filename="journal-entries.md",
    )
