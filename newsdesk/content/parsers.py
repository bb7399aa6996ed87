"""Parse delivery API payloads into `Entry`, `Asset` records, and `Document` trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import (
    BLOCK_KINDS,
    HEADING_KINDS,
    BlockNode,
    Document,
    EmbeddedMediaNode,
    Entry,
    HeadingNode,
    HorizontalRuleNode,
    HyperlinkNode,
    Mark,
    Node,
    NodeKind,
    TextNode,
    UnknownNode,
)

logger = logging.getLogger(__name__)


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SysInfo(_PayloadModel):
    id: str

    @field_validator("id")
    def _require_id(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("sys.id cannot be empty")
        return cleaned


class ImageDetails(_PayloadModel):
    width: int | None = None
    height: int | None = None

    @field_validator("width", "height", mode="before")
    def _positive_or_none(cls, value: Any) -> int | None:
        try:
            number = int(value)
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None


class FileDetails(_PayloadModel):
    image: ImageDetails | None = None


class AssetFile(_PayloadModel):
    url: str | None = None
    details: FileDetails | None = None


class AssetFields(_PayloadModel):
    title: str | None = None
    description: str | None = None
    file: AssetFile | None = None


class AssetRecord(_PayloadModel):
    """Included asset as delivered, before normalization by the asset index."""

    sys: SysInfo
    fields: AssetFields = Field(default_factory=AssetFields)


class EntryFields(_PayloadModel):
    title: str | None = None
    slug: str | None = None
    date: Any = None
    link: str | None = None
    image: Any = None
    body: Any = None

    @field_validator("title", "slug", "link", mode="before")
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class EntryRecord(_PayloadModel):
    sys: SysInfo
    fields: EntryFields = Field(default_factory=EntryFields)


@dataclass(slots=True)
class ContentCollection:
    """Entries and included assets parsed from one delivery response."""

    entries: list[Entry] = field(default_factory=list)
    assets: list[AssetRecord] = field(default_factory=list)


def parse_collection(payload: Mapping[str, Any]) -> ContentCollection:
    """Convert a raw ``{items, includes: {Asset}}`` payload into typed records.

    Items and assets that fail presence checks are skipped with a warning so a
    single malformed record never blocks the rest of the build.
    """
    collection = ContentCollection()

    for index, raw_item in enumerate(_as_list(payload.get("items"))):
        try:
            record = EntryRecord.model_validate(raw_item)
        except ValidationError as exc:
            logger.warning("Skipping malformed entry at position %d: %s", index, _first_error(exc))
            continue
        collection.entries.append(_to_entry(record))

    includes = payload.get("includes")
    raw_assets = includes.get("Asset") if isinstance(includes, Mapping) else None
    for index, raw_asset in enumerate(_as_list(raw_assets)):
        try:
            collection.assets.append(AssetRecord.model_validate(raw_asset))
        except ValidationError as exc:
            logger.warning("Skipping malformed asset at position %d: %s", index, _first_error(exc))

    return collection


def parse_document(raw: Any) -> Document:
    """Convert a rich-text field into a `Document`; anything unusable becomes empty."""
    if not isinstance(raw, Mapping):
        return Document()
    return Document(nodes=_parse_nodes(raw.get("content")))


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO 8601 date or datetime; naive values are treated as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Ignoring unparseable date value %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_entry(record: EntryRecord) -> Entry:
    fields = record.fields
    return Entry(
        identifier=record.sys.id,
        title=fields.title,
        slug_field=fields.slug,
        published_at=parse_date(fields.date),
        link=fields.link,
        hero_asset_id=_link_id(fields.image),
        body=parse_document(fields.body),
    )


def _parse_nodes(raw_nodes: Any) -> tuple[Node, ...]:
    return tuple(_parse_node(raw) for raw in _as_list(raw_nodes) if isinstance(raw, Mapping))


def _parse_node(raw: Mapping[str, Any]) -> Node:
    node_type = str(raw.get("nodeType") or "")
    data = raw.get("data") if isinstance(raw.get("data"), Mapping) else {}

    try:
        kind = NodeKind(node_type)
    except ValueError:
        return UnknownNode(kind=node_type, children=_parse_nodes(raw.get("content")))

    if kind is NodeKind.TEXT:
        return TextNode(value=str(raw.get("value") or ""), marks=_parse_marks(raw.get("marks")))
    if kind in BLOCK_KINDS:
        return BlockNode(kind=kind, children=_parse_nodes(raw.get("content")))
    if kind in HEADING_KINDS:
        return HeadingNode(level=HEADING_KINDS[kind], children=_parse_nodes(raw.get("content")))
    if kind is NodeKind.HORIZONTAL_RULE:
        return HorizontalRuleNode()
    if kind is NodeKind.HYPERLINK:
        uri = data.get("uri")
        return HyperlinkNode(
            uri=str(uri) if uri else None,
            children=_parse_nodes(raw.get("content")),
        )
    # Remaining kinds are the embedded asset variants.
    return EmbeddedMediaNode(
        asset_id=_target_id(data),
        inline=kind is NodeKind.EMBEDDED_ASSET_INLINE,
    )


def _parse_marks(raw_marks: Any) -> tuple[Mark, ...]:
    marks: list[Mark] = []
    for raw in _as_list(raw_marks):
        mark_type = raw.get("type") if isinstance(raw, Mapping) else None
        try:
            marks.append(Mark(mark_type))
        except ValueError:
            logger.debug("Dropping unsupported text mark %r", mark_type)
    return tuple(marks)


def _target_id(data: Mapping[str, Any]) -> str | None:
    return _link_id(data.get("target"))


def _link_id(link: Any) -> str | None:
    sys = link.get("sys") if isinstance(link, Mapping) else None
    identifier = sys.get("id") if isinstance(sys, Mapping) else None
    return str(identifier) if identifier else None


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}"
