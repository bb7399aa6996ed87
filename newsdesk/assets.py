"""Build the identifier -> asset lookup consumed by the renderers."""

from __future__ import annotations

from typing import Iterable, Mapping

from .content.models import Asset
from .content.parsers import AssetRecord

AssetIndex = Mapping[str, Asset]


def build_asset_index(records: Iterable[AssetRecord]) -> dict[str, Asset]:
    """Index included assets by identifier.

    Partially populated records degrade to empty strings and ``None`` dimensions.
    """
    index: dict[str, Asset] = {}
    for record in records:
        fields = record.fields
        file = fields.file
        details = file.details if file else None
        image = details.image if details else None

        width = image.width if image else None
        height = image.height if image else None
        if width is None or height is None:
            width = height = None

        index[record.sys.id] = Asset(
            identifier=record.sys.id,
            url=normalize_asset_url(file.url if file else None),
            title=fields.title or "",
            description=fields.description or "",
            width=width,
            height=height,
        )
    return index


def normalize_asset_url(url: str | None) -> str:
    """Give schema-relative asset URLs an explicit https scheme."""
    if not url:
        return ""
    text = url.strip()
    if text.startswith("//"):
        return f"https:{text}"
    return text
