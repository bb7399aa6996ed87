"""HTML snippets shared by listing cards and article pages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from .assets import AssetIndex
from .content.models import Entry
from .richtext import escape_html


@dataclass(frozen=True, slots=True)
class HeroImage:
    """Hero media resolved for one entry."""

    src: str
    alt: str
    width: int | None = None
    height: int | None = None

    @classmethod
    def for_entry(cls, entry: Entry, assets: AssetIndex) -> "HeroImage | None":
        if not entry.hero_asset_id:
            return None
        asset = assets.get(entry.hero_asset_id)
        if asset is None:
            return None
        return cls(
            src=asset.url,
            alt=entry.title or asset.title,
            width=asset.width,
            height=asset.height,
        )


def render_news_image(image: HeroImage | None, index: int = 1) -> str:
    """Render a hero ``<img>``; only ``index == 0`` loads eagerly with high priority."""
    if image is None or not image.src:
        return ""
    first = index == 0
    attrs = [
        f'src="{escape_html(image.src)}"',
        f'alt="{escape_html(image.alt)}"',
        'class="news-image"',
        f'loading="{"eager" if first else "lazy"}"',
        'decoding="async"',
        f'fetchpriority="{"high" if first else "low"}"',
    ]
    if image.width and image.height:
        attrs.extend([f'width="{image.width}"', f'height="{image.height}"'])
    return f"<img {' '.join(attrs)}>"


def render_external_link(url: str | None, label: str, *, css_class: str | None = None) -> str:
    """Render an outbound link that opens in a new tab without opener access."""
    if not url:
        return ""
    class_attr = f' class="{css_class}"' if css_class else ""
    return f'<a{class_attr} href="{escape_html(url)}" target="_blank" rel="noopener">{label}</a>'


def format_date(value: datetime | None) -> str:
    """Return the UTC calendar date as ``YYYY-MM-DD`` or an empty string."""
    if value is None:
        return ""
    return value.astimezone(timezone.utc).date().isoformat()


def format_timestamp(value: datetime | None) -> str:
    """Return a UTC ISO 8601 timestamp with millisecond precision, or an empty string."""
    if value is None:
        return ""
    normalized = value.astimezone(timezone.utc)
    return normalized.isoformat(timespec="milliseconds").replace("+00:00", "Z")
