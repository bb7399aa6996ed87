"""Sitemap and RSS generation for the news section."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime as format_rfc2822
from pathlib import Path
from typing import Sequence

from .config import Config
from .content.models import Entry
from .richtext import escape_html, to_plain_text

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"


@dataclass(slots=True)
class FeedEntry:
    """Normalized RSS item derived from a delivered entry."""

    identifier: str
    title: str
    url: str
    published: datetime | None
    description: str


def generate_feeds(
    config: Config,
    entries: Sequence[Entry],
    *,
    now: datetime | None = None,
) -> list[Path]:
    """Write the sitemap and RSS feed into ``config.output_dir``."""
    settings = config.feeds
    if not settings.enabled:
        return []

    build_time = _normalize(now or datetime.now(timezone.utc))
    output_dir = config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    urls = collect_sitemap_urls(config, entries)
    sitemap_path = output_dir / settings.sitemap_filename
    sitemap_path.write_text(render_sitemap(urls, build_time), encoding="utf-8")
    logger.info("Wrote %s with %d URLs", sitemap_path.name, len(urls))

    rss_path = output_dir / settings.rss_filename
    rss_path.write_text(
        render_rss(config, collect_entries(config, entries), build_time),
        encoding="utf-8",
    )
    logger.info("Wrote %s", rss_path.name)

    return [sitemap_path, rss_path]


def collect_sitemap_urls(config: Config, entries: Sequence[Entry]) -> list[str]:
    """Listing page URL followed by one article URL per entry, in source order."""
    site = config.site
    return [site.listing_url, *(site.article_url(entry.slug) for entry in entries)]


def collect_entries(config: Config, entries: Sequence[Entry]) -> list[FeedEntry]:
    """Convert entries to feed items, preserving source order."""
    length = config.feeds.description_length
    return [
        FeedEntry(
            identifier=entry.identifier,
            title=entry.display_title,
            url=config.site.article_url(entry.slug),
            published=entry.published_at,
            description=to_plain_text(entry.body, length),
        )
        for entry in entries
    ]


def render_sitemap(urls: Sequence[str], build_time: datetime) -> str:
    lastmod = build_time.date().isoformat()
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]
    for url in urls:
        parts.append(f"<url><loc>{escape_html(url)}</loc><lastmod>{lastmod}</lastmod></url>")
    parts.append("</urlset>")
    return "\n".join(parts) + "\n"


def render_rss(config: Config, entries: Sequence[FeedEntry], build_time: datetime) -> str:
    site = config.site
    settings = config.feeds
    feed_url = f"{site.base_url}{settings.rss_path}"
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<rss version="2.0" xmlns:atom="{ATOM_NAMESPACE}">',
        "  <channel>",
        f"    <title>{escape_html(settings.title)}</title>",
        f"    <link>{escape_html(site.listing_url)}</link>",
        f"    <description>{escape_html(settings.description)}</description>",
        f"    <language>{escape_html(site.language)}</language>",
        f'    <atom:link href="{escape_html(feed_url)}" rel="self" type="application/rss+xml"/>',
    ]

    for entry in entries:
        published = entry.published or build_time
        parts.extend(
            [
                "    <item>",
                f"      <title>{escape_html(entry.title)}</title>",
                f"      <link>{escape_html(entry.url)}</link>",
                f'      <guid isPermaLink="false">{escape_html(entry.identifier)}</guid>',
                f"      <pubDate>{_format_rfc2822(published)}</pubDate>",
                f"      <description>{_cdata(entry.description)}</description>",
                "    </item>",
            ]
        )

    parts.extend(["  </channel>", "</rss>"])
    return "\n".join(parts) + "\n"


def _cdata(text: str) -> str:
    return f"<![CDATA[{text}]]>"


def _format_rfc2822(value: datetime) -> str:
    return format_rfc2822(_normalize(value), usegmt=True)


def _normalize(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
