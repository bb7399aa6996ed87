"""Render and write article detail pages."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from .assets import AssetIndex
from .config import Config
from .content.models import Entry
from .fragments import (
    HeroImage,
    format_date,
    format_timestamp,
    render_external_link,
    render_news_image,
)
from .richtext import RichTextRenderer, escape_html, to_plain_text
from .templates import SiteChrome

logger = logging.getLogger(__name__)

ARTICLE_FILENAME = "index.html"


class ArticlePageRenderer:
    """Render a single entry into a standalone HTML document."""

    def __init__(self, config: Config, chrome: SiteChrome, renderer: RichTextRenderer) -> None:
        self._config = config
        self._chrome = chrome
        self._renderer = renderer

    def render(self, entry: Entry, hero: HeroImage | None) -> str:
        return self._render_head(entry, hero) + self._render_body(entry, hero)

    def build_linked_data(self, entry: Entry, hero: HeroImage | None) -> dict[str, Any]:
        """Schema.org ``NewsArticle`` metadata for the page."""
        organization = {"@type": "Organization", "name": self._config.site.organization}
        timestamp = format_timestamp(entry.published_at)
        data: dict[str, Any] = {
            "@context": "https://schema.org",
            "@type": "NewsArticle",
            "headline": entry.display_title,
        }
        if timestamp:
            data["datePublished"] = timestamp
            data["dateModified"] = timestamp
        data["image"] = [hero.src] if hero and hero.src else []
        data["author"] = organization
        data["publisher"] = dict(organization)
        return data

    def _render_head(self, entry: Entry, hero: HeroImage | None) -> str:
        site = self._config.site
        feeds = self._config.feeds
        canonical = site.article_url(entry.slug)
        description = to_plain_text(entry.body, feeds.meta_description_length)
        # "</" inside JSON-LD would close the script element early.
        linked_data = json.dumps(self.build_linked_data(entry, hero), ensure_ascii=False).replace(
            "</", "<\\/"
        )

        lines = [
            f'<!doctype html><html lang="{escape_html(site.language)}"><head>',
            '<meta charset="utf-8">',
            f"<title>{escape_html(entry.title or 'News')} — {escape_html(site.name)}</title>",
            f'<link rel="canonical" href="{escape_html(canonical)}">',
            f'<meta name="description" content="{description}">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            (
                f'<link rel="alternate" type="application/rss+xml" '
                f'title="{escape_html(feeds.title)}" href="{escape_html(feeds.rss_path)}">'
            ),
        ]
        lines.extend(
            f'<link rel="stylesheet" href="{escape_html(href)}">' for href in site.stylesheets
        )
        lines.append(f'<script type="application/ld+json">{linked_data}</script>')
        lines.append("</head><body>")
        return "\n".join(lines)

    def _render_body(self, entry: Entry, hero: HeroImage | None) -> str:
        lines = [
            "",
            self._chrome.header,
            '<main class="article">',
            f"  <h1>{escape_html(entry.display_title)}</h1>",
            f'  <p class="news-date">{format_date(entry.published_at)}</p>',
        ]
        image_html = render_news_image(hero, 0)
        if image_html:
            lines.append(f"  {image_html}")
        lines.append(f'  <article class="news-body">{self._renderer.render(entry.body)}</article>')
        source_link = render_external_link(entry.link, "Source", css_class="news-link")
        if source_link:
            lines.append(f"  <p>{source_link}</p>")
        lines.append("</main>")
        lines.append(self._chrome.footer)
        lines.extend(
            f'<script src="{escape_html(src)}"></script>' for src in self._config.site.scripts
        )
        lines.append("</body></html>")
        return "\n".join(lines)


class ArticlePageWriter:
    """Coordinate rendering and writing article pages to disk."""

    def __init__(
        self,
        config: Config,
        assets: AssetIndex,
        chrome: SiteChrome,
        renderer: RichTextRenderer,
    ) -> None:
        self._config = config
        self._assets = assets
        self._output_root = config.articles_dir
        self._page_renderer = ArticlePageRenderer(config, chrome, renderer)

    def write(self, entries: Iterable[Entry]) -> list[Path]:
        """Render every entry to ``<articles_dir>/<slug>/index.html``."""
        written_paths: list[Path] = []
        for entry in entries:
            slug = entry.slug
            if not slug:
                logger.warning("Entry '%s' has no usable slug; skipping article page.", entry.identifier)
                continue
            hero = HeroImage.for_entry(entry, self._assets)
            destination = self._output_root / slug / ARTICLE_FILENAME
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(self._page_renderer.render(entry, hero), encoding="utf-8")
            logger.info("Wrote article page: /%s/%s/%s", self._config.site.articles_path, slug, ARTICLE_FILENAME)
            written_paths.append(destination)
        return written_paths


def write_article_pages(
    entries: Iterable[Entry],
    config: Config,
    assets: AssetIndex,
    chrome: SiteChrome,
    renderer: RichTextRenderer,
) -> list[Path]:
    """
    Render entries into standalone article pages.

    Args:
        entries: Entries in source order.
        config: Build configuration with site identity and output directory.
        assets: Asset index used for hero and inline media.
        chrome: Header/footer fragments extracted from the listing template.
        renderer: Rich-text renderer bound to the same asset index.

    Returns:
        A list of paths to the written HTML files.
    """
    writer = ArticlePageWriter(config, assets, chrome, renderer)
    return writer.write(entries)
