"""Render news cards and splice them into the listing template."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .assets import AssetIndex
from .config import Config
from .content.models import Entry
from .fragments import HeroImage, format_date, render_external_link, render_news_image
from .richtext import RichTextRenderer, escape_html, split_lead
from .templates import ListingTemplate

logger = logging.getLogger(__name__)


class ListingCardRenderer:
    """Produce the ``<article class="news-item">`` card for each entry."""

    def __init__(self, config: Config, assets: AssetIndex, renderer: RichTextRenderer) -> None:
        self._config = config
        self._assets = assets
        self._renderer = renderer

    def render(self, entry: Entry, index: int) -> str:
        hero = HeroImage.for_entry(entry, self._assets)
        lead, rest = split_lead(entry.body, self._config.listing.lead_paragraphs)
        lead_html = self._renderer.render(lead)
        rest_html = self._renderer.render(rest)
        href = escape_html(self._config.site.article_path(entry.slug))

        lines = [
            '<article class="news-item">',
            f'  <a href="{href}"><h2 class="news-title">{escape_html(entry.display_title)}</h2></a>',
            f'  <p class="news-date">{format_date(entry.published_at)}</p>',
        ]
        image_html = render_news_image(hero, index)
        if image_html:
            lines.append(f"  {image_html}")
        if lead_html:
            lines.append(f'  <div class="news-excerpt">{lead_html}</div>')
        if rest:
            lines.extend(
                [
                    '  <details class="news-collapsible">',
                    '    <summary class="news-summary">Read more</summary>',
                    f'    <div class="news-body">{rest_html}</div>',
                    "  </details>",
                ]
            )
        source_link = render_external_link(entry.link, "External source")
        if source_link:
            lines.append(f'  <p class="news-source">{source_link}</p>')
        lines.append("</article>")
        return "\n".join(lines)

    def render_all(self, entries: Sequence[Entry]) -> str:
        return "\n".join(self.render(entry, index) for index, entry in enumerate(entries))


def inject_listing(
    template: ListingTemplate,
    entries: Sequence[Entry],
    config: Config,
    assets: AssetIndex,
    renderer: RichTextRenderer,
) -> ListingTemplate:
    """Return ``template`` with the cards spliced between the listing markers."""
    cards = ListingCardRenderer(config, assets, renderer).render_all(entries)
    listing = config.listing
    updated = template.replace_region(listing.start_marker, listing.end_marker, cards)
    return updated.ensure_feed_link(config.feeds.title, config.feeds.rss_path)


def write_listing_page(
    template: ListingTemplate,
    entries: Sequence[Entry],
    config: Config,
    assets: AssetIndex,
    renderer: RichTextRenderer,
) -> Path:
    """Inject the cards and rewrite the listing template in place."""
    page = inject_listing(template, entries, config, assets, renderer)
    destination = page.write(config.listing_template_path)
    logger.info("Injected %d cards into %s", len(entries), destination.name)
    return destination
