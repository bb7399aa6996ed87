"""End-to-end build: fetch, index, render, and write every artifact once."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from .articles import write_article_pages
from .assets import build_asset_index
from .config import Config
from .content.parsers import parse_collection
from .feeds import generate_feeds
from .fetch import ContentFetcher, FetchResult
from .listing import write_listing_page
from .richtext import RichTextRenderer
from .templates import ListingTemplate, SiteChrome

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    """Summary of the artifacts written by one build."""

    environment: str | None
    entry_count: int
    asset_count: int
    listing_path: Path
    article_paths: list[Path] = field(default_factory=list)
    feed_paths: list[Path] = field(default_factory=list)

    @property
    def written_paths(self) -> list[Path]:
        return [self.listing_path, *self.article_paths, *self.feed_paths]


def run_build(
    config: Config,
    payload: Mapping[str, Any] | None = None,
    *,
    fetcher: ContentFetcher | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """Run the whole pipeline.

    When ``payload`` is given the network is not touched; otherwise entries are
    fetched with ``fetcher`` (or a fetcher built from ``config.source``).
    """
    environment: str | None = None
    if payload is None:
        fetched = _fetch(config, fetcher)
        payload = fetched.payload
        environment = fetched.environment

    # The template is read before anything is written so a bad path fails early.
    template = ListingTemplate.load(config.listing_template_path)

    collection = parse_collection(payload)
    assets = build_asset_index(collection.assets)
    entries = collection.entries
    logger.debug("Parsed %d entries and %d assets", len(entries), len(assets))

    renderer = RichTextRenderer(assets)
    chrome = SiteChrome.from_template(template)

    listing_path = write_listing_page(template, entries, config, assets, renderer)
    article_paths = write_article_pages(entries, config, assets, chrome, renderer)
    feed_paths = generate_feeds(config, entries, now=now)

    logger.info("News build complete. Items: %d", len(entries))
    return BuildResult(
        environment=environment,
        entry_count=len(entries),
        asset_count=len(assets),
        listing_path=listing_path,
        article_paths=article_paths,
        feed_paths=feed_paths,
    )


def _fetch(config: Config, fetcher: ContentFetcher | None) -> FetchResult:
    config.source.require_credentials()
    if fetcher is not None:
        return fetcher.fetch()
    with ContentFetcher(config.source) as owned:
        return owned.fetch()
