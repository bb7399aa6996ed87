from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from newsdesk.assets import build_asset_index
from newsdesk.config import Config
from newsdesk.content import parse_collection
from newsdesk.errors import TemplateMarkerError
from newsdesk.listing import ListingCardRenderer, inject_listing, write_listing_page
from newsdesk.richtext import RichTextRenderer
from newsdesk.templates import ListingTemplate

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _setup(tmp_path: Path):
    shutil.copy(FIXTURES / "NEWS.html", tmp_path / "NEWS.html")
    config = Config(output_dir=tmp_path)
    collection = parse_collection(json.loads((FIXTURES / "payload.json").read_text(encoding="utf-8")))
    assets = build_asset_index(collection.assets)
    return config, collection.entries, assets, RichTextRenderer(assets)


def test_first_card_loads_hero_eagerly(tmp_path: Path) -> None:
    config, entries, assets, renderer = _setup(tmp_path)
    cards = ListingCardRenderer(config, assets, renderer)

    first = cards.render(entries[0], 0)
    later = cards.render(entries[0], 1)

    assert 'loading="eager"' in first and 'fetchpriority="high"' in first
    assert 'loading="lazy"' in later and 'fetchpriority="low"' in later
    assert 'alt="Launch Day!"' in first
    assert 'width="1600" height="900"' in first


def test_card_contents(tmp_path: Path) -> None:
    config, entries, assets, renderer = _setup(tmp_path)
    card = ListingCardRenderer(config, assets, renderer).render(entries[0], 0)

    assert '<a href="/news/launch-day/"><h2 class="news-title">Launch Day!</h2></a>' in card
    assert '<p class="news-date">2024-06-15</p>' in card
    assert '<div class="news-excerpt"><p>We are <strong>live</strong> today.</p></div>' in card
    assert '<details class="news-collapsible">' in card
    assert "<h2>Details</h2>" in card
    assert 'alt="Inline diagram"' in card
    assert (
        '<p class="news-source"><a href="https://example.com/press?a=1&amp;b=2" '
        'target="_blank" rel="noopener">External source</a></p>'
    ) in card


def test_card_without_remainder_or_hero(tmp_path: Path) -> None:
    config, entries, assets, renderer = _setup(tmp_path)
    cards = ListingCardRenderer(config, assets, renderer)

    patch = cards.render(entries[1], 1)
    undated = cards.render(entries[2], 2)

    assert "<details" not in patch
    assert "<img" not in patch
    assert "Bug fixes &lt;and&gt; polish." in patch
    assert "news-source" not in patch
    assert '<p class="news-date"></p>' in undated
    assert "news-excerpt" not in undated


def test_write_listing_page_rewrites_template_in_place(tmp_path: Path) -> None:
    config, entries, assets, renderer = _setup(tmp_path)
    template = ListingTemplate.load(config.listing_template_path)

    path = write_listing_page(template, entries, config, assets, renderer)

    page = path.read_text(encoding="utf-8")
    assert path == tmp_path / "NEWS.html"
    assert page.count('<article class="news-item">') == 3
    assert page.index("launch-day") < page.index("patch-1-1") < page.index("hello-world")
    assert "Placeholder card" not in page
    assert 'type="application/rss+xml"' in page


def test_inject_listing_requires_markers(tmp_path: Path) -> None:
    config, entries, assets, renderer = _setup(tmp_path)

    with pytest.raises(TemplateMarkerError):
        inject_listing(ListingTemplate(text="<html></html>"), entries, config, assets, renderer)
