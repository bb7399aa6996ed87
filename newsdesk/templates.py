"""Listing template access: marker regions, landmark extraction, and head links."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import TemplateError, TemplateMarkerError
from .richtext import escape_html

logger = logging.getLogger(__name__)

_FEED_LINK_RE = re.compile(r'rel="alternate"\s+type="application/rss\+xml"', re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head>", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ListingTemplate:
    """Immutable wrapper around the listing page markup."""

    text: str
    path: Path | None = None

    @classmethod
    def load(cls, path: Path) -> "ListingTemplate":
        try:
            return cls(text=path.read_text(encoding="utf-8"), path=path)
        except FileNotFoundError as exc:
            raise TemplateError(f"Listing template not found: {path}") from exc
        except OSError as exc:
            raise TemplateError(f"Unable to read listing template {path}: {exc}") from exc

    def replace_region(self, start_marker: str, end_marker: str, content: str) -> "ListingTemplate":
        """Replace everything between the two markers, keeping the markers themselves.

        Raises:
            TemplateMarkerError: If either marker is missing or out of order.
        """
        start = self.text.find(start_marker)
        if start == -1:
            raise TemplateMarkerError(start_marker, end_marker)
        body_start = start + len(start_marker)
        end = self.text.find(end_marker, body_start)
        if end == -1:
            raise TemplateMarkerError(start_marker, end_marker)
        updated = f"{self.text[:body_start]}\n{content}\n{self.text[end:]}"
        return ListingTemplate(text=updated, path=self.path)

    def landmark(self, tag: str) -> str:
        """Return the first ``<tag>...</tag>`` region, or an empty string."""
        pattern = re.compile(rf"<{tag}\b[\s\S]*?</{tag}>", re.IGNORECASE)
        match = pattern.search(self.text)
        if match is None:
            logger.warning("Listing template has no <%s> landmark.", tag)
            return ""
        return match.group(0)

    def ensure_feed_link(self, title: str, href: str) -> "ListingTemplate":
        """Add an RSS alternate link before ``</head>`` unless one is present."""
        if _FEED_LINK_RE.search(self.text):
            return self
        link = (
            f'  <link rel="alternate" type="application/rss+xml" '
            f'title="{escape_html(title)}" href="{escape_html(href)}">\n'
        )
        updated, count = _HEAD_CLOSE_RE.subn(lambda match: f"{link}{match.group(0)}", self.text, count=1)
        if count == 0:
            logger.warning("Listing template has no </head>; RSS link not added.")
            return self
        return ListingTemplate(text=updated, path=self.path)

    def write(self, path: Path | None = None) -> Path:
        target = path or self.path
        if target is None:
            raise TemplateError("No destination given for the listing template.")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.text, encoding="utf-8")
        return target


@dataclass(frozen=True, slots=True)
class SiteChrome:
    """Header and footer markup reused on every article page."""

    header: str = ""
    footer: str = ""

    @classmethod
    def from_template(cls, template: ListingTemplate) -> "SiteChrome":
        chrome = cls(header=template.landmark("header"), footer=template.landmark("footer"))
        logger.info(
            "Header found? %s Footer found? %s",
            bool(chrome.header),
            bool(chrome.footer),
        )
        return chrome
