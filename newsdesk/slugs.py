"""URL slug helpers shared by listing cards, article pages, and feeds."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content.models import Entry

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """Lowercase ``text`` and join its ASCII alphanumeric runs with single hyphens."""
    if not text:
        return ""
    lowered = str(text).strip().lower()
    return _NON_ALNUM_RE.sub("-", lowered).strip("-")


def entry_slug(entry: "Entry") -> str:
    """Slug for an entry: explicit slug, else title, else the raw identifier.

    A slug field or title made only of punctuation yields no slug, so the next
    candidate is used.
    """
    return slugify(entry.slug_field) or slugify(entry.title) or slugify(entry.identifier)
