"""Render rich-text documents into HTML fragments and plain-text snippets."""

from __future__ import annotations

import html
import logging
from typing import Iterable

from .assets import AssetIndex
from .content.models import (
    BlockNode,
    Document,
    EmbeddedMediaNode,
    HeadingNode,
    HorizontalRuleNode,
    HyperlinkNode,
    Mark,
    Node,
    NodeKind,
    TextNode,
    UnknownNode,
    node_children,
)

logger = logging.getLogger(__name__)

BLOCK_TAGS = {
    NodeKind.PARAGRAPH: "p",
    NodeKind.UNORDERED_LIST: "ul",
    NodeKind.ORDERED_LIST: "ol",
    NodeKind.LIST_ITEM: "li",
    NodeKind.BLOCKQUOTE: "blockquote",
}

MARK_TAGS = {
    Mark.BOLD: "strong",
    Mark.ITALIC: "em",
    Mark.UNDERLINE: "u",
    Mark.CODE: "code",
}


def escape_html(text: str | None) -> str:
    """Escape the five HTML-significant characters."""
    if not text:
        return ""
    return html.escape(text, quote=True)


class RichTextRenderer:
    """Transform document trees into HTML, resolving embedded media from an asset index."""

    def __init__(self, assets: AssetIndex | None = None) -> None:
        self._assets: AssetIndex = assets or {}

    def render(self, document: Document) -> str:
        """Render every top-level node of ``document`` and concatenate the results."""
        return self._render_nodes(document.nodes)

    def _render_nodes(self, nodes: Iterable[Node]) -> str:
        return "".join(self._render_node(node) for node in nodes)

    def _render_node(self, node: Node) -> str:
        if isinstance(node, TextNode):
            return self._render_text(node)
        if isinstance(node, BlockNode):
            tag = BLOCK_TAGS[node.kind]
            return f"<{tag}>{self._render_nodes(node.children)}</{tag}>"
        if isinstance(node, HeadingNode):
            return f"<h{node.level}>{self._render_nodes(node.children)}</h{node.level}>"
        if isinstance(node, HorizontalRuleNode):
            return "<hr/>"
        if isinstance(node, HyperlinkNode):
            href = escape_html(node.uri) if node.uri else "#"
            return (
                f'<a href="{href}" target="_blank" rel="noopener">'
                f"{self._render_nodes(node.children)}</a>"
            )
        if isinstance(node, EmbeddedMediaNode):
            return self._render_media(node)
        if isinstance(node, UnknownNode):
            logger.debug("Rendering children of unsupported node type '%s'", node.kind)
            return self._render_nodes(node.children)
        raise TypeError(f"Unsupported node object: {node!r}")

    def _render_text(self, node: TextNode) -> str:
        out = escape_html(node.value)
        for mark in node.marks:
            tag = MARK_TAGS[mark]
            out = f"<{tag}>{out}</{tag}>"
        return out

    def _render_media(self, node: EmbeddedMediaNode) -> str:
        asset = self._assets.get(node.asset_id) if node.asset_id else None
        if asset is None or not asset.url:
            logger.debug("Embedded media '%s' is not resolvable; skipping.", node.asset_id)
            return ""
        alt = escape_html(asset.title or asset.description or "")
        dimensions = ""
        if asset.has_dimensions:
            dimensions = f' width="{asset.width}" height="{asset.height}"'
        return (
            f'<figure><img src="{escape_html(asset.url)}" alt="{alt}" class="news-image" '
            f'loading="lazy" decoding="async"{dimensions}></figure>'
        )


def split_lead(document: Document, count: int = 1) -> tuple[Document, Document]:
    """Split ``document`` into its first ``count`` paragraphs and everything else.

    Non-paragraph nodes always go to the remainder; both halves keep the
    original relative order.
    """
    lead: list[Node] = []
    rest: list[Node] = []
    for node in document.nodes:
        if len(lead) < count and isinstance(node, BlockNode) and node.kind is NodeKind.PARAGRAPH:
            lead.append(node)
            continue
        rest.append(node)
    return Document(nodes=tuple(lead)), Document(nodes=tuple(rest))


def to_plain_text(document: Document, max_length: int = 155) -> str:
    """Concatenate text values depth-first, truncate to ``max_length``, then escape.

    Leading whitespace is dropped before truncating, so it never counts toward
    the length at which the walk stops.
    """
    parts: list[str] = []
    collected = 0

    def walk(nodes: Iterable[Node]) -> None:
        nonlocal collected
        for node in nodes:
            if collected >= max_length:
                return
            if isinstance(node, TextNode):
                value = node.value if parts else node.value.lstrip()
                if value:
                    parts.append(value)
                    collected += len(value)
            walk(node_children(node))

    walk(document.nodes)
    return escape_html("".join(parts)[:max_length].rstrip())
