"""Typed representations of delivered entries, assets, and rich-text documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from ..slugs import entry_slug


class NodeKind(str, Enum):
    """Rich-text node types recognized by the renderer, keyed by wire name."""

    TEXT = "text"
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    UNORDERED_LIST = "unordered-list"
    ORDERED_LIST = "ordered-list"
    LIST_ITEM = "list-item"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "hr"
    HYPERLINK = "hyperlink"
    EMBEDDED_ASSET_BLOCK = "embedded-asset-block"
    EMBEDDED_ASSET_INLINE = "embedded-asset-inline"


BLOCK_KINDS = frozenset(
    {
        NodeKind.PARAGRAPH,
        NodeKind.UNORDERED_LIST,
        NodeKind.ORDERED_LIST,
        NodeKind.LIST_ITEM,
        NodeKind.BLOCKQUOTE,
    }
)

HEADING_KINDS = {
    NodeKind.HEADING_1: 1,
    NodeKind.HEADING_2: 2,
    NodeKind.HEADING_3: 3,
    NodeKind.HEADING_4: 4,
    NodeKind.HEADING_5: 5,
    NodeKind.HEADING_6: 6,
}


class Mark(str, Enum):
    """Inline text styles."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"


@dataclass(frozen=True, slots=True)
class TextNode:
    value: str
    marks: tuple[Mark, ...] = ()


@dataclass(frozen=True, slots=True)
class BlockNode:
    """Paragraph, list, list item, or blockquote container."""

    kind: NodeKind
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class HeadingNode:
    level: int
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"heading level must be between 1 and 6, got {self.level}")


@dataclass(frozen=True, slots=True)
class HorizontalRuleNode:
    pass


@dataclass(frozen=True, slots=True)
class HyperlinkNode:
    uri: str | None
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class EmbeddedMediaNode:
    asset_id: str | None
    inline: bool = False


@dataclass(frozen=True, slots=True)
class UnknownNode:
    """Node type without a dedicated variant; only its children are rendered."""

    kind: str
    children: tuple[Node, ...] = ()


Node = Union[
    TextNode,
    BlockNode,
    HeadingNode,
    HorizontalRuleNode,
    HyperlinkNode,
    EmbeddedMediaNode,
    UnknownNode,
]


def node_children(node: Node) -> tuple[Node, ...]:
    """Return the child sequence of a container node, or an empty tuple for leaves."""
    if isinstance(node, (BlockNode, HeadingNode, HyperlinkNode, UnknownNode)):
        return node.children
    return ()


@dataclass(frozen=True, slots=True)
class Document:
    """Ordered top-level node sequence of a rich-text field."""

    nodes: tuple[Node, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True, slots=True)
class Asset:
    """Media object resolved from the payload's included assets."""

    identifier: str
    url: str = ""
    title: str = ""
    description: str = ""
    width: int | None = None
    height: int | None = None

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None and self.height is not None


@dataclass(frozen=True, slots=True)
class Entry:
    """Single news item as delivered for one build."""

    identifier: str
    title: str | None = None
    slug_field: str | None = None
    published_at: datetime | None = None
    link: str | None = None
    hero_asset_id: str | None = None
    body: Document = field(default_factory=Document)

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    @property
    def slug(self) -> str:
        return entry_slug(self)
