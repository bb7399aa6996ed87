"""Content models and payload parsing for delivered entries."""

from .models import (
    Asset,
    BlockNode,
    Document,
    EmbeddedMediaNode,
    Entry,
    HeadingNode,
    HorizontalRuleNode,
    HyperlinkNode,
    Mark,
    Node,
    NodeKind,
    TextNode,
    UnknownNode,
)
from .parsers import AssetRecord, ContentCollection, parse_collection, parse_document

__all__ = [
    "Asset",
    "AssetRecord",
    "BlockNode",
    "ContentCollection",
    "Document",
    "EmbeddedMediaNode",
    "Entry",
    "HeadingNode",
    "HorizontalRuleNode",
    "HyperlinkNode",
    "Mark",
    "Node",
    "NodeKind",
    "TextNode",
    "UnknownNode",
    "parse_collection",
    "parse_document",
]
