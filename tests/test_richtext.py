from __future__ import annotations

from newsdesk.content import (
    Asset,
    BlockNode,
    Document,
    EmbeddedMediaNode,
    HeadingNode,
    HorizontalRuleNode,
    HyperlinkNode,
    Mark,
    NodeKind,
    TextNode,
    UnknownNode,
)
from newsdesk.richtext import RichTextRenderer, escape_html, split_lead, to_plain_text


def _paragraph(*values: str) -> BlockNode:
    return BlockNode(kind=NodeKind.PARAGRAPH, children=tuple(TextNode(value) for value in values))


def _assets() -> dict[str, Asset]:
    return {
        "img-1": Asset(
            identifier="img-1",
            url="https://images.example.com/one.jpg",
            title="Team \"photo\"",
            description="Everyone",
            width=800,
            height=600,
        ),
        "img-2": Asset(
            identifier="img-2",
            url="https://images.example.com/two.jpg",
            description="Only a description",
        ),
        "no-url": Asset(identifier="no-url", title="Broken"),
    }


def test_escape_html_covers_five_characters() -> None:
    assert escape_html("""<a href="x">Tom & 'Jerry'</a>""") == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#x27;Jerry&#x27;&lt;/a&gt;"
    )
    assert escape_html(None) == ""


def test_render_applies_marks_in_declared_order() -> None:
    renderer = RichTextRenderer()
    document = Document(
        nodes=(
            TextNode("a<b", marks=(Mark.BOLD, Mark.ITALIC, Mark.UNDERLINE, Mark.CODE)),
            TextNode("x", marks=(Mark.CODE, Mark.BOLD)),
        )
    )

    html = renderer.render(document)

    assert html == (
        "<code><u><em><strong>a&lt;b</strong></em></u></code>"
        "<strong><code>x</code></strong>"
    )


def test_render_block_containers_and_headings() -> None:
    renderer = RichTextRenderer()
    document = Document(
        nodes=(
            HeadingNode(level=3, children=(TextNode("Title"),)),
            BlockNode(
                kind=NodeKind.UNORDERED_LIST,
                children=(BlockNode(kind=NodeKind.LIST_ITEM, children=(_paragraph("one"),)),),
            ),
            BlockNode(
                kind=NodeKind.ORDERED_LIST,
                children=(BlockNode(kind=NodeKind.LIST_ITEM, children=(_paragraph("two"),)),),
            ),
            BlockNode(kind=NodeKind.BLOCKQUOTE, children=(_paragraph("quoted"),)),
            HorizontalRuleNode(),
            BlockNode(kind=NodeKind.PARAGRAPH),
        )
    )

    html = renderer.render(document)

    assert html == (
        "<h3>Title</h3>"
        "<ul><li><p>one</p></li></ul>"
        "<ol><li><p>two</p></li></ol>"
        "<blockquote><p>quoted</p></blockquote>"
        "<hr/>"
        "<p></p>"
    )


def test_render_empty_document_is_empty_string() -> None:
    assert RichTextRenderer().render(Document()) == ""


def test_hyperlink_escapes_destination_and_defaults_to_placeholder() -> None:
    renderer = RichTextRenderer()
    document = Document(
        nodes=(
            HyperlinkNode(uri='https://example.com/?q="x"&y=1', children=(TextNode("go"),)),
            HyperlinkNode(uri=None, children=(TextNode("nowhere"),)),
        )
    )

    html = renderer.render(document)

    assert (
        '<a href="https://example.com/?q=&quot;x&quot;&amp;y=1" target="_blank" rel="noopener">go</a>'
        in html
    )
    assert '<a href="#" target="_blank" rel="noopener">nowhere</a>' in html


def test_embedded_media_renders_figure_with_dimensions() -> None:
    renderer = RichTextRenderer(_assets())

    html = renderer.render(Document(nodes=(EmbeddedMediaNode(asset_id="img-1"),)))

    assert html == (
        '<figure><img src="https://images.example.com/one.jpg" alt="Team &quot;photo&quot;" '
        'class="news-image" loading="lazy" decoding="async" width="800" height="600"></figure>'
    )


def test_embedded_media_alt_falls_back_to_description_and_omits_unknown_dimensions() -> None:
    renderer = RichTextRenderer(_assets())

    html = renderer.render(Document(nodes=(EmbeddedMediaNode(asset_id="img-2"),)))

    assert 'alt="Only a description"' in html
    assert "width=" not in html and "height=" not in html


def test_dangling_or_unresolvable_media_renders_nothing() -> None:
    renderer = RichTextRenderer(_assets())
    document = Document(
        nodes=(
            EmbeddedMediaNode(asset_id="missing"),
            EmbeddedMediaNode(asset_id=None),
            EmbeddedMediaNode(asset_id="no-url", inline=True),
        )
    )

    assert renderer.render(document) == ""


def test_unknown_nodes_render_their_children() -> None:
    renderer = RichTextRenderer()
    document = Document(
        nodes=(
            UnknownNode(kind="table", children=(UnknownNode(kind="table-row", children=(TextNode("cell"),)),)),
            UnknownNode(kind="embedded-entry-block"),
        )
    )

    assert renderer.render(document) == "cell"


def test_split_lead_takes_first_paragraphs_only() -> None:
    heading = HeadingNode(level=2, children=(TextNode("Intro"),))
    first = _paragraph("first")
    rule = HorizontalRuleNode()
    second = _paragraph("second")
    third = _paragraph("third")
    document = Document(nodes=(heading, first, rule, second, third))

    lead, rest = split_lead(document, 2)

    assert lead.nodes == (first, second)
    assert rest.nodes == (heading, rule, third)


def test_split_lead_halves_reconstruct_original_order() -> None:
    nodes = (
        HorizontalRuleNode(),
        _paragraph("a"),
        HeadingNode(level=1, children=()),
        _paragraph("b"),
        _paragraph("c"),
    )
    document = Document(nodes=nodes)

    for count in range(0, 5):
        lead, rest = split_lead(document, count)
        lead_iter, rest_iter = iter(lead.nodes), iter(rest.nodes)
        rebuilt = [next(lead_iter) if node in lead.nodes else next(rest_iter) for node in nodes]
        assert tuple(rebuilt) == nodes
        assert len(lead) + len(rest) == len(nodes)


def test_split_lead_of_empty_document() -> None:
    lead, rest = split_lead(Document(), 1)
    assert not lead and not rest


def test_to_plain_text_truncates_before_escaping() -> None:
    document = Document(nodes=(_paragraph("Hello ", "<world>"),))

    assert to_plain_text(document, 8) == "Hello &lt;w"


def test_to_plain_text_ignores_leading_whitespace_when_stopping_early() -> None:
    document = Document(nodes=(_paragraph("  Hello ", "<world>"),))

    assert to_plain_text(document, 8) == "Hello &lt;w"
    assert to_plain_text(Document(nodes=(_paragraph("   ", "  abc"),)), 2) == "ab"


def test_to_plain_text_drops_trailing_whitespace_of_the_cut() -> None:
    assert to_plain_text(Document(nodes=(_paragraph("abc def"),)), 4) == "abc"


def test_to_plain_text_walks_nested_nodes_depth_first() -> None:
    document = Document(
        nodes=(
            HeadingNode(level=1, children=(TextNode("Head. "),)),
            BlockNode(
                kind=NodeKind.UNORDERED_LIST,
                children=(
                    BlockNode(
                        kind=NodeKind.LIST_ITEM,
                        children=(
                            BlockNode(
                                kind=NodeKind.PARAGRAPH,
                                children=(
                                    TextNode("Item "),
                                    HyperlinkNode(uri="https://x", children=(TextNode("link"),)),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        )
    )

    assert to_plain_text(document, 155) == "Head. Item link"
    assert to_plain_text(document, 4) == "Head"


def test_to_plain_text_empty_document() -> None:
    assert to_plain_text(Document(), 10) == ""


def test_embedded_media_source_is_escaped() -> None:
    assets = {"q": Asset(identifier="q", url='https://img.example.com/a.jpg?w=1&h="2"', title="Q")}

    html = RichTextRenderer(assets).render(Document(nodes=(EmbeddedMediaNode(asset_id="q"),)))

    assert 'src="https://img.example.com/a.jpg?w=1&amp;h=&quot;2&quot;"' in html
