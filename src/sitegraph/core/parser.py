"""Markdown parser with wiki link and callout support."""

import re
from xml.etree.ElementTree import Element

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor, SimpleTagInlineProcessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from sitegraph.core.links import WIKI_LINK_PATTERN, LinkIndex

# Pattern for strikethrough: ~~text~~
# Group 2 must contain the text (SimpleTagInlineProcessor expectation)
STRIKETHROUGH_PATTERN = r"(~~)(.*?)~~"

# Callout marker at the start of a blockquote: [!type] Optional Title
CALLOUT_PATTERN = re.compile(r"^\[!(\w+)\](?:[ \t]+([^\n]+))?[ \t]*\n?")
CALLOUT_TYPES = frozenset({"note", "tip", "warning", "danger", "quote", "example"})


class StrikethroughExtension(Extension):
    """Markdown extension for ~~strikethrough~~ text."""

    def extendMarkdown(self, md: Markdown) -> None:
        """Add strikethrough pattern to markdown parser."""
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_PATTERN, "del"),
            "strikethrough",
            50,
        )


class WikiLinkInlineProcessor(InlineProcessor):
    """Inline processor resolving wiki links against a link index."""

    def __init__(self, pattern: str, md: Markdown, link_index: LinkIndex):
        super().__init__(pattern, md)
        self.link_index = link_index

    def handleMatch(self, m: re.Match, data: str) -> tuple[Element | None, int, int]:
        """Convert a wiki link match to an anchor or a broken-link span."""
        target = m.group(1)
        label = m.group(2) or target
        canonical = self.link_index.resolve(target)

        if canonical is not None:
            el = Element("a")
            el.set("href", canonical)
            el.set("class", "wiki-link")
        else:
            el = Element("span")
            el.set("class", "wiki-link-broken")
            el.set("title", "Page not found")

        # Atomic so the label is never re-scanned by later inline patterns
        el.text = AtomicString(label)
        return el, m.start(0), m.end(0)


class WikiLinkExtension(Extension):
    """Markdown extension for wiki links."""

    def __init__(self, link_index: LinkIndex | None = None, **kwargs):
        self.link_index = link_index if link_index is not None else LinkIndex()
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        """Add wiki link pattern to markdown parser."""
        wiki_link_processor = WikiLinkInlineProcessor(
            WIKI_LINK_PATTERN,
            md,
            self.link_index,
        )
        md.inlinePatterns.register(wiki_link_processor, "wiki_link", 75)


class CalloutTreeprocessor(Treeprocessor):
    """Turns ``> [!type] Title`` blockquotes into callout divs."""

    def run(self, root: Element) -> None:
        for quote in list(root.iter("blockquote")):
            first = quote[0] if len(quote) else None
            if first is None or first.tag != "p" or not first.text:
                continue

            match = CALLOUT_PATTERN.match(first.text)
            if not match:
                continue
            callout_type = match.group(1).lower()
            if callout_type not in CALLOUT_TYPES:
                continue

            first.text = first.text[match.end() :]
            if not first.text.strip() and len(first) == 0:
                quote.remove(first)

            quote.tag = "div"
            quote.set("class", f"callout callout-{callout_type}")
            quote.set("data-callout-type", callout_type)
            quote.set("data-callout-title", (match.group(2) or callout_type).strip())


class CalloutExtension(Extension):
    """Markdown extension for Obsidian-style callout blocks."""

    def extendMarkdown(self, md: Markdown) -> None:
        """Add callout treeprocessor, ahead of inline processing."""
        md.treeprocessors.register(CalloutTreeprocessor(md), "callouts", 25)


def create_parser(link_index: LinkIndex | None = None) -> Markdown:
    """Create a Markdown parser with wiki link support.

    Args:
        link_index: Index used to resolve wiki links. Without one, every
                    wiki link renders as broken.

    Returns:
        Configured Markdown parser instance.
    """
    return Markdown(
        extensions=[
            # Core formatting
            "extra",  # Includes: abbreviations, attr_list, def_list, fenced_code, footnotes, md_in_html, tables
            "sane_lists",  # Better list handling
            "toc",  # Table of contents
            # PyMdown extensions
            "pymdownx.tasklist",  # Task lists with checkboxes
            # Custom extensions
            StrikethroughExtension(),  # ~~strikethrough~~
            WikiLinkExtension(link_index=link_index),  # [[WikiLinks]]
            CalloutExtension(),  # > [!note]
        ]
    )


def render_markdown(content: str, link_index: LinkIndex | None = None) -> str:
    """Render a document body (Markdown + wiki links) to HTML."""
    parser = create_parser(link_index)
    return parser.convert(content)


def render_markdown_with_toc(
    content: str,
    link_index: LinkIndex | None = None,
) -> tuple[str, str]:
    """Render a document body and return HTML with table of contents.

    Args:
        content: Markdown content with wiki links.
        link_index: Index used to resolve wiki links.

    Returns:
        Tuple of (html_content, toc_html).
    """
    parser = create_parser(link_index)
    html = parser.convert(content)
    toc_html = getattr(parser, "toc", "")
    return html, toc_html
