"""Atlassian Document Format (ADF) builders.

Jira Cloud REST API v3 only accepts rich text (issue description, comments)
as ADF JSON. This module builds ADF from plain text, formatted text nodes,
lists, headings and code, and validates the document root before it is sent.

Two levels of helpers:
- Block/node constructors (paragraph, heading, rule, text_node, ...) return
  single content blocks that can be composed with combine().
- from_* functions return complete documents.

Documents are plain dicts so they can go straight into the request body.

Reference: https://developer.atlassian.com/cloud/jira/platform/apis/document/structure/
"""

from collections.abc import Iterable, Sequence
from typing import Any

from ...models import ADFDocument

__all__ = [
    "code_block",
    "combine",
    "em_mark",
    "empty_document",
    "from_code_block",
    "from_formatted_nodes",
    "from_heading",
    "from_link",
    "from_list",
    "from_plain_text",
    "heading",
    "is_valid",
    "link_mark",
    "list_block",
    "paragraph",
    "rule",
    "strong_mark",
    "text_node",
    "text_paragraphs",
]

ADF_VERSION = 1
MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


# =============================================================================
# Marks
# =============================================================================


def strong_mark() -> dict[str, Any]:
    return {"type": "strong"}


def em_mark() -> dict[str, Any]:
    return {"type": "em"}


def link_mark(href: str) -> dict[str, Any]:
    return {"type": "link", "attrs": {"href": href}}


# =============================================================================
# Nodes and blocks
# =============================================================================


def text_node(text: str, marks: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build an inline text node.

    Args:
        text: Node text
        marks: Optional marks (strong, em, link, ...), passed through as given

    Returns:
        ADF text node; "marks" key only present when marks were supplied
    """
    node: dict[str, Any] = {"type": "text", "text": text}
    if marks is not None:
        node["marks"] = marks
    return node


def paragraph(*nodes: dict[str, Any]) -> dict[str, Any]:
    """Build a paragraph block from inline nodes."""
    return {"type": "paragraph", "content": list(nodes)}


def heading(text: str, level: int = 1) -> dict[str, Any]:
    """Build a heading block. Level is clamped into 1-6."""
    valid_level = max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, int(level)))
    return {
        "type": "heading",
        "attrs": {"level": valid_level},
        "content": [text_node(text)],
    }


def list_block(items: Iterable[str], ordered: bool = False) -> dict[str, Any]:
    """Build a bulletList or orderedList block.

    Each item becomes listItem -> paragraph -> text.
    """
    return {
        "type": "orderedList" if ordered else "bulletList",
        "content": [
            {"type": "listItem", "content": [paragraph(text_node(item))]}
            for item in items
        ],
    }


def code_block(code: str, language: str | None = None) -> dict[str, Any]:
    """Build a codeBlock. The language attribute is set only when non-empty."""
    block: dict[str, Any] = {
        "type": "codeBlock",
        "attrs": {"language": language} if language else {},
    }
    # Jira rejects empty text nodes; an empty code block has no content
    block["content"] = [text_node(code)] if code else []
    return block


def rule() -> dict[str, Any]:
    """Build a horizontal rule (visual separator)."""
    return {"type": "rule"}


# =============================================================================
# Documents
# =============================================================================


def empty_document() -> ADFDocument:
    return {"type": "doc", "version": ADF_VERSION, "content": []}


def _document(content: list[dict[str, Any]]) -> ADFDocument:
    return {"type": "doc", "version": ADF_VERSION, "content": content}


def text_paragraphs(text: str) -> list[dict[str, Any]]:
    """Split text on line feeds into one paragraph per non-blank line.

    Lines are trimmed, which also drops the carriage return of CRLF endings.
    Other separators (form feed, U+2028, ...) stay inside their line.
    """
    return [
        paragraph(text_node(line.strip()))
        for line in text.split("\n")
        if line.strip()
    ]


def from_plain_text(text: Any) -> ADFDocument:
    """Convert plain text to an ADF document.

    Each non-blank line becomes its own paragraph. Never raises.

    Args:
        text: Plain text; None, empty or non-string input gives an empty document

    Returns:
        ADF document

    Example:
        >>> len(from_plain_text("Line 1\\nLine 2\\n\\nLine 3")["content"])
        3
    """
    if not text or not isinstance(text, str):
        return empty_document()

    content = text_paragraphs(text)
    if not content:
        # Nothing survived the blank-line filter; keep the raw text rather
        # than returning an empty document
        content = [paragraph(text_node(text))]

    return _document(content)


def from_formatted_nodes(nodes: Sequence[dict[str, Any]]) -> ADFDocument:
    """Build a single-paragraph document from formatted text nodes.

    Args:
        nodes: Items of the form {"text": str, "marks": [...]} (marks optional)

    Returns:
        ADF document with one paragraph

    Example:
        >>> doc = from_formatted_nodes([
        ...     {"text": "Normal "},
        ...     {"text": "bold", "marks": [{"type": "strong"}]},
        ... ])
    """
    return _document(
        [paragraph(*(text_node(node["text"], node.get("marks")) for node in nodes))]
    )


def from_list(items: Any, ordered: bool = False) -> ADFDocument:
    """Build a document holding one bullet or numbered list.

    Args:
        items: List item strings; anything other than a non-empty list or
               tuple gives an empty document
        ordered: True for a numbered list

    Returns:
        ADF document
    """
    if not isinstance(items, (list, tuple)) or not items:
        return empty_document()
    return _document([list_block(items, ordered=ordered)])


def from_heading(heading_text: str, level: int = 1, content: str = "") -> ADFDocument:
    """Build a document with a heading and an optional paragraph below it.

    Args:
        heading_text: Heading text
        level: Heading level, clamped into 1-6
        content: Paragraph text; omitted when empty

    Returns:
        ADF document
    """
    blocks = [heading(heading_text, level)]
    if content:
        blocks.append(paragraph(text_node(content)))
    return _document(blocks)


def from_code_block(code: str, language: str | None = None) -> ADFDocument:
    """Build a document with a single code block."""
    return _document([code_block(code, language)])


def from_link(text: str, url: str) -> ADFDocument:
    """Build a document with one paragraph holding a hyperlink."""
    return _document([paragraph(text_node(text, [link_mark(url)]))])


def combine(blocks: Iterable[dict[str, Any] | None]) -> ADFDocument:
    """Combine content blocks (not whole documents) into one document.

    None entries are dropped so callers can include optional blocks inline.
    """
    return _document([block for block in blocks if block is not None])


def is_valid(doc: Any) -> bool:
    """Check the ADF document root structure.

    Valid means: a dict with type "doc", version 1 and a list of content
    blocks (possibly empty). Block contents are not inspected.
    """
    return (
        isinstance(doc, dict)
        and doc.get("type") == "doc"
        and doc.get("version") == ADF_VERSION
        and not isinstance(doc.get("version"), bool)
        and isinstance(doc.get("content"), list)
    )
