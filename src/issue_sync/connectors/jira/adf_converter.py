"""Atlassian Document Format (ADF) to plain text preview.

Renders the descriptions built by adf_builder as Markdown-like text so a
dry run can show what the Jira issue will contain without calling Jira.
Unknown node types are logged and their children rendered.
"""

import logging
from typing import Any

logger = logging.getLogger("issue_sync.jira.adf")

__all__ = ["adf_to_text"]

_BLOCK_SEPARATOR = "\n\n"


def adf_to_text(adf_content: dict[str, Any] | None) -> str:
    """Convert an ADF document to plain text.

    Args:
        adf_content: ADF document dict (None or empty allowed)

    Returns:
        Text with blocks separated by blank lines; empty string for empty input

    Example:
        >>> adf_to_text({
        ...     "type": "doc",
        ...     "version": 1,
        ...     "content": [{"type": "rule"}],
        ... })
        '---'
    """
    if not adf_content:
        return ""

    if adf_content.get("type") == "doc":
        blocks = [_render_block(block) for block in adf_content.get("content", [])]
        return _BLOCK_SEPARATOR.join(block for block in blocks if block)

    return _render_block(adf_content)


def _render_inline(nodes: list[Any]) -> str:
    return "".join(_render_text(node) for node in nodes if isinstance(node, dict))


def _render_text(node: dict[str, Any]) -> str:
    if node.get("type") == "hardBreak":
        return "\n"
    if node.get("type") != "text":
        return _render_inline(node.get("content", []))

    text = node.get("text", "")
    for mark in node.get("marks") or []:
        mark_type = mark.get("type")
        if mark_type == "strong":
            text = f"**{text}**"
        elif mark_type == "em":
            text = f"*{text}*"
        elif mark_type == "code":
            text = f"`{text}`"
        elif mark_type == "link":
            href = mark.get("attrs", {}).get("href", "")
            if href and href != text:
                text = f"[{text}]({href})"
    return text


def _render_list(node: dict[str, Any], ordered: bool) -> str:
    lines = []
    items = [item for item in node.get("content", []) if isinstance(item, dict)]
    for number, item in enumerate(items, start=1):
        prefix = f"{number}. " if ordered else "- "
        item_text = "\n".join(
            _render_block(child) for child in item.get("content", [])
        )
        lines.append(prefix + item_text)
    return "\n".join(lines)


def _render_block(node: Any) -> str:
    if not isinstance(node, dict):
        return ""

    node_type = node.get("type")
    content = node.get("content", [])

    if node_type == "paragraph":
        return _render_inline(content)

    if node_type == "heading":
        level = node.get("attrs", {}).get("level", 1)
        return f"{'#' * level} {_render_inline(content)}"

    if node_type == "bulletList":
        return _render_list(node, ordered=False)

    if node_type == "orderedList":
        return _render_list(node, ordered=True)

    if node_type == "codeBlock":
        language = node.get("attrs", {}).get("language", "")
        return f"```{language}\n{_render_inline(content)}\n```"

    if node_type == "rule":
        return "---"

    if node_type == "text":
        return _render_text(node)

    logger.warning(
        "adf_unknown_node_type",
        extra={"node_type": node_type, "has_content": bool(content)},
    )
    return "\n".join(part for part in (_render_block(child) for child in content) if part)
