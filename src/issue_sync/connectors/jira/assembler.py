"""Jira issue assembly from GitHub issue data.

Combines the classifier output, GitHub metadata and the issue body into the
ADF description and field set of a new Jira issue.
"""

import json
import logging
from typing import Any

from ...models import (
    ADFDocument,
    ClassificationResult,
    DescriptionKind,
    SubmissionPayload,
)
from . import adf_builder as adf

logger = logging.getLogger("issue_sync.jira.assembler")

__all__ = [
    "assemble_submission",
    "build_issue_fields",
    "classify_description_kind",
    "render_github_metadata",
    "resolve_description",
]


def render_github_metadata(
    url: str,
    author: str,
    created_at: str,
    body: str | None,
    classification: ClassificationResult | None = None,
) -> ADFDocument:
    """Build the Jira description for a synced GitHub issue.

    Layout:
        Original GitHub Issue: <link>
        Created by: <author>
        Created at: <timestamp>
        ----
        GitHub Labels / Mapped to Issue Type / Priority  (italic, when classified)
        ----
        <one paragraph per non-empty body line>

    Args:
        url: GitHub issue HTML URL
        author: GitHub login of the issue author
        created_at: Creation timestamp as reported by GitHub
        body: Issue body; omitted with its separator when blank
        classification: Optional classifier output to summarize

    Returns:
        ADF document
    """
    blocks: list[dict[str, Any] | None] = [
        adf.paragraph(
            adf.text_node("Original GitHub Issue: "),
            adf.text_node(url, [adf.link_mark(url)]),
        ),
        adf.paragraph(adf.text_node(f"Created by: {author}")),
        adf.paragraph(adf.text_node(f"Created at: {created_at}")),
        adf.rule(),
    ]

    if classification is not None:
        if classification.labels:
            blocks.append(_emphasized(f"GitHub Labels: {', '.join(classification.labels)}"))
        if classification.issue_type:
            blocks.append(_emphasized(f"Mapped to Issue Type: {classification.issue_type}"))
        if classification.priority:
            blocks.append(_emphasized(f"Priority: {classification.priority.value}"))

    if body and body.strip():
        blocks.append(adf.rule())
        blocks.extend(adf.text_paragraphs(body))

    return adf.combine(blocks)


def _emphasized(text: str) -> dict[str, Any]:
    return adf.paragraph(adf.text_node(text, [adf.em_mark()]))


def classify_description_kind(description: Any) -> DescriptionKind:
    """Decide how a description argument is turned into ADF.

    Args:
        description: Plain text, an ADF document, a dict or list, or anything else

    Returns:
        DescriptionKind
    """
    if isinstance(description, str):
        return DescriptionKind.TEXT
    if adf.is_valid(description):
        return DescriptionKind.DOCUMENT
    if isinstance(description, (dict, list, tuple)):
        return DescriptionKind.OBJECT
    # None, numbers, booleans and anything else carry no description
    return DescriptionKind.EMPTY


def resolve_description(description: Any) -> ADFDocument:
    """Convert any supported description value into a valid ADF document.

    Plain text is split into paragraphs, valid documents are used as-is,
    dicts and lists are serialized to JSON text first, anything else (None,
    numbers, booleans) becomes an empty document. Never raises.
    """
    kind = classify_description_kind(description)

    if kind is DescriptionKind.TEXT:
        return adf.from_plain_text(description)
    if kind is DescriptionKind.DOCUMENT:
        return description
    if kind is DescriptionKind.OBJECT:
        try:
            serialized = json.dumps(description)
        except (TypeError, ValueError):
            serialized = str(description)
        logger.debug(
            "description_object_serialized",
            extra={"object_type": type(description).__name__},
        )
        return adf.from_plain_text(serialized)
    return adf.empty_document()


def build_issue_fields(
    classification: ClassificationResult | None = None,
    github_url: str | None = None,
    github_url_field: str | None = None,
) -> dict[str, Any]:
    """Build the optional Jira fields of a new issue.

    Args:
        classification: Classifier output providing priority and components
        github_url: GitHub issue URL
        github_url_field: Custom field id receiving the URL (e.g. customfield_10042)

    Returns:
        Jira "fields" entries; empty when nothing applies
    """
    fields: dict[str, Any] = {}

    if classification is not None:
        fields["priority"] = {"name": classification.priority.value}
        if classification.components:
            fields["components"] = [{"name": name} for name in classification.components]

    if github_url and github_url_field:
        fields[github_url_field] = github_url

    return fields


def assemble_submission(
    project_key: str,
    issue_type: str,
    summary: str,
    description: Any,
    fields: dict[str, Any] | None = None,
) -> SubmissionPayload:
    """Assemble the payload for one Jira issue.

    Args:
        project_key: Jira project key
        issue_type: Jira issue type name
        summary: Issue summary
        description: Plain text, ADF document, dict/list, or anything else (empty)
        fields: Extra Jira fields from build_issue_fields()

    Returns:
        SubmissionPayload with a valid ADF description
    """
    payload = SubmissionPayload(
        project_key=project_key,
        issue_type=issue_type,
        summary=summary,
        description=resolve_description(description),
        fields=dict(fields or {}),
    )

    logger.debug(
        "submission_assembled",
        extra={
            "project_key": project_key,
            "issue_type": issue_type,
            "description_blocks": len(payload.description["content"]),
            "extra_fields": sorted(payload.fields),
        },
    )
    return payload
