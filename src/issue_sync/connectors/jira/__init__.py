"""Jira Cloud integration package.

Provides the ADF builder, the issue assembler, the REST client and a
plain-text ADF preview for creating Jira issues from GitHub issues.
"""

from .adf_converter import adf_to_text
from .assembler import (
    assemble_submission,
    build_issue_fields,
    classify_description_kind,
    render_github_metadata,
    resolve_description,
)
from .client import JiraClient, JiraClientError, JiraTransportError, JiraValidationError

__all__ = [
    "JiraClient",
    "JiraClientError",
    "JiraTransportError",
    "JiraValidationError",
    "adf_to_text",
    "assemble_submission",
    "build_issue_fields",
    "classify_description_kind",
    "render_github_metadata",
    "resolve_description",
]
