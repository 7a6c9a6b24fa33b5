"""Data models for issue classification and Jira submission.

Issue is the immutable input read from GitHub. ClassificationResult and
SubmissionPayload are computed per invocation and never cached.
ADF documents themselves stay plain JSON-ready dicts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "ADFDocument",
    "ClassificationResult",
    "DescriptionKind",
    "Issue",
    "Priority",
    "SubmissionPayload",
    "normalize_labels",
]

# {"type": "doc", "version": 1, "content": [...]}
ADFDocument = dict[str, Any]


class Priority(str, Enum):
    """Jira priority names produced by the priority rules.

    Note: Uses (str, Enum) so values serialize directly into Jira payloads.
    """

    HIGHEST = "Highest"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DescriptionKind(Enum):
    """Shapes a Jira issue description may arrive in."""

    TEXT = "text"
    DOCUMENT = "document"
    OBJECT = "object"
    EMPTY = "empty"


def normalize_labels(labels: Any) -> tuple[str, ...]:
    """Normalize GitHub labels to an ordered tuple of names.

    GitHub returns label objects ({"name": "bug", "color": ...}) while the
    workflow passes plain strings. Both are accepted; order and duplicates
    are preserved.

    Args:
        labels: Sequence of label names or label objects (None allowed)

    Returns:
        Tuple of label names
    """
    if not labels:
        return ()

    names: list[str] = []
    for label in labels:
        if isinstance(label, str):
            names.append(label)
        elif isinstance(label, dict) and label.get("name") is not None:
            names.append(str(label["name"]))
    return tuple(names)


@dataclass(frozen=True)
class Issue:
    """GitHub issue fields used for classification.

    Attributes:
        title: Issue title
        body: Free-form issue body, newline-delimited (may be empty)
        labels: Label names in GitHub order; first match wins during mapping
    """

    title: str = ""
    body: str = ""
    labels: tuple[str, ...] = ()

    @classmethod
    def from_github(cls, payload: dict[str, Any]) -> "Issue":
        """Build an Issue from a GitHub REST or webhook issue object.

        Args:
            payload: Issue dict with title, body and labels keys

        Returns:
            Issue with None title/body replaced by empty strings
        """
        return cls(
            title=payload.get("title") or "",
            body=payload.get("body") or "",
            labels=normalize_labels(payload.get("labels")),
        )


@dataclass(frozen=True)
class ClassificationResult:
    """Jira fields derived from a GitHub issue.

    Attributes:
        issue_type: Jira issue type name
        priority: Jira priority
        components: Platform areas detected in the body, vocabulary order
        labels: Normalized input labels, echoed for the issue description
    """

    issue_type: str
    priority: Priority
    components: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the key names used by the workflow outputs."""
        return {
            "issueType": self.issue_type,
            "priority": self.priority.value,
            "components": list(self.components),
            "labels": list(self.labels),
        }


@dataclass(frozen=True)
class SubmissionPayload:
    """Everything needed to create one Jira issue.

    Attributes:
        project_key: Target Jira project key
        issue_type: Jira issue type name
        summary: Issue summary (title)
        description: Validated ADF document
        fields: Additional Jira fields (priority, components, custom fields)
    """

    project_key: str
    issue_type: str
    summary: str
    description: ADFDocument
    fields: dict[str, Any] = field(default_factory=dict)

    def to_request_body(self) -> dict[str, Any]:
        """Build the JSON body for POST /rest/api/3/issue.

        The fixed keys (project, summary, description, issuetype) always win
        over same-named entries in ``fields``.
        """
        request_fields: dict[str, Any] = dict(self.fields)
        request_fields.update(
            {
                "project": {"key": self.project_key},
                "summary": self.summary,
                "description": self.description,
                "issuetype": {"name": self.issue_type},
            }
        )
        return {"fields": request_fields}
