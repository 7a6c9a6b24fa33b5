"""Rule-based mapping of GitHub issues to Jira fields.

Derives issue type (from labels and the mapping file), priority (from
template phrases and keywords) and components (from platform area answers)
without any I/O. The mapping file is loaded by the caller and passed in.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from ..models import ClassificationResult, Issue, Priority, normalize_labels
from .config import (
    FALLBACK_ISSUE_TYPE,
    HIGH_PRIORITY_KEYWORDS,
    PLATFORM_AREAS,
    PRIORITY_BODY_RULES,
)
from .mapping import MappingConfig, try_load_mapping_config

logger = logging.getLogger("issue_sync.classifier.rules")

__all__ = [
    "classify",
    "extract_components",
    "map_issue_type",
    "map_priority",
    "resolve_issue_type",
    "validate_issue_type",
]

# One pattern per platform area: the whole line is the area name
_AREA_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (area, re.compile(rf"^\s*{re.escape(area)}\s*$", re.IGNORECASE | re.MULTILINE))
    for area in PLATFORM_AREAS
)


def map_issue_type(labels: Iterable[str], config: MappingConfig | None) -> str:
    """Map GitHub labels to a Jira issue type.

    The first label (in GitHub order) present in the mapping wins; later
    labels are ignored even if they map to something else.

    Args:
        labels: Label names in GitHub order
        config: Loaded mapping configuration, or None if it could not be loaded

    Returns:
        Mapped issue type; config.default_issue_type when nothing matches;
        "Task" when config is None.

    Examples:
        >>> config = MappingConfig(mappings={"bug": "Bug"}, defaultIssueType="Task")
        >>> map_issue_type(["docs", "bug"], config)
        'Bug'
        >>> map_issue_type([], config)
        'Task'
    """
    if config is None:
        return FALLBACK_ISSUE_TYPE

    for label in labels:
        issue_type = config.mappings.get(label)
        if issue_type:
            return issue_type

    return config.default_issue_type


def map_priority(issue: Issue) -> Priority:
    """Derive the Jira priority from issue text.

    Case-insensitive substring rules, first match wins:
    template urgency phrases in the body, then "urgent"/"critical" anywhere
    in title or body, then Medium.

    Args:
        issue: Issue whose title and body are inspected

    Returns:
        Priority
    """
    body = (issue.body or "").lower()
    title = (issue.title or "").lower()

    for priority, phrases in PRIORITY_BODY_RULES:
        if any(phrase in body for phrase in phrases):
            return priority

    if any(keyword in title or keyword in body for keyword in HIGH_PRIORITY_KEYWORDS):
        return Priority.HIGH

    return Priority.MEDIUM


def extract_components(body: str) -> tuple[str, ...]:
    """Find platform areas named on a line of their own.

    "REELS" alone on a line matches; "my REELS thing" does not.

    Args:
        body: Issue body text

    Returns:
        Matching areas in PLATFORM_AREAS order, empty if none
    """
    if not body:
        return ()

    return tuple(area for area, pattern in _AREA_PATTERNS if pattern.search(body))


def classify(issue: Issue, config: MappingConfig | None) -> ClassificationResult:
    """Classify a GitHub issue into Jira fields.

    Args:
        issue: GitHub issue
        config: Loaded mapping configuration, or None to use the fallback type

    Returns:
        ClassificationResult with issue type, priority, components and labels
    """
    labels = normalize_labels(issue.labels)
    result = ClassificationResult(
        issue_type=map_issue_type(labels, config),
        priority=map_priority(issue),
        components=extract_components(issue.body),
        labels=labels,
    )

    logger.debug(
        "issue_classified",
        extra={
            "issue_type": result.issue_type,
            "priority": result.priority.value,
            "components": list(result.components),
            "label_count": len(labels),
        },
    )
    return result


def resolve_issue_type(labels: Iterable[str], config_path: str | Path) -> str:
    """Load the mapping file and map labels in one step.

    Never raises for configuration problems: an unusable file is logged and
    yields "Task".

    Args:
        labels: Label names in GitHub order
        config_path: Path to the mapping file

    Returns:
        Mapped issue type
    """
    return map_issue_type(labels, try_load_mapping_config(config_path))


def validate_issue_type(issue_type: str, valid_issue_types: Sequence[str] = ()) -> bool:
    """Check a mapped issue type against the types a Jira project offers.

    Args:
        issue_type: Issue type name to check
        valid_issue_types: Issue type names of the project; empty skips the check

    Returns:
        True if valid or no list was given
    """
    if not valid_issue_types:
        return True

    is_valid = issue_type in valid_issue_types
    if not is_valid:
        logger.warning(
            "issue_type_not_in_project",
            extra={
                "issue_type": issue_type,
                "valid_issue_types": list(valid_issue_types),
            },
        )
    return is_valid
