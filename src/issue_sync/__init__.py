"""GitHub to Jira issue sync.

Creates Jira Cloud issues from GitHub issues through:
- Rule-based mapping of labels and issue text to issue type, priority and components
- Atlassian Document Format (ADF) descriptions with GitHub metadata
- A Jira REST API v3 client with Basic Auth

Logging is configured by the CLI (issue_sync.cli); importing the package
has no side effects.
"""

from .__version__ import __version__
from .classifier import (
    MappingConfig,
    MappingConfigError,
    classify,
    extract_components,
    load_mapping_config,
    map_issue_type,
    map_priority,
    try_load_mapping_config,
)
from .config import SyncConfig, WorkflowSettings, get_config, reset_config
from .connectors.jira import (
    JiraClient,
    JiraClientError,
    JiraTransportError,
    JiraValidationError,
    assemble_submission,
    build_issue_fields,
    render_github_metadata,
)
from .logging_config import StructuredFormatter, configure_logging
from .models import (
    ClassificationResult,
    DescriptionKind,
    Issue,
    Priority,
    SubmissionPayload,
)

__all__ = [
    "__version__",
    "ClassificationResult",
    "DescriptionKind",
    "Issue",
    "JiraClient",
    "JiraClientError",
    "JiraTransportError",
    "JiraValidationError",
    "MappingConfig",
    "MappingConfigError",
    "Priority",
    "StructuredFormatter",
    "SubmissionPayload",
    "SyncConfig",
    "WorkflowSettings",
    "assemble_submission",
    "build_issue_fields",
    "classify",
    "configure_logging",
    "extract_components",
    "get_config",
    "load_mapping_config",
    "map_issue_type",
    "map_priority",
    "render_github_metadata",
    "reset_config",
    "try_load_mapping_config",
]
