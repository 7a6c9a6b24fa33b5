"""GitHub issue to Jira field classification.

Public API:
    - classify(): Issue type, priority and components for one issue
    - map_issue_type(): First-match label mapping
    - map_priority(): Priority from template phrases and keywords
    - extract_components(): Platform areas named on their own line
    - resolve_issue_type(): Load mapping file and map labels (never raises)
    - validate_issue_type(): Check a type against a project's issue types
    - load_mapping_config() / try_load_mapping_config(): Mapping file loaders
"""

from .config import FALLBACK_ISSUE_TYPE, PLATFORM_AREAS
from .mapping import (
    MappingConfig,
    MappingConfigError,
    load_mapping_config,
    try_load_mapping_config,
)
from .rules import (
    classify,
    extract_components,
    map_issue_type,
    map_priority,
    resolve_issue_type,
    validate_issue_type,
)

__all__ = [
    "FALLBACK_ISSUE_TYPE",
    "PLATFORM_AREAS",
    "MappingConfig",
    "MappingConfigError",
    "classify",
    "extract_components",
    "load_mapping_config",
    "map_issue_type",
    "map_priority",
    "resolve_issue_type",
    "try_load_mapping_config",
    "validate_issue_type",
]
