"""Label to issue type mapping file.

File layout (label-mapping.json):

    {
      "mappings": {"Bug Report": "Bug Report", "Improvement": "Improvement"},
      "defaultIssueType": "Technical Support"
    }

Loading is the only I/O the classifier depends on, so it happens here, at
the boundary. A missing or broken file is recoverable: the caller gets None
and classification falls back to the fixed "Task" issue type.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..metrics import record_config_fallback
from .config import FALLBACK_ISSUE_TYPE

logger = logging.getLogger("issue_sync.classifier.mapping")

__all__ = [
    "MappingConfig",
    "MappingConfigError",
    "load_mapping_config",
    "try_load_mapping_config",
]


class MappingConfigError(Exception):
    """Raised when the mapping file cannot be read or does not validate.

    Attributes:
        path: File that failed to load
        reason: Short machine-readable cause (missing, unreadable,
                invalid_json, invalid_schema)
    """

    def __init__(self, path: Path, reason: str, message: str):
        super().__init__(message)
        self.path = path
        self.reason = reason


class MappingConfig(BaseModel):
    """Parsed label mapping configuration (read-only).

    Attributes:
        mappings: GitHub label name -> Jira issue type name
        default_issue_type: Issue type used when no label matches
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mappings: dict[str, str] = Field(...)
    default_issue_type: str = Field(..., alias="defaultIssueType", min_length=1)

    @field_validator("default_issue_type")
    @classmethod
    def reject_blank_default(cls, v: str) -> str:
        """A whitespace-only default is as unusable as an empty one."""
        if not v.strip():
            raise ValueError("defaultIssueType must not be blank")
        return v


def load_mapping_config(path: str | Path) -> MappingConfig:
    """Load and validate the mapping file.

    Args:
        path: Path to the JSON mapping file

    Returns:
        Validated MappingConfig

    Raises:
        MappingConfigError: If the file is missing, unreadable, not JSON, or
            does not match the expected shape.
    """
    path = Path(path)

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise MappingConfigError(path, "missing", f"Mapping file not found: {path}") from e
    except OSError as e:
        raise MappingConfigError(path, "unreadable", f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MappingConfigError(path, "invalid_json", f"Invalid JSON in {path}: {e}") from e

    try:
        config = MappingConfig.model_validate(data)
    except ValidationError as e:
        raise MappingConfigError(
            path, "invalid_schema", f"Invalid mapping configuration in {path}: {e}"
        ) from e

    logger.debug(
        "mapping_config_loaded",
        extra={
            "path": str(path),
            "mapping_count": len(config.mappings),
            "default_issue_type": config.default_issue_type,
        },
    )
    return config


def try_load_mapping_config(path: str | Path) -> MappingConfig | None:
    """Load the mapping file, degrading to None on any configuration error.

    Args:
        path: Path to the JSON mapping file

    Returns:
        MappingConfig, or None when the file is unusable (caller falls back
        to the fixed "Task" issue type).
    """
    try:
        return load_mapping_config(path)
    except MappingConfigError as e:
        logger.error(
            "mapping_config_load_failed",
            extra={
                "path": str(e.path),
                "reason": e.reason,
                "error": str(e),
                "fallback_issue_type": FALLBACK_ISSUE_TYPE,
            },
        )
        record_config_fallback(e.reason)
        return None
