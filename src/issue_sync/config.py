"""Configuration management with pydantic-settings for the issue sync.

- Environment variables use the names the GitHub workflow already exports
  (JIRA_BASE_URL, JIRA_USER_EMAIL, JIRA_API_TOKEN, JIRA_PROJECT_KEY, ...)
- Automatic .env file loading with proper precedence
- SecretStr for the Jira API token
- Frozen config (immutable after load)

Only the CLI boundary reads this module. The classifier and the document
builder receive everything they need as arguments.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("issue_sync.config")

__all__ = [
    "DEFAULT_LABEL_MAPPING_PATH",
    "REQUIRED_JIRA_SETTINGS",
    "SyncConfig",
    "WorkflowSettings",
    "get_config",
    "reset_config",
]

DEFAULT_LABEL_MAPPING_PATH = Path("label-mapping.json")

# Field name -> environment variable reported when missing
REQUIRED_JIRA_SETTINGS = {
    "jira_user_email": "JIRA_USER_EMAIL",
    "jira_api_token": "JIRA_API_TOKEN",
    "jira_base_url": "JIRA_BASE_URL",
    "jira_project_key": "JIRA_PROJECT_KEY",
}


class WorkflowSettings(BaseSettings):
    """Settings the label commands need: where the mapping file and step outputs live.

    Validated on their own so an invalid Jira setting cannot stop
    classification.

    Attributes:
        label_mapping_path: Label to issue type mapping file
        github_output: GitHub Actions step output file ($GITHUB_OUTPUT)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    label_mapping_path: Path = Field(
        default=DEFAULT_LABEL_MAPPING_PATH,
        description="JSON file mapping GitHub labels to Jira issue types",
    )

    github_output: Path | None = Field(
        default=None,
        description="GitHub Actions step output file, set by the runner as GITHUB_OUTPUT",
    )


class SyncConfig(WorkflowSettings):
    """Configuration for the GitHub to Jira issue sync.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        jira_base_url: Jira Cloud instance URL (e.g., https://company.atlassian.net)
        jira_user_email: Jira account email for Basic Auth
        jira_api_token: Jira API token (stored as SecretStr)
        jira_project_key: Key of the project new issues are created in
        github_url_custom_field: Optional custom field id receiving the GitHub issue URL
        jira_timeout_seconds: Read timeout for Jira API calls
    """

    jira_base_url: str = Field(
        default="",
        description="Jira Cloud instance URL (e.g., https://company.atlassian.net)",
    )

    jira_user_email: str = Field(
        default="",
        description="Jira account email for Basic Auth",
    )

    jira_api_token: SecretStr = Field(
        default=SecretStr(""),
        description="Jira API token for authentication (stored securely)",
    )

    jira_project_key: str = Field(
        default="",
        description="Jira project key new issues are created in (e.g., 'PROJ')",
    )

    github_url_custom_field: str = Field(
        default="",
        description="Custom field id that receives the GitHub issue URL (e.g., 'customfield_10042')",
    )

    jira_timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="Read timeout in seconds for Jira API requests",
    )

    @field_validator("jira_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so browse/API paths can be appended."""
        return v.strip().rstrip("/")

    @field_validator("jira_project_key", mode="after")
    @classmethod
    def normalize_project_key(cls, v: str) -> str:
        """Project keys are upper case in Jira."""
        return v.strip().upper()

    def missing_jira_settings(self) -> list[str]:
        """Return environment variable names of unset Jira settings.

        Returns:
            Names in the order they are reported to the user, empty if complete.
        """
        missing = []
        for field_name, env_name in REQUIRED_JIRA_SETTINGS.items():
            value = getattr(self, field_name)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if not value:
                missing.append(env_name)
        return missing


@lru_cache(maxsize=1)
def get_config() -> SyncConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Returns:
        SyncConfig singleton instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return SyncConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Clears the cached configuration so tests can change environment
    variables between cases.
    """
    get_config.cache_clear()
