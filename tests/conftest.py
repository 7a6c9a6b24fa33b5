"""Shared pytest fixtures for the issue sync tests.

Fixture Organization:
    - Isolation fixtures: clean settings cache, environment and logging per test
    - Sample data fixtures: mapping configuration and GitHub issues taken from
      the repository's issue templates
"""

import json
import logging

import pytest

from issue_sync.classifier.mapping import MappingConfig
from issue_sync.config import reset_config
from issue_sync.logging_config import LOGGER_NAMESPACE
from issue_sync.models import Issue

ENV_VARS = (
    "JIRA_BASE_URL",
    "JIRA_USER_EMAIL",
    "JIRA_API_TOKEN",
    "JIRA_PROJECT_KEY",
    "GITHUB_URL_CUSTOM_FIELD",
    "GITHUB_OUTPUT",
    "LABEL_MAPPING_PATH",
    "JIRA_TIMEOUT_SECONDS",
    "ISSUE_SYNC_LOG_LEVEL",
    "ISSUE_SYNC_LOG_FORMAT",
)

DEFAULT_MAPPING = {
    "mappings": {
        "Bug Report": "Bug Report",
        "Improvement": "Improvement",
        "Technical Support": "Technical Support",
    },
    "defaultIssueType": "Technical Support",
}


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test in an empty directory with no sync settings in the environment.

    The working directory matters because SyncConfig reads .env from it.
    """
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging() during a test.

    Handlers bind the stream that was sys.stderr at creation time, which
    pytest replaces per test.
    """
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def mapping_config() -> MappingConfig:
    """Mapping configuration shipped in label-mapping.json."""
    return MappingConfig.model_validate(DEFAULT_MAPPING)


@pytest.fixture
def mapping_file(tmp_path):
    """label-mapping.json written to the test directory."""
    path = tmp_path / "label-mapping.json"
    path.write_text(json.dumps(DEFAULT_MAPPING), encoding="utf-8")
    return path


@pytest.fixture
def production_bug() -> Issue:
    """Bug report form answer: REELS down in production."""
    return Issue(
        title="Production system down - REELS not loading",
        labels=("Bug Report",),
        body=(
            "Which part of the platform is affected?\n"
            "REELS\n"
            "\n"
            "Urgency / Impact\n"
            "High - Production system is down or severely impacted.\n"
            "\n"
            "Issue Description\n"
            "Users cannot access REELS functionality. Getting 500 errors."
        ),
    )


@pytest.fixture
def github_issue_payload() -> dict:
    """GitHub REST API issue object (labels as objects)."""
    return {
        "number": 42,
        "title": "Search function not working in ALPHA",
        "html_url": "https://github.com/company/app/issues/42",
        "user": {"login": "user123"},
        "created_at": "2023-12-01T14:30:00Z",
        "labels": [{"name": "Bug Report", "color": "d73a4a"}],
        "body": (
            "Which part of the platform is affected?\n"
            "ALPHA\n"
            "\n"
            "Urgency / Impact\n"
            "Medium - A non-critical feature is not working.\n"
            "\n"
            "Issue Description\n"
            "Search results are not displaying correctly in ALPHA module."
        ),
    }
