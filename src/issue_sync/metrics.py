"""
Prometheus metrics definitions for the issue sync.

Counters are recorded at the boundaries (CLI, mapping file loader, Jira
client) so the classifier and document builder stay free of side effects.
Naming: snake_case, issue_sync_ prefix.
"""

import logging

from prometheus_client import Counter

logger = logging.getLogger("issue_sync.metrics")

__all__ = [
    "classifications_total",
    "config_fallbacks_total",
    "jira_requests_total",
    "record_classification",
    "record_config_fallback",
    "record_jira_request",
]

classifications_total = Counter(
    "issue_sync_classifications_total",
    "GitHub issues classified into Jira fields",
    ["issue_type", "priority"],
)

config_fallbacks_total = Counter(
    "issue_sync_config_fallbacks_total",
    "Label mapping file could not be used; fixed fallback issue type applied",
    ["reason"],
    # reason: missing, unreadable, invalid_json, invalid_schema
)

jira_requests_total = Counter(
    "issue_sync_jira_requests_total",
    "Jira REST API requests",
    ["operation", "status"],
    # operation: create_issue, get_issue_types
    # status: success, rejected, timeout, transport_error
)


def record_classification(issue_type: str, priority: str) -> None:
    """Count one classified issue."""
    classifications_total.labels(issue_type=issue_type, priority=priority).inc()


def record_config_fallback(reason: str) -> None:
    """Count one fallback caused by an unusable mapping file."""
    config_fallbacks_total.labels(reason=reason).inc()


def record_jira_request(operation: str, status: str) -> None:
    """Count one Jira API request by outcome."""
    jira_requests_total.labels(operation=operation, status=status).inc()
