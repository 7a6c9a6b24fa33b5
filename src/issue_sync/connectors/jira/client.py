"""Jira Cloud REST API client.

Provides an async httpx-based client for Jira Cloud API v3 with Basic Auth,
covering what the sync needs: creating issues and listing the issue types a
project offers. Requests are not retried; failures reach the caller as
JiraTransportError (network/HTTP) or JiraValidationError (Jira rejected the
fields).

Reference: https://developer.atlassian.com/cloud/jira/platform/rest/v3/intro/
"""

import base64
import logging
from typing import Any

import httpx

from ...config import SyncConfig
from ...metrics import record_jira_request
from ...models import SubmissionPayload

logger = logging.getLogger("issue_sync.jira.client")

__all__ = [
    "JiraClient",
    "JiraClientError",
    "JiraTransportError",
    "JiraValidationError",
]


class JiraClientError(Exception):
    """Base class for Jira API request failures."""

    pass


class JiraTransportError(JiraClientError):
    """Raised on timeouts, connection failures and HTTP errors without field errors.

    Attributes:
        status_code: HTTP status if a response was received, None otherwise
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class JiraValidationError(JiraClientError):
    """Raised when Jira rejects a request with a structured error list.

    Attributes:
        status_code: HTTP status (usually 400)
        errors: Field name -> message, e.g. {"priority": "Priority name 'X' is not valid"}
        error_messages: Messages not tied to a field
    """

    def __init__(
        self,
        status_code: int,
        errors: dict[str, str],
        error_messages: list[str],
    ):
        details = [f"{name}: {message}" for name, message in errors.items()]
        details.extend(error_messages)
        super().__init__(f"Jira rejected request (HTTP {status_code}): " + "; ".join(details))
        self.status_code = status_code
        self.errors = errors
        self.error_messages = error_messages


class JiraClient:
    """Jira Cloud REST API client using httpx with Basic Auth.

    Attributes:
        base_url: Jira instance URL (e.g., https://company.atlassian.net)
        auth_header: Basic Auth header (base64 encoded email:api_token)

    Example:
        >>> async with JiraClient("https://company.atlassian.net", "user@example.com", "token") as client:
        ...     key = await client.create_issue(payload)
        ...     print(client.browse_url(key))
    """

    def __init__(
        self,
        instance_url: str,
        email: str,
        api_token: str,
        timeout_seconds: float = 15.0,
    ) -> None:
        """Initialize Jira client with authentication.

        Args:
            instance_url: Jira instance URL (e.g., https://company.atlassian.net)
            email: Jira account email for Basic Auth
            api_token: Jira API token for authentication
            timeout_seconds: Read timeout for API responses
        """
        self.base_url = instance_url.rstrip("/")

        credentials = f"{email}:{api_token}"
        encoded = base64.b64encode(credentials.encode()).decode()
        self.auth_header = f"Basic {encoded}"

        timeout_config = httpx.Timeout(
            connect=3.0,
            read=timeout_seconds,
            write=5.0,
            pool=3.0,
        )

        self.client = httpx.AsyncClient(
            timeout=timeout_config,
            headers={
                "Authorization": self.auth_header,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_config(cls, config: SyncConfig) -> "JiraClient":
        """Create a client from loaded settings.

        Args:
            config: SyncConfig with Jira base URL and credentials

        Returns:
            JiraClient
        """
        return cls(
            instance_url=config.jira_base_url,
            email=config.jira_user_email,
            api_token=config.jira_api_token.get_secret_value(),
            timeout_seconds=config.jira_timeout_seconds,
        )

    def browse_url(self, issue_key: str) -> str:
        """Return the web URL of an issue."""
        return f"{self.base_url}/browse/{issue_key}"

    async def create_issue(self, payload: SubmissionPayload) -> str:
        """Create an issue.

        Sends POST request to /rest/api/3/issue.

        Args:
            payload: Assembled submission (project, type, summary, ADF description, fields)

        Returns:
            Key of the created issue (e.g., 'PROJ-123')

        Raises:
            JiraValidationError: If Jira rejects the fields (structured error list)
            JiraTransportError: If the request fails for any other reason
        """
        operation = "create_issue"
        try:
            response = await self.client.post(
                f"{self.base_url}/rest/api/3/issue",
                json=payload.to_request_body(),
            )
            response.raise_for_status()
            issue_key = response.json()["key"]
        except httpx.TimeoutException as e:
            logger.error(
                "jira_create_issue_timeout",
                extra={"project_key": payload.project_key, "error": str(e)},
            )
            record_jira_request(operation, "timeout")
            raise JiraTransportError("JIRA_CREATE_ISSUE_TIMEOUT") from e
        except httpx.HTTPStatusError as e:
            self._raise_for_rejection(operation, e, project_key=payload.project_key)
            logger.error(
                "jira_create_issue_transport_error",
                extra={
                    "project_key": payload.project_key,
                    "status_code": e.response.status_code,
                    "error": str(e),
                },
            )
            record_jira_request(operation, "transport_error")
            raise JiraTransportError(
                f"JIRA_CREATE_ISSUE_ERROR: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                "jira_create_issue_transport_error",
                extra={"project_key": payload.project_key, "error": str(e)},
            )
            record_jira_request(operation, "transport_error")
            raise JiraTransportError(f"JIRA_CREATE_ISSUE_ERROR: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error(
                "jira_create_issue_malformed_response",
                extra={"project_key": payload.project_key, "error": str(e)},
            )
            record_jira_request(operation, "transport_error")
            raise JiraTransportError(f"JIRA_CREATE_ISSUE_MALFORMED_RESPONSE: {e}") from e

        logger.info(
            "jira_issue_created",
            extra={
                "issue_key": issue_key,
                "project_key": payload.project_key,
                "issue_type": payload.issue_type,
            },
        )
        record_jira_request(operation, "success")
        return issue_key

    async def get_issue_types(self, project_key: str) -> list[str]:
        """List the issue type names available in a project.

        Sends GET request to /rest/api/3/project/{projectKey}.

        Args:
            project_key: Jira project key (e.g., 'PROJ')

        Returns:
            Issue type names (e.g., ['Task', 'Bug', 'Story'])

        Raises:
            JiraValidationError: If Jira answers with a structured error list
            JiraTransportError: If the request fails for any other reason
        """
        operation = "get_issue_types"
        try:
            response = await self.client.get(f"{self.base_url}/rest/api/3/project/{project_key}")
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.error(
                "jira_get_issue_types_timeout",
                extra={"project_key": project_key, "error": str(e)},
            )
            record_jira_request(operation, "timeout")
            raise JiraTransportError("JIRA_GET_ISSUE_TYPES_TIMEOUT") from e
        except httpx.HTTPStatusError as e:
            self._raise_for_rejection(operation, e, project_key=project_key)
            logger.error(
                "jira_get_issue_types_transport_error",
                extra={
                    "project_key": project_key,
                    "status_code": e.response.status_code,
                    "error": str(e),
                },
            )
            record_jira_request(operation, "transport_error")
            raise JiraTransportError(
                f"JIRA_GET_ISSUE_TYPES_ERROR: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                "jira_get_issue_types_transport_error",
                extra={"project_key": project_key, "error": str(e)},
            )
            record_jira_request(operation, "transport_error")
            raise JiraTransportError(f"JIRA_GET_ISSUE_TYPES_ERROR: {e}") from e

        record_jira_request(operation, "success")
        return [
            issue_type["name"]
            for issue_type in data.get("issueTypes", [])
            if issue_type.get("name")
        ]

    def _raise_for_rejection(
        self,
        operation: str,
        error: httpx.HTTPStatusError,
        project_key: str,
    ) -> None:
        """Raise JiraValidationError if the error response carries Jira's error list.

        Jira reports field problems as {"errorMessages": [...], "errors": {...}}.
        Returns normally when the body has neither, so the caller can treat
        the failure as a transport error.
        """
        try:
            body = error.response.json()
        except ValueError:
            return
        if not isinstance(body, dict):
            return

        errors = body.get("errors") or {}
        error_messages = body.get("errorMessages") or []
        if not errors and not error_messages:
            return

        logger.error(
            f"jira_{operation}_rejected",
            extra={
                "project_key": project_key,
                "status_code": error.response.status_code,
                "field_errors": errors,
                "error_messages": error_messages,
            },
        )
        record_jira_request(operation, "rejected")
        raise JiraValidationError(
            status_code=error.response.status_code,
            errors=dict(errors),
            error_messages=list(error_messages),
        ) from error

    async def close(self) -> None:
        """Close the HTTP client connection."""
        if hasattr(self, "client") and self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
