"""GitHub to Jira issue sync CLI.

Command-line entry points used by the GitHub Actions workflow.

Usage:
    issue-sync classify '["Bug Report"]' [label-mapping.json]
    issue-sync fields issue.json [--config label-mapping.json]
    issue-sync create <issueType> <summary> <description> [githubUrl author createdAt [labelsJson]]

Values for later workflow steps are printed to stdout and, when running in
GitHub Actions, appended to $GITHUB_OUTPUT. Logs go to stderr.
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .__version__ import __version__
from .classifier import classify, resolve_issue_type, try_load_mapping_config, validate_issue_type
from .config import SyncConfig, WorkflowSettings, get_config
from .connectors.jira import (
    JiraClient,
    JiraClientError,
    JiraValidationError,
    adf_to_text,
    assemble_submission,
    build_issue_fields,
    render_github_metadata,
)
from .connectors.jira.adf_builder import is_valid
from .logging_config import configure_logging
from .metrics import record_classification
from .models import ClassificationResult, Issue, SubmissionPayload, normalize_labels

logger = logging.getLogger("issue_sync.cli")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class LabelParseError(ValueError):
    """Raised when the labels argument is not a JSON array."""

    pass


def parse_labels(labels_json: str) -> tuple[str, ...]:
    """Parse the labels argument passed by the workflow.

    Args:
        labels_json: JSON array of label names or GitHub label objects

    Returns:
        Label names in order

    Raises:
        LabelParseError: If the argument is not valid JSON or not an array
    """
    try:
        labels = json.loads(labels_json)
    except json.JSONDecodeError as e:
        raise LabelParseError(str(e)) from e

    if not isinstance(labels, list):
        raise LabelParseError(f"expected a JSON array, got {type(labels).__name__}")

    return normalize_labels(labels)


def write_github_outputs(output_path: Path | None, outputs: dict[str, str]) -> None:
    """Append step outputs to the GitHub Actions output file.

    Args:
        output_path: $GITHUB_OUTPUT path; nothing is written when None
        outputs: Output name -> single-line value
    """
    if output_path is None:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


def _load_config(require_jira: bool) -> WorkflowSettings | None:
    """Load settings for a command.

    Commands that do not talk to Jira fall back to WorkflowSettings when a
    Jira setting is invalid, so classification still produces a result.
    """
    try:
        return get_config()
    except ValidationError as e:
        if require_jira:
            print(f"Error: Failed to load configuration: {e}", file=sys.stderr)
            return None
        logger.warning(
            "jira_settings_invalid",
            extra={
                "invalid_settings": [".".join(map(str, err["loc"])) for err in e.errors()],
                "fallback": "workflow_settings",
            },
        )
        return WorkflowSettings()


# =============================================================================
# classify
# =============================================================================


def cmd_classify(args: argparse.Namespace, config: WorkflowSettings) -> int:
    """Print the Jira issue type mapped from a JSON array of labels."""
    try:
        labels = parse_labels(args.labels_json)
    except LabelParseError as e:
        print(f"Error parsing GitHub labels: {e}", file=sys.stderr)
        return EXIT_FAILURE

    config_path = args.config_path or config.label_mapping_path
    issue_type = resolve_issue_type(labels, config_path)

    logger.info(
        "labels_mapped",
        extra={"labels": list(labels), "issue_type": issue_type},
    )
    print(issue_type)
    write_github_outputs(config.github_output, {"jira-issue-type": issue_type})
    return EXIT_SUCCESS


# =============================================================================
# fields
# =============================================================================


def _read_issue_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as f:
        return json.load(f)


def cmd_fields(args: argparse.Namespace, config: WorkflowSettings) -> int:
    """Print issue type, priority and components for a GitHub issue JSON file."""
    try:
        payload = _read_issue_json(args.issue_json)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading GitHub issue: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not isinstance(payload, dict):
        print("Error reading GitHub issue: expected a JSON object", file=sys.stderr)
        return EXIT_FAILURE

    mapping = try_load_mapping_config(args.config or config.label_mapping_path)
    result = classify(Issue.from_github(payload), mapping)
    record_classification(result.issue_type, result.priority.value)

    print(json.dumps(result.to_dict(), indent=2))
    write_github_outputs(
        config.github_output,
        {
            "jira-issue-type": result.issue_type,
            "jira-priority": result.priority.value,
            "jira-components": ",".join(result.components),
        },
    )
    return EXIT_SUCCESS


# =============================================================================
# create
# =============================================================================


def _classification_for(args: argparse.Namespace, config: SyncConfig) -> ClassificationResult | None:
    """Classify the issue when labels were passed; the issue type argument wins."""
    if args.labels_json is None:
        return None

    labels = parse_labels(args.labels_json)
    mapping = try_load_mapping_config(args.config or config.label_mapping_path)
    issue = Issue(title=args.summary, body=args.description, labels=labels)
    result = dataclasses.replace(classify(issue, mapping), issue_type=args.issue_type)
    record_classification(result.issue_type, result.priority.value)
    return result


def build_payload(args: argparse.Namespace, config: SyncConfig) -> SubmissionPayload:
    """Assemble the Jira submission from CLI arguments.

    Raises:
        LabelParseError: If labels were passed but are not a JSON array
    """
    classification = _classification_for(args, config)

    if args.github_url and args.author and args.created_at:
        description: Any = render_github_metadata(
            args.github_url,
            args.author,
            args.created_at,
            args.description,
            classification,
        )
    else:
        description = args.description

    fields = build_issue_fields(
        classification,
        github_url=args.github_url,
        github_url_field=config.github_url_custom_field or None,
    )
    return assemble_submission(
        config.jira_project_key,
        args.issue_type,
        args.summary,
        description,
        fields,
    )


async def submit(
    payload: SubmissionPayload,
    config: SyncConfig,
    validate_type: bool = False,
) -> tuple[str, str]:
    """Create the issue in Jira.

    Args:
        payload: Assembled submission
        config: Settings with Jira credentials
        validate_type: Warn if the issue type does not exist in the project

    Returns:
        Tuple of (issue key, browse URL)

    Raises:
        JiraClientError: If a Jira request fails
    """
    async with JiraClient.from_config(config) as client:
        if validate_type:
            valid_types = await client.get_issue_types(payload.project_key)
            validate_issue_type(payload.issue_type, valid_types)

        issue_key = await client.create_issue(payload)
        return issue_key, client.browse_url(issue_key)


def cmd_create(args: argparse.Namespace, config: SyncConfig) -> int:
    """Create a Jira issue, or print its request body with --dry-run."""
    if not args.dry_run:
        missing = config.missing_jira_settings()
        if missing:
            print("Missing required environment variables:", file=sys.stderr)
            for name in missing:
                print(f"- {name}", file=sys.stderr)
            return EXIT_FAILURE

    try:
        payload = build_payload(args, config)
    except LabelParseError as e:
        print(f"Error parsing GitHub labels: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not is_valid(payload.description):
        print("Error: description is not a valid ADF document", file=sys.stderr)
        return EXIT_FAILURE

    if args.dry_run:
        print(json.dumps(payload.to_request_body(), indent=2))
        print("", file=sys.stderr)
        print(adf_to_text(payload.description), file=sys.stderr)
        return EXIT_SUCCESS

    try:
        issue_key, issue_url = asyncio.run(
            submit(payload, config, validate_type=args.validate_issue_type)
        )
    except JiraValidationError as e:
        print("Failed to create Jira issue: Jira rejected the request", file=sys.stderr)
        for name, message in e.errors.items():
            print(f"  {name}: {message}", file=sys.stderr)
        for message in e.error_messages:
            print(f"  {message}", file=sys.stderr)
        return EXIT_FAILURE
    except JiraClientError as e:
        print(f"Failed to create Jira issue: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"Successfully created Jira issue: {issue_key}")
    print(f"Issue URL: {issue_url}")
    write_github_outputs(config.github_output, {"jira-key": issue_key, "jira-url": issue_url})
    return EXIT_SUCCESS


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-sync",
        description="Create Jira issues from GitHub issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s classify '["Bug Report"]' ./label-mapping.json
  %(prog)s fields issue.json
  %(prog)s create Task 'Issue title' 'Issue description' \\
      https://github.com/user/repo/issues/1 username 2023-01-01T00:00:00Z '["Bug Report"]'

Configuration (environment or .env):
  JIRA_BASE_URL=https://company.atlassian.net
  JIRA_USER_EMAIL=user@example.com
  JIRA_API_TOKEN=your_api_token
  JIRA_PROJECT_KEY=PROJ
  GITHUB_URL_CUSTOM_FIELD=customfield_10042   (optional)
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser(
        "classify", help="Map GitHub labels to a Jira issue type"
    )
    classify_parser.add_argument("labels_json", help='JSON array of labels, e.g. \'["Bug Report"]\'')
    classify_parser.add_argument(
        "config_path", nargs="?", type=Path, help="Label mapping file (default: LABEL_MAPPING_PATH)"
    )
    classify_parser.set_defaults(handler=cmd_classify)

    fields_parser = subparsers.add_parser(
        "fields", help="Map a GitHub issue JSON file to Jira fields"
    )
    fields_parser.add_argument("issue_json", help="GitHub issue JSON file, '-' for stdin")
    fields_parser.add_argument("--config", type=Path, help="Label mapping file")
    fields_parser.set_defaults(handler=cmd_fields)

    create_parser = subparsers.add_parser("create", help="Create a Jira issue")
    create_parser.add_argument("issue_type", help="Jira issue type (e.g. Task, Bug)")
    create_parser.add_argument("summary", help="Issue summary")
    create_parser.add_argument("description", help="Issue description (plain text)")
    create_parser.add_argument("github_url", nargs="?", help="GitHub issue URL")
    create_parser.add_argument("author", nargs="?", help="GitHub issue author")
    create_parser.add_argument("created_at", nargs="?", help="GitHub issue creation timestamp")
    create_parser.add_argument(
        "labels_json", nargs="?", help="JSON array of GitHub labels (adds priority and components)"
    )
    create_parser.add_argument("--config", type=Path, help="Label mapping file")
    create_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request body and a text preview instead of creating the issue",
    )
    create_parser.add_argument(
        "--validate-issue-type",
        action="store_true",
        help="Warn if the issue type does not exist in the Jira project",
    )
    create_parser.set_defaults(handler=cmd_create)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    configure_logging()

    config = _load_config(require_jira=args.command == "create")
    if config is None:
        return EXIT_FAILURE

    try:
        return args.handler(args, config)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
