"""Unit tests for Jira issue assembly.

Tests render_github_metadata, the description discriminator and
assemble_submission with:
- Fixed block order of the GitHub metadata header
- Optional classification and body sections
- Plain text, ADF, arbitrary object and None descriptions
- Jira field wrappers for priority, components and the GitHub URL field
"""

import pytest

from issue_sync.connectors.jira import adf_builder as adf
from issue_sync.connectors.jira.assembler import (
    assemble_submission,
    build_issue_fields,
    classify_description_kind,
    render_github_metadata,
    resolve_description,
)
from issue_sync.models import ClassificationResult, DescriptionKind, Priority, SubmissionPayload

GITHUB_URL = "https://github.com/testuser/testrepo/issues/123"


@pytest.fixture
def classification() -> ClassificationResult:
    return ClassificationResult(
        issue_type="Bug Report",
        priority=Priority.HIGHEST,
        components=("REELS", "ALPHA"),
        labels=("Bug Report", "needs-triage"),
    )


def _texts(block: dict) -> list[str]:
    return [node["text"] for node in block["content"]]


# =============================================================================
# render_github_metadata
# =============================================================================


class TestRenderGitHubMetadata:
    def test_header_blocks(self):
        doc = render_github_metadata(GITHUB_URL, "testuser", "2023-12-01T10:30:00Z", "")

        assert adf.is_valid(doc)
        assert [block["type"] for block in doc["content"]] == [
            "paragraph",
            "paragraph",
            "paragraph",
            "rule",
        ]

        link_paragraph = doc["content"][0]["content"]
        assert link_paragraph[0] == {"type": "text", "text": "Original GitHub Issue: "}
        assert link_paragraph[1] == {
            "type": "text",
            "text": GITHUB_URL,
            "marks": [{"type": "link", "attrs": {"href": GITHUB_URL}}],
        }
        assert _texts(doc["content"][1]) == ["Created by: testuser"]
        assert _texts(doc["content"][2]) == ["Created at: 2023-12-01T10:30:00Z"]

    def test_body_after_second_rule(self):
        body = "This is a test issue created from GitHub.\n\nIt has multiple lines\nand should be formatted properly in Jira."
        doc = render_github_metadata(GITHUB_URL, "testuser", "2023-12-01T10:30:00Z", body)

        types = [block["type"] for block in doc["content"]]
        assert types == ["paragraph"] * 3 + ["rule", "rule"] + ["paragraph"] * 3
        assert _texts(doc["content"][5]) == ["This is a test issue created from GitHub."]
        assert _texts(doc["content"][7]) == ["and should be formatted properly in Jira."]

    @pytest.mark.parametrize("body", ["", "   \n\t", None])
    def test_blank_body_omitted(self, body):
        doc = render_github_metadata(GITHUB_URL, "a", "t", body)
        assert len(doc["content"]) == 4
        assert doc["content"][-1] == {"type": "rule"}

    def test_body_lines_trimmed(self):
        doc = render_github_metadata(GITHUB_URL, "a", "t", "  indented  ")
        assert _texts(doc["content"][-1]) == ["indented"]

    def test_classification_summary(self, classification):
        doc = render_github_metadata(GITHUB_URL, "a", "t", "Body", classification)

        summary = doc["content"][4:7]
        assert [_texts(block) for block in summary] == [
            ["GitHub Labels: Bug Report, needs-triage"],
            ["Mapped to Issue Type: Bug Report"],
            ["Priority: Highest"],
        ]
        for block in summary:
            assert block["content"][0]["marks"] == [{"type": "em"}]
        assert doc["content"][7] == {"type": "rule"}
        assert _texts(doc["content"][8]) == ["Body"]

    def test_classification_without_labels(self):
        result = ClassificationResult(issue_type="Task", priority=Priority.MEDIUM)
        doc = render_github_metadata(GITHUB_URL, "a", "t", "", result)

        texts = [_texts(block) for block in doc["content"][4:]]
        assert texts == [["Mapped to Issue Type: Task"], ["Priority: Medium"]]

    def test_classification_without_issue_type(self):
        result = ClassificationResult(issue_type="", priority=Priority.LOW, labels=("x",))
        doc = render_github_metadata(GITHUB_URL, "a", "t", "", result)

        texts = [_texts(block) for block in doc["content"][4:]]
        assert texts == [["GitHub Labels: x"], ["Priority: Low"]]


# =============================================================================
# Descriptions
# =============================================================================


class TestClassifyDescriptionKind:
    @pytest.mark.parametrize(
        "description,expected",
        [
            ("plain", DescriptionKind.TEXT),
            ("", DescriptionKind.TEXT),
            (None, DescriptionKind.EMPTY),
            ({"type": "doc", "version": 1, "content": []}, DescriptionKind.DOCUMENT),
            ({"type": "doc", "version": 2, "content": []}, DescriptionKind.OBJECT),
            ({"summary": "x"}, DescriptionKind.OBJECT),
            (["a", "b"], DescriptionKind.OBJECT),
            ((1, 2), DescriptionKind.OBJECT),
            (42, DescriptionKind.EMPTY),
            (0, DescriptionKind.EMPTY),
            (3.5, DescriptionKind.EMPTY),
            (False, DescriptionKind.EMPTY),
            (True, DescriptionKind.EMPTY),
        ],
    )
    def test_kinds(self, description, expected):
        assert classify_description_kind(description) is expected


class TestResolveDescription:
    def test_plain_text(self):
        doc = resolve_description("Line 1\nLine 2")
        assert len(doc["content"]) == 2

    def test_document_used_as_is(self):
        original = adf.from_heading("Title", 2)
        assert resolve_description(original) is original

    def test_object_is_serialized(self):
        doc = resolve_description({"steps": ["a", "b"]})
        assert _texts(doc["content"][0]) == ['{"steps": ["a", "b"]}']

    def test_unserializable_object_uses_str(self):
        marker = object()
        doc = resolve_description({"value": marker})
        assert _texts(doc["content"][0]) == [str({"value": marker})]

    def test_none_is_empty_document(self):
        assert resolve_description(None) == {"type": "doc", "version": 1, "content": []}

    @pytest.mark.parametrize("description", [42, 0, False, True, 3.5])
    def test_scalars_are_empty_documents(self, description):
        assert resolve_description(description) == {"type": "doc", "version": 1, "content": []}


# =============================================================================
# Fields and submission
# =============================================================================


class TestBuildIssueFields:
    def test_empty_without_inputs(self):
        assert build_issue_fields() == {}

    def test_priority_and_components(self, classification):
        assert build_issue_fields(classification) == {
            "priority": {"name": "Highest"},
            "components": [{"name": "REELS"}, {"name": "ALPHA"}],
        }

    def test_no_components_key_when_none_detected(self):
        result = ClassificationResult(issue_type="Task", priority=Priority.MEDIUM)
        assert build_issue_fields(result) == {"priority": {"name": "Medium"}}

    def test_github_url_custom_field(self):
        fields = build_issue_fields(github_url=GITHUB_URL, github_url_field="customfield_10042")
        assert fields == {"customfield_10042": GITHUB_URL}

    @pytest.mark.parametrize("url,field", [(GITHUB_URL, None), (None, "customfield_1"), ("", "")])
    def test_github_url_needs_both_values(self, url, field):
        assert build_issue_fields(github_url=url, github_url_field=field) == {}


class TestAssembleSubmission:
    def test_plain_text_description(self):
        payload = assemble_submission("TEST", "Task", "[GitHub] Test", "Hello\nWorld")

        assert isinstance(payload, SubmissionPayload)
        assert payload.project_key == "TEST"
        assert payload.issue_type == "Task"
        assert len(payload.description["content"]) == 2
        assert payload.fields == {}

    def test_none_description_never_raises(self):
        payload = assemble_submission("TEST", "Task", "Summary", None)

        assert adf.is_valid(payload.description)
        assert payload.description["content"] == []

    def test_document_description(self):
        doc = render_github_metadata(GITHUB_URL, "a", "t", "body")
        payload = assemble_submission("TEST", "Bug", "Summary", doc)
        assert payload.description is doc

    def test_fields_copied(self, classification):
        fields = build_issue_fields(classification)
        payload = assemble_submission("TEST", "Bug", "Summary", "", fields)

        fields["priority"] = {"name": "Low"}
        assert payload.fields["priority"] == {"name": "Highest"}

    def test_request_body(self, classification):
        fields = build_issue_fields(classification, GITHUB_URL, "customfield_10042")
        payload = assemble_submission("TEST", "Bug Report", "Summary", "Body", fields)

        assert payload.to_request_body() == {
            "fields": {
                "project": {"key": "TEST"},
                "summary": "Summary",
                "description": {
                    "type": "doc",
                    "version": 1,
                    "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": "Body"}]}
                    ],
                },
                "issuetype": {"name": "Bug Report"},
                "priority": {"name": "Highest"},
                "components": [{"name": "REELS"}, {"name": "ALPHA"}],
                "customfield_10042": GITHUB_URL,
            }
        }

    def test_fixed_keys_not_overridden(self):
        payload = assemble_submission(
            "TEST", "Task", "Summary", "", {"summary": "other", "project": {"key": "X"}}
        )
        body = payload.to_request_body()["fields"]
        assert body["summary"] == "Summary"
        assert body["project"] == {"key": "TEST"}
