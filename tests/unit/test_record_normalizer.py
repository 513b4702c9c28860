"""Unit tests for JSON field resolution and the record normalizer."""

from __future__ import annotations

import json

import pytest

from fedcomments.services.record_normalizer import (
    SUBMITTER_CHAIN,
    TEXT_CHAIN,
    normalize_comment,
    normalize_export_row,
)
from fedcomments.utils.json_fields import parse_json_object, resolve_field


def _row(attributes=None, sections=None, **overrides) -> dict:
    row = {
        "comment_id": "CMS-2025-0050-0031-0007",
        "status": "completed",
        "structured_sections": sections if isinstance(sections, (str, type(None))) else json.dumps(sections),
        "created_at": "2025-07-01T12:00:00",
        "attributes_json": attributes if isinstance(attributes, (str, type(None))) else json.dumps(attributes),
        "original_id": "CMS-2025-0050-0031-0007",
    }
    row.update(overrides)
    return row


# ======================================================================
# parse_json_object
# ======================================================================


class TestParseJsonObject:
    def test_parses_object(self) -> None:
        assert parse_json_object('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]", '"text"', "42", "null"])
    def test_degrades_to_empty_dict(self, raw) -> None:
        assert parse_json_object(raw, comment_id="c1") == {}


# ======================================================================
# resolve_field
# ======================================================================


class TestResolveField:
    def test_first_key_wins_when_both_present(self) -> None:
        attrs = {"comment": "primary", "commentText": "secondary"}
        assert resolve_field(attrs, TEXT_CHAIN) == "primary"

    def test_falls_through_empty_values(self) -> None:
        attrs = {"comment": "", "commentText": None, "content": "third"}
        assert resolve_field(attrs, TEXT_CHAIN) == "third"

    def test_blank_string_counts_as_empty(self) -> None:
        attrs = {"comment": "   ", "commentText": "real"}
        assert resolve_field(attrs, TEXT_CHAIN) == "real"

    def test_missing_everywhere_is_empty_string(self) -> None:
        assert resolve_field({}, TEXT_CHAIN) == ""

    def test_non_string_scalars_are_stringified(self) -> None:
        assert resolve_field({"comment": 12}, TEXT_CHAIN) == "12"

    @pytest.mark.parametrize("falsy", [False, 0, 0.0])
    def test_false_and_zero_fall_through(self, falsy) -> None:
        attrs = {"comment": falsy, "commentText": "next in line"}
        assert resolve_field(attrs, TEXT_CHAIN) == "next in line"

    def test_true_renders_as_json_literal(self) -> None:
        assert resolve_field({"comment": True}, TEXT_CHAIN) == "true"

    def test_submitter_name_preferred_over_parts(self) -> None:
        attrs = {"submitterName": "Jane Roe", "firstName": "John", "lastName": "Doe"}
        assert resolve_field(attrs, SUBMITTER_CHAIN) == "Jane Roe"

    def test_submitter_joins_first_and_last(self) -> None:
        attrs = {"firstName": "John", "lastName": "Doe"}
        assert resolve_field(attrs, SUBMITTER_CHAIN) == "John Doe"

    def test_submitter_with_only_last_name(self) -> None:
        assert resolve_field({"lastName": "Doe"}, SUBMITTER_CHAIN) == "Doe"

    def test_submitter_without_any_name(self) -> None:
        assert resolve_field({"firstName": None}, SUBMITTER_CHAIN) == ""


# ======================================================================
# normalize_comment
# ======================================================================


class TestNormalizeComment:
    def test_resolves_every_field(self) -> None:
        attrs = {
            "comment": "Please reconsider the reimbursement cuts.",
            "submitterName": "Dr. A. Patel",
            "organizationName": "Riverside Health",
            "postedDate": "2025-06-30",
            "commentURL": "https://www.regulations.gov/comment/CMS-2025-0050-0031-0007",
        }
        result = normalize_comment(_row(attrs, {"category": "Hospitals"}))

        assert result.original_text == "Please reconsider the reimbursement cuts."
        assert result.submitter_name == "Dr. A. Patel"
        assert result.organization_name == "Riverside Health"
        assert result.submission_date == "2025-06-30"
        assert result.comment_url.endswith("0007")
        assert result.parsed_content == {"category": "Hospitals"}

    def test_lower_priority_keys_used_when_higher_absent(self) -> None:
        attrs = {
            "content": "fallback text",
            "organization": "Acme Corp",
            "organizationName": "ignored",
            "datePosted": "2025-05-01",
            "url": "https://example.test/c/1",
        }
        result = normalize_comment(_row(attrs))

        assert result.original_text == "fallback text"
        assert result.organization_name == "Acme Corp"
        assert result.submission_date == "2025-05-01"
        assert result.comment_url == "https://example.test/c/1"

    def test_malformed_blobs_yield_empty_fields(self) -> None:
        result = normalize_comment(_row("{broken", "also {broken"))

        assert result.parsed_content == {}
        assert result.original_text == ""
        assert result.submitter_name == ""
        assert result.organization_name == ""
        assert result.submission_date == ""
        assert result.comment_url == ""
        # Raw blobs are kept for traceability.
        assert result.attributes_json == "{broken"
        assert result.structured_sections == "also {broken"

    def test_one_bad_blob_does_not_affect_the_other(self) -> None:
        result = normalize_comment(_row({"comment": "fine"}, "{broken"))
        assert result.original_text == "fine"
        assert result.parsed_content == {}

    def test_missing_submission_row(self) -> None:
        result = normalize_comment(_row(None, {"category": "Other"}, original_id=None))
        assert result.original_id is None
        assert result.original_text == ""
        assert result.parsed_content == {"category": "Other"}

    def test_integer_ids_are_stringified(self) -> None:
        result = normalize_comment(_row({}, {}, comment_id=17, original_id=17))
        assert result.comment_id == "17"
        assert result.original_id == "17"


# ======================================================================
# normalize_export_row
# ======================================================================


class TestNormalizeExportRow:
    def test_uses_narrow_chains(self) -> None:
        attrs = {
            "content": "only in content",
            "firstName": "John",
            "lastName": "Doe",
            "organizationName": "Only Name Group",
            "postedDate": "2025-06-30",
        }
        result = normalize_export_row(_row(attrs))

        assert result.original_text == ""
        assert result.submitter_name == ""
        assert result.organization_name == ""
        dumped = result.model_dump()
        assert "submission_date" not in dumped
        assert "comment_url" not in dumped

    def test_export_text_falls_back_to_comment_text(self) -> None:
        attrs = {"commentText": "second key", "submitterName": "Jane", "organization": "Acme Inc"}
        result = normalize_export_row(_row(attrs))
        assert result.original_text == "second key"
        assert result.submitter_name == "Jane"
        assert result.organization_name == "Acme Inc"
