"""Merge a condensed-analysis row and its raw submission into one view.

Rows come from ``condensed_comments LEFT JOIN comments``, so the submission
columns may be ``None``.  Each JSON blob is parsed independently; a
malformed blob only costs its own extracted fields and never the request.

Field resolution uses fixed priority chains (see
:mod:`fedcomments.utils.json_fields`).  The export uses a narrower set of
chains than the listing and omits date and URL entirely.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fedcomments.models.comment import ExportedComment, NormalizedComment
from fedcomments.utils.json_fields import ChainEntry, parse_json_object, resolve_field

# ── Listing / detail chains ───────────────────────────────────────────
TEXT_CHAIN: tuple[ChainEntry, ...] = ("comment", "commentText", "content")
SUBMITTER_CHAIN: tuple[ChainEntry, ...] = ("submitterName", ("firstName", "lastName"))
ORGANIZATION_CHAIN: tuple[ChainEntry, ...] = ("organization", "organizationName")
DATE_CHAIN: tuple[ChainEntry, ...] = ("postedDate", "submissionDate", "datePosted")
URL_CHAIN: tuple[ChainEntry, ...] = ("commentURL", "url")

# ── Export chains ─────────────────────────────────────────────────────
EXPORT_TEXT_CHAIN: tuple[ChainEntry, ...] = ("comment", "commentText")
EXPORT_SUBMITTER_CHAIN: tuple[ChainEntry, ...] = ("submitterName",)
EXPORT_ORGANIZATION_CHAIN: tuple[ChainEntry, ...] = ("organization",)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_blobs(row: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    comment_id = row.get("comment_id")
    parsed = parse_json_object(
        row.get("structured_sections"),
        comment_id=comment_id,
        field_name="structured_sections",
    )
    attributes = parse_json_object(
        row.get("attributes_json"),
        comment_id=comment_id,
        field_name="attributes_json",
    )
    return parsed, attributes


def normalize_comment(row: Mapping[str, Any]) -> NormalizedComment:
    """Build a :class:`NormalizedComment` from a joined analysis row."""
    parsed, attributes = _parse_blobs(row)

    return NormalizedComment(
        comment_id=str(row.get("comment_id")),
        status=str(row.get("status") or ""),
        structured_sections=_optional_str(row.get("structured_sections")),
        created_at=_optional_str(row.get("created_at")),
        attributes_json=_optional_str(row.get("attributes_json")),
        original_id=_optional_str(row.get("original_id")),
        parsed_content=parsed,
        original_text=resolve_field(attributes, TEXT_CHAIN),
        submitter_name=resolve_field(attributes, SUBMITTER_CHAIN),
        organization_name=resolve_field(attributes, ORGANIZATION_CHAIN),
        submission_date=resolve_field(attributes, DATE_CHAIN),
        comment_url=resolve_field(attributes, URL_CHAIN),
    )


def normalize_export_row(row: Mapping[str, Any]) -> ExportedComment:
    """Build the narrow export view of a joined analysis row."""
    parsed, attributes = _parse_blobs(row)

    return ExportedComment(
        comment_id=str(row.get("comment_id")),
        structured_sections=_optional_str(row.get("structured_sections")),
        created_at=_optional_str(row.get("created_at")),
        attributes_json=_optional_str(row.get("attributes_json")),
        parsed_content=parsed,
        original_text=resolve_field(attributes, EXPORT_TEXT_CHAIN),
        submitter_name=resolve_field(attributes, EXPORT_SUBMITTER_CHAIN),
        organization_name=resolve_field(attributes, EXPORT_ORGANIZATION_CHAIN),
    )
