"""Comment domain models and the normalized views built from them.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph - no imports from upper layers).
#
# Two record kinds live in the store:
#   - ``comments``            - raw public-comment submissions; the payload is
#                               an opaque ``attributes_json`` blob whose keys
#                               vary between sources.
#   - ``condensed_comments``  - AI-condensed analyses, one per comment at
#                               most, tracked through ``AnalysisStatus``.
#
# ``NormalizedComment`` and ``ExportedComment`` are derived views built by
# the record normalizer.  They are never persisted.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnalysisStatus(str, Enum):
    """Processing states of a condensed analysis."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class NormalizedComment(BaseModel):
    """Canonical view of one condensed analysis joined to its raw submission.

    Keeps both raw JSON blobs for traceability alongside the parsed
    structured sections and the flat fields resolved from the attributes.
    """

    model_config = ConfigDict(frozen=True)

    comment_id: str = Field(description="Identifier shared by the analysis and its submission.")
    status: str = Field(description="Analysis status (pending, completed, failed).")
    structured_sections: str | None = Field(default=None, description="Raw structured-sections JSON text.")
    created_at: str | None = Field(default=None, description="Analysis creation time as stored.")
    attributes_json: str | None = Field(default=None, description="Raw submission attributes JSON text.")
    original_id: str | None = Field(default=None, description="Raw submission id; None when no submission row joined.")
    parsed_content: dict[str, Any] = Field(default_factory=dict)

    original_text: str = ""
    submitter_name: str = ""
    organization_name: str = ""
    submission_date: str = ""
    comment_url: str = ""


class ExportedComment(BaseModel):
    """Narrow normalized view used by the bulk export.

    Date and URL fields are deliberately left out to keep the export small.
    """

    model_config = ConfigDict(frozen=True)

    comment_id: str
    structured_sections: str | None = None
    created_at: str | None = None
    attributes_json: str | None = None
    parsed_content: dict[str, Any] = Field(default_factory=dict)

    original_text: str = ""
    submitter_name: str = ""
    organization_name: str = ""


class ProcessingStats(BaseModel):
    """Count of condensed analyses per status."""

    model_config = ConfigDict(frozen=True)

    pending: int = 0
    completed: int = 0
    failed: int = 0


class StoreStats(BaseModel):
    """Aggregate counts over the whole store."""

    model_config = ConfigDict(frozen=True)

    total_comments: int = 0
    condensed_comments: int = 0
    entities: int = 0
    themes: int = 0
    processing: ProcessingStats = Field(default_factory=ProcessingStats)
    completion_rate: int = Field(default=0, description="Completed analyses as a rounded percentage of raw comments.")
