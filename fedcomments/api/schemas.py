"""Response schemas for the comment analysis API.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: API (Pydantic v2 schemas for response serialization).
#
# Every /api endpoint answers with the same envelope:
#
#     {"success": true,  "data": {...}, "timestamp": "..."}
#     {"success": false, "error": "...", "timestamp": "..."}
#
# Envelope-level and pagination keys keep the camelCase names the browser
# UIs already consume (``totalPages``, ``exportDate``, ``totalComments``).
# They are declared as field aliases with ``populate_by_name`` so Python
# code keeps snake_case attribute names.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from fedcomments.models.comment import ExportedComment, NormalizedComment, ProcessingStats

DataT = TypeVar("DataT")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ─── Envelope ─────────────────────────────────────────────────────────

class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response envelope."""

    success: bool = True
    data: DataT | None = None
    timestamp: str = Field(default_factory=_utc_now_iso)


class ErrorResponse(BaseModel):
    """Failed response envelope.

    ``total_comments`` is only set for a refused export.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    timestamp: str = Field(default_factory=_utc_now_iso)
    total_comments: int | None = Field(default=None, alias="totalComments")


# ─── Payloads ─────────────────────────────────────────────────────────

class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")


class CommentListData(BaseModel):
    comments: list[NormalizedComment]
    pagination: Pagination


class ExportData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    comments: list[ExportedComment]
    export_date: str = Field(alias="exportDate")
    total_comments: int = Field(alias="totalComments")


class StatsData(BaseModel):
    """Store statistics in the dashboard's wire format."""

    model_config = ConfigDict(populate_by_name=True)

    total_comments: int = Field(alias="totalComments")
    condensed_comments: int = Field(alias="condensedComments")
    entities: int
    themes: int
    processing: ProcessingStats
    completion_rate: int = Field(alias="completionRate")


# ─── Service-level responses (no envelope) ────────────────────────────

class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str
    timestamp: str = Field(default_factory=_utc_now_iso)
    database: str


class ApiInfoResponse(BaseModel):
    name: str
    version: str
    endpoints: dict[str, str]
    documentation: str
