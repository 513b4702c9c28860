"""REST API routes for the comment analysis API.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: API (FastAPI route handlers).
# Pattern: Routes reach services via ``request.app.state.<name>``; no
#          ``Depends()`` for singleton services.  Handlers stay thin and
#          let FedCommentsError subclasses propagate to
#          ErrorHandlingMiddleware, which renders the error envelope.
#
# Endpoints:
#   GET /health                   - Liveness + configured database path
#   GET /                         - API info and endpoint map
#   GET /api/stats                - Aggregate counts
#   GET /api/comments             - Filtered, paginated listing
#   GET /api/comments/{id}        - Single normalized comment (404 on miss)
#   GET /api/entities             - Ranked entities (taxonomy or mined)
#   GET /api/themes               - Precomputed themes ([] when absent)
#   GET /api/export               - Bounded full export (400 over ceiling)
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request

from fedcomments.api.schemas import (
    ApiInfoResponse,
    ApiResponse,
    CommentListData,
    ExportData,
    HealthResponse,
    StatsData,
)
from fedcomments.models.comment import AnalysisStatus, NormalizedComment
from fedcomments.models.entities import Entity, Theme
from fedcomments.services.query_builder import CommentListParams

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api", tags=["comments"])
service_router = APIRouter(tags=["service"])

_SERVICE_NAME = "Federal Register Analysis API"


# ── Service accessor ──────────────────────────────────────────────────
def _get_component(request: Request, name: str) -> Any:
    """Retrieve a component from app state; raise 503 if unavailable."""
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(status_code=503, detail=f"{name} unavailable")
    return component


# ── Health & info ─────────────────────────────────────────────────────
@service_router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    settings = _get_component(request, "settings")
    return HealthResponse(service=_SERVICE_NAME, database=settings.database_path)


@service_router.get("/", response_model=ApiInfoResponse)
async def api_info(request: Request) -> ApiInfoResponse:
    config = getattr(request.app.state, "config", None) or {}
    api_config = config.get("api", {})
    return ApiInfoResponse(
        name=api_config.get("name", "Federal Register Analysis Tool API"),
        version=str(api_config.get("version", "1.0.0")),
        endpoints={
            "health": "/health",
            "stats": "/api/stats",
            "comments": "/api/comments",
            "entities": "/api/entities",
            "themes": "/api/themes",
            "export": "/api/export",
        },
        documentation=api_config.get("documentation", "Interactive OpenAPI reference at /docs"),
    )


# ── Stats ─────────────────────────────────────────────────────────────
@router.get("/stats", response_model=ApiResponse[StatsData])
async def get_stats(request: Request) -> ApiResponse[StatsData]:
    svc = _get_component(request, "comment_service")
    stats = await svc.get_stats()
    return ApiResponse[StatsData](data=StatsData(**stats.model_dump()))


# ── Listing ───────────────────────────────────────────────────────────
@router.get("/comments", response_model=ApiResponse[CommentListData])
async def list_comments(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    search: str = "",
    entity: str = "",
    status: AnalysisStatus = AnalysisStatus.COMPLETED,
) -> ApiResponse[CommentListData]:
    """List normalized comments; ``page``/``limit`` are coerced and clamped."""
    settings = _get_component(request, "settings")
    svc = _get_component(request, "comment_service")

    params = CommentListParams.from_request(
        page=page,
        limit=limit,
        search=search,
        entity=entity,
        status=status.value,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    result = await svc.list_comments(params)
    return ApiResponse[CommentListData](data=CommentListData(**result))


@router.get("/comments/{comment_id}", response_model=ApiResponse[NormalizedComment])
async def get_comment(request: Request, comment_id: str) -> ApiResponse[NormalizedComment]:
    svc = _get_component(request, "comment_service")
    comment = await svc.get_comment(comment_id)
    return ApiResponse[NormalizedComment](data=comment)


# ── Entities & themes ─────────────────────────────────────────────────
@router.get("/entities", response_model=ApiResponse[list[Entity]])
async def list_entities(request: Request) -> ApiResponse[list[Entity]]:
    svc = _get_component(request, "entity_service")
    entities = await svc.list_entities()
    return ApiResponse[list[Entity]](data=entities)


@router.get("/themes", response_model=ApiResponse[list[Theme]])
async def list_themes(request: Request) -> ApiResponse[list[Theme]]:
    svc = _get_component(request, "comment_service")
    themes = await svc.list_themes()
    return ApiResponse[list[Theme]](data=themes)


# ── Export ────────────────────────────────────────────────────────────
@router.get("/export", response_model=ApiResponse[ExportData])
async def export_comments(request: Request) -> ApiResponse[ExportData]:
    """Export every completed analysis; refused above the row ceiling."""
    svc = _get_component(request, "export_service")
    result = await svc.export_completed()
    return ApiResponse[ExportData](data=ExportData(**result))
