"""Comment listing, single lookup, statistics and themes.

Stateless service: receives the store and the shared capability probe via
the constructor and holds nothing between requests.
"""

from __future__ import annotations

from typing import Any

import structlog

from fedcomments.interfaces.comment_store import ICommentStore
from fedcomments.models.comment import NormalizedComment, StoreStats
from fedcomments.models.entities import Theme
from fedcomments.services.capability_probe import CapabilityProbe
from fedcomments.services.query_builder import (
    CommentListParams,
    build_comment_queries,
    total_pages,
)
from fedcomments.services.record_normalizer import normalize_comment
from fedcomments.utils.errors import CommentNotFoundError

logger = structlog.get_logger(logger_name=__name__)


class CommentService:
    def __init__(self, store: ICommentStore, probe: CapabilityProbe) -> None:
        self._store = store
        self._probe = probe

    async def list_comments(self, params: CommentListParams) -> dict[str, Any]:
        """Return one page of normalized comments plus pagination info.

        The page and the total are read with the same predicate in the same
        read transaction, so ``total_pages`` always matches the page.
        """
        list_query, count_query = build_comment_queries(params)
        rows, total = await self._store.fetch_page(list_query, count_query)

        comments = [normalize_comment(row) for row in rows]
        return {
            "comments": comments,
            "pagination": {
                "page": params.page,
                "limit": params.limit,
                "total": total,
                "total_pages": total_pages(total, params.limit),
            },
        }

    async def get_comment(self, comment_id: str) -> NormalizedComment:
        row = await self._store.get_comment(comment_id)
        if row is None:
            logger.info("comment_not_found", comment_id=comment_id)
            raise CommentNotFoundError(comment_id=comment_id)
        return normalize_comment(row)

    async def get_stats(self) -> StoreStats:
        capabilities = await self._probe.get()
        return await self._store.get_stats(capabilities)

    async def list_themes(self) -> list[Theme]:
        """Themes exist only as precomputed tables; absent tables yield []."""
        capabilities = await self._probe.get()
        if not capabilities.theme_tables:
            logger.info("theme_tables_absent")
            return []
        return await self._store.list_themes()
