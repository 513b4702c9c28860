"""Bounded full export of completed analyses.

The export is unpaginated, so it is refused outright above a fixed row
ceiling.  The count is taken first and no rows are read when it is over;
the caller gets the true count and is expected to fall back to the
paginated listing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog

from fedcomments.interfaces.comment_store import ICommentStore
from fedcomments.services.query_builder import build_export_queries
from fedcomments.services.record_normalizer import normalize_export_row
from fedcomments.utils.errors import ExportTooLargeError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_EXPORT_MAX_ROWS = 100


class ExportService:
    """Guards and materializes the bulk export."""

    def __init__(self, store: ICommentStore, max_rows: int = DEFAULT_EXPORT_MAX_ROWS) -> None:
        self._store = store
        self._max_rows = max_rows

    @property
    def max_rows(self) -> int:
        return self._max_rows

    async def export_completed(self) -> dict[str, Any]:
        """Return every completed analysis in export form.

        Raises
        ------
        ExportTooLargeError
            More than ``max_rows`` completed analyses exist.
        """
        count_query, rows_query = build_export_queries()
        count, rows = await self._store.fetch_export(count_query, rows_query, self._max_rows)

        if rows is None:
            logger.warning("export_refused", total_comments=count, max_rows=self._max_rows)
            raise ExportTooLargeError(total_comments=count)

        comments = [normalize_export_row(row) for row in rows]
        logger.info("export_built", total_comments=len(comments))
        return {
            "comments": comments,
            "export_date": datetime.now(timezone.utc).isoformat(),
            "total_comments": len(comments),
        }
