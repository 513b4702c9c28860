"""Abstract base class for the comment store.

# ─── ADAPTER PATTERN ─────────────────────────────────────────────────
#
# Services depend on ICommentStore, never on aiosqlite directly.  The
# concrete implementation is SQLiteCommentStore
# (fedcomments/providers/store/sqlite_comment_store.py).  Unit tests for
# the services substitute AsyncMock stores.
#
# Every method acquires and releases its own connection; nothing is held
# between calls.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fedcomments.models.comment import StoreStats
from fedcomments.models.entities import Entity, StoreCapabilities, Theme
from fedcomments.services.query_builder import BuiltQuery


class ICommentStore(ABC):
    """Contract for read access to comments, analyses and taxonomy tables.

    Rows are returned as plain dicts keyed by column name.  Any connection
    or query failure is raised as
    :class:`~fedcomments.utils.errors.StorageError`.
    """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""

    @abstractmethod
    async def probe_capabilities(self) -> StoreCapabilities:
        """Report which optional taxonomy tables exist."""

    @abstractmethod
    async def fetch_page(
        self,
        list_query: BuiltQuery,
        count_query: BuiltQuery,
    ) -> tuple[list[dict[str, Any]], int]:
        """Run a listing query and its count query in one read transaction.

        Returns
        -------
        tuple
            ``(rows, total)``.
        """

    @abstractmethod
    async def get_comment(self, comment_id: str) -> dict[str, Any] | None:
        """Fetch one analysis joined to its submission, or None."""

    @abstractmethod
    async def fetch_export(
        self,
        count_query: BuiltQuery,
        rows_query: BuiltQuery,
        max_rows: int,
    ) -> tuple[int, list[dict[str, Any]] | None]:
        """Count eligible rows and fetch them only when within *max_rows*.

        Returns
        -------
        tuple
            ``(count, rows)`` where ``rows`` is None when ``count > max_rows``.
        """

    @abstractmethod
    async def list_completed_sections(self) -> list[tuple[Any, str]]:
        """Return ``(comment_id, structured_sections)`` for completed analyses."""

    @abstractmethod
    async def list_taxonomy_entities(self) -> list[Entity]:
        """Return precomputed entities ranked by associated comment count."""

    @abstractmethod
    async def list_themes(self) -> list[Theme]:
        """Return precomputed themes ranked by associated comment count."""

    @abstractmethod
    async def get_stats(self, capabilities: StoreCapabilities) -> StoreStats:
        """Return aggregate counts; taxonomy counts are 0 when tables are absent."""
