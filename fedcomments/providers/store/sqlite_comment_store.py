"""SQLite-backed read access to comments, condensed analyses and taxonomy.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing ICommentStore).
#
# Database: one SQLite file per docket, written by the scraping and
# condensing tools.  This API only reads it:
#   - comments            (id, attributes_json)
#   - condensed_comments  (comment_id, status, structured_sections, created_at)
#   - entity_taxonomy / comment_entities   - optional
#   - theme_hierarchy / comment_themes     - optional
#
# Every method opens its own connection with ``async with
# aiosqlite.connect(...)`` so the connection is closed on every exit path.
# Connections use a ``mode=ro`` URI: a missing file is a connection error
# instead of a freshly created empty database.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import math
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from fedcomments.interfaces.comment_store import ICommentStore
from fedcomments.models.comment import ProcessingStats, StoreStats
from fedcomments.models.entities import Entity, EntityType, StoreCapabilities, Theme
from fedcomments.services.query_builder import BuiltQuery
from fedcomments.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_ENTITY_TABLES = ("entity_taxonomy", "comment_entities")
_THEME_TABLES = ("theme_hierarchy", "comment_themes")

# ── Queries ───────────────────────────────────────────────────────────

_SELECT_TABLES = "SELECT name FROM sqlite_master WHERE type = 'table';"

_SELECT_COMMENT = """\
SELECT cc.comment_id,
       cc.status,
       cc.structured_sections,
       cc.created_at,
       c.attributes_json,
       c.id AS original_id
FROM condensed_comments cc
LEFT JOIN comments c ON cc.comment_id = c.id
WHERE cc.comment_id = ?;
"""

_SELECT_COMPLETED_SECTIONS = """\
SELECT comment_id, structured_sections
FROM condensed_comments
WHERE status = 'completed' AND structured_sections IS NOT NULL
ORDER BY rowid;
"""

_SELECT_TAXONOMY_ENTITIES = """\
SELECT et.entity_id,
       et.entity_name,
       et.entity_type,
       COUNT(ce.comment_id) AS comment_count
FROM entity_taxonomy et
LEFT JOIN comment_entities ce ON et.entity_id = ce.entity_id
GROUP BY et.entity_id, et.entity_name, et.entity_type
HAVING comment_count > 0
ORDER BY comment_count DESC, et.entity_id ASC;
"""

_SELECT_THEMES = """\
SELECT th.theme_id,
       th.theme_name,
       th.theme_description,
       COUNT(ct.comment_id) AS comment_count
FROM theme_hierarchy th
LEFT JOIN comment_themes ct ON th.theme_id = ct.theme_id
GROUP BY th.theme_id, th.theme_name, th.theme_description
ORDER BY comment_count DESC, th.theme_id ASC;
"""

_COUNT_COMMENTS = "SELECT COUNT(*) AS count FROM comments;"
_COUNT_BY_STATUS = "SELECT status, COUNT(*) AS count FROM condensed_comments GROUP BY status;"
_COUNT_ENTITIES = "SELECT COUNT(*) AS count FROM entity_taxonomy;"
_COUNT_THEMES = "SELECT COUNT(*) AS count FROM theme_hierarchy;"


class SQLiteCommentStore(ICommentStore):
    """Read-only SQLite comment store."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def get_provider_name(self) -> str:
        return "sqlite"

    # ── Connection scope ───────────────────────────────────────────────

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a read-only connection; sqlite errors become StorageError."""
        uri = f"{self._db_path.resolve().as_uri()}?mode=ro"
        try:
            async with aiosqlite.connect(uri, uri=True) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except sqlite3.Error as exc:
            logger.error("sqlite_error", path=str(self._db_path), error=str(exc))
            raise StorageError(
                f"Database error at {self._db_path}: {exc}"
            ) from exc

    @staticmethod
    async def _fetch_count(db: aiosqlite.Connection, query: BuiltQuery) -> int:
        cursor = await db.execute(query.sql, query.params)
        row = await cursor.fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    # ── Capabilities ───────────────────────────────────────────────────

    async def probe_capabilities(self) -> StoreCapabilities:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_TABLES)
            tables = {row["name"] for row in await cursor.fetchall()}
        return StoreCapabilities(
            entity_tables=all(name in tables for name in _ENTITY_TABLES),
            theme_tables=all(name in tables for name in _THEME_TABLES),
        )

    # ── Listing ────────────────────────────────────────────────────────

    async def fetch_page(
        self,
        list_query: BuiltQuery,
        count_query: BuiltQuery,
    ) -> tuple[list[dict[str, Any]], int]:
        async with self._connect() as db:
            # Page and total come from one snapshot.
            await db.execute("BEGIN;")
            try:
                cursor = await db.execute(list_query.sql, list_query.params)
                rows = [dict(row) for row in await cursor.fetchall()]
                total = await self._fetch_count(db, count_query)
            finally:
                await db.commit()
        return rows, total

    async def get_comment(self, comment_id: str) -> dict[str, Any] | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_COMMENT, (comment_id,))
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    # ── Export ─────────────────────────────────────────────────────────

    async def fetch_export(
        self,
        count_query: BuiltQuery,
        rows_query: BuiltQuery,
        max_rows: int,
    ) -> tuple[int, list[dict[str, Any]] | None]:
        async with self._connect() as db:
            await db.execute("BEGIN;")
            try:
                count = await self._fetch_count(db, count_query)
                if count > max_rows:
                    return count, None
                cursor = await db.execute(rows_query.sql, rows_query.params)
                rows = [dict(row) for row in await cursor.fetchall()]
            finally:
                await db.commit()
        return count, rows

    # ── Entities & themes ──────────────────────────────────────────────

    async def list_completed_sections(self) -> list[tuple[Any, str]]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_COMPLETED_SECTIONS)
            rows = await cursor.fetchall()
        return [(row["comment_id"], row["structured_sections"]) for row in rows]

    async def list_taxonomy_entities(self) -> list[Entity]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_TAXONOMY_ENTITIES)
            rows = await cursor.fetchall()
        return [
            Entity(
                entity_id=row["entity_id"],
                entity_name=str(row["entity_name"]).strip(),
                entity_type=EntityType.TAXONOMY,
                taxonomy_type=row["entity_type"],
                comment_count=row["comment_count"],
            )
            for row in rows
        ]

    async def list_themes(self) -> list[Theme]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_THEMES)
            rows = await cursor.fetchall()
        return [
            Theme(
                theme_id=row["theme_id"],
                theme_name=row["theme_name"],
                theme_description=row["theme_description"],
                comment_count=row["comment_count"],
            )
            for row in rows
        ]

    # ── Statistics ─────────────────────────────────────────────────────

    async def get_stats(self, capabilities: StoreCapabilities) -> StoreStats:
        async with self._connect() as db:
            total_comments = await self._fetch_count(db, BuiltQuery(_COUNT_COMMENTS, ()))

            cursor = await db.execute(_COUNT_BY_STATUS)
            by_status = {row["status"]: row["count"] for row in await cursor.fetchall()}

            entities = 0
            if capabilities.entity_tables:
                entities = await self._fetch_count(db, BuiltQuery(_COUNT_ENTITIES, ()))
            themes = 0
            if capabilities.theme_tables:
                themes = await self._fetch_count(db, BuiltQuery(_COUNT_THEMES, ()))

        processing = ProcessingStats(
            pending=by_status.get("pending", 0),
            completed=by_status.get("completed", 0),
            failed=by_status.get("failed", 0),
        )
        completion_rate = (
            math.floor(processing.completed / total_comments * 100 + 0.5) if total_comments > 0 else 0
        )
        return StoreStats(
            total_comments=total_comments,
            condensed_comments=processing.completed,
            entities=entities,
            themes=themes,
            processing=processing,
            completion_rate=completion_rate,
        )
