"""Shared pytest fixtures for the comment analysis API test suite.

Tests build throwaway SQLite docket databases with the same table layout the
scraping and condensing tools produce, then read them through the real
read-only store.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

import pytest

from fedcomments.providers.store.sqlite_comment_store import SQLiteCommentStore

_CORE_SCHEMA = """\
CREATE TABLE comments (
    id              TEXT PRIMARY KEY,
    attributes_json TEXT
);
CREATE TABLE condensed_comments (
    comment_id          TEXT PRIMARY KEY,
    status              TEXT NOT NULL DEFAULT 'pending',
    structured_sections TEXT,
    created_at          TEXT
);
"""

_ENTITY_SCHEMA = """\
CREATE TABLE entity_taxonomy (
    entity_id   INTEGER PRIMARY KEY,
    entity_name TEXT NOT NULL,
    entity_type TEXT
);
CREATE TABLE comment_entities (
    comment_id TEXT NOT NULL,
    entity_id  INTEGER NOT NULL
);
"""

_THEME_SCHEMA = """\
CREATE TABLE theme_hierarchy (
    theme_id          INTEGER PRIMARY KEY,
    theme_name        TEXT NOT NULL,
    theme_description TEXT
);
CREATE TABLE comment_themes (
    comment_id TEXT NOT NULL,
    theme_id   INTEGER NOT NULL
);
"""


def _as_json_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


class CommentDB:
    """Writable handle on a test docket database."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._conn = sqlite3.connect(str(path), isolation_level=None)
        self._conn.executescript(_CORE_SCHEMA)

    def add_comment(
        self,
        comment_id: str,
        *,
        attributes: Any = None,
        sections: Any = None,
        status: str = "completed",
        created_at: str = "2025-07-01T12:00:00",
        with_submission: bool = True,
    ) -> None:
        """Insert an analysis and (unless disabled) its raw submission.

        ``attributes`` / ``sections`` may be dicts (JSON-encoded here) or raw
        strings, which are stored verbatim so malformed JSON can be tested.
        """
        if with_submission:
            self._conn.execute(
                "INSERT INTO comments (id, attributes_json) VALUES (?, ?)",
                (comment_id, _as_json_text(attributes)),
            )
        self._conn.execute(
            "INSERT INTO condensed_comments (comment_id, status, structured_sections, created_at) "
            "VALUES (?, ?, ?, ?)",
            (comment_id, status, _as_json_text(sections), created_at),
        )

    def add_submission_only(self, comment_id: str, attributes: Any = None) -> None:
        self._conn.execute(
            "INSERT INTO comments (id, attributes_json) VALUES (?, ?)",
            (comment_id, _as_json_text(attributes)),
        )

    def enable_entities(self) -> None:
        self._conn.executescript(_ENTITY_SCHEMA)

    def enable_themes(self) -> None:
        self._conn.executescript(_THEME_SCHEMA)

    def add_taxonomy_entity(
        self,
        entity_id: int,
        name: str,
        entity_type: str,
        comment_ids: list[str],
    ) -> None:
        self._conn.execute(
            "INSERT INTO entity_taxonomy (entity_id, entity_name, entity_type) VALUES (?, ?, ?)",
            (entity_id, name, entity_type),
        )
        self._conn.executemany(
            "INSERT INTO comment_entities (comment_id, entity_id) VALUES (?, ?)",
            [(cid, entity_id) for cid in comment_ids],
        )

    def add_theme(
        self,
        theme_id: int,
        name: str,
        description: str | None,
        comment_ids: list[str],
    ) -> None:
        self._conn.execute(
            "INSERT INTO theme_hierarchy (theme_id, theme_name, theme_description) VALUES (?, ?, ?)",
            (theme_id, name, description),
        )
        self._conn.executemany(
            "INSERT INTO comment_themes (comment_id, theme_id) VALUES (?, ?)",
            [(cid, theme_id) for cid in comment_ids],
        )

    def close(self) -> None:
        self._conn.close()


@pytest.fixture
def comment_db(tmp_path: Path):
    """An empty docket database with the core tables only."""
    db = CommentDB(tmp_path / "docket.sqlite")
    yield db
    db.close()


@pytest.fixture
def store(comment_db: CommentDB) -> SQLiteCommentStore:
    return SQLiteCommentStore(db_path=comment_db.path)
