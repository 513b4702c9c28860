"""SQL composition for the filtered comment listing and its count query.

The listing and its COUNT must agree on the predicate, otherwise
``totalPages`` drifts from the page actually returned.  Both queries are
built here from one ``WHERE`` clause and one parameter list; the count
query simply drops the trailing ``LIMIT``/``OFFSET`` parameters.

Binding is positional, so parameters are appended in exactly the order
their ``?`` placeholders appear in the clause text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_SELECT_COLUMNS = """\
SELECT cc.comment_id,
       cc.status,
       cc.structured_sections,
       cc.created_at,
       c.attributes_json,
       c.id AS original_id
FROM condensed_comments cc
LEFT JOIN comments c ON cc.comment_id = c.id"""

_COUNT_FROM = """\
SELECT COUNT(*) AS total
FROM condensed_comments cc
LEFT JOIN comments c ON cc.comment_id = c.id"""

# comment_id breaks created_at ties so pages never overlap.
_ORDER_BY = "ORDER BY cc.created_at DESC, cc.comment_id DESC"

# Largest value SQLite accepts as a bound INTEGER.
_SQLITE_MAX_INT = 2**63 - 1


@dataclass(frozen=True)
class BuiltQuery:
    sql: str
    params: tuple[Any, ...]


@dataclass(frozen=True)
class CommentListParams:
    """Validated listing parameters; ``page`` and ``limit`` are already clamped."""

    page: int = 1
    limit: int = 20
    search: str = ""
    entity: str = ""
    status: str = "completed"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_request(
        cls,
        *,
        page: Any = None,
        limit: Any = None,
        search: str | None = None,
        entity: str | None = None,
        status: str | None = None,
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> CommentListParams:
        """Coerce raw query-string values into clamped listing parameters.

        Non-numeric or missing ``page`` becomes 1 and ``page < 1`` is raised
        to 1.  Non-numeric or missing ``limit`` becomes ``default_limit``;
        otherwise it is clamped into ``[1, max_limit]``.  ``page`` is capped so
        the OFFSET still fits a SQLite INTEGER; such a page is past the end
        and returns no rows.
        """
        limit_num = min(max(1, _coerce_int(limit, default_limit)), max(1, max_limit))
        page_num = min(max(1, _coerce_int(page, 1)), _SQLITE_MAX_INT // limit_num)
        return cls(
            page=page_num,
            limit=limit_num,
            search=search or "",
            entity=entity or "",
            status=status or "completed",
        )


def _coerce_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def build_where_clause(params: CommentListParams) -> tuple[str, list[Any]]:
    """Return the shared ``WHERE`` clause and its ordered parameters."""
    clause = "WHERE cc.status = ?"
    values: list[Any] = [params.status]

    if params.search:
        term = f"%{params.search}%"
        clause += " AND (c.attributes_json LIKE ? OR cc.structured_sections LIKE ?)"
        values.extend([term, term])

    if params.entity:
        clause += " AND cc.structured_sections LIKE ?"
        values.append(f"%{params.entity}%")

    return clause, values


def build_comment_queries(params: CommentListParams) -> tuple[BuiltQuery, BuiltQuery]:
    """Build the paginated listing query and its matching count query."""
    where_clause, values = build_where_clause(params)

    list_sql = f"{_SELECT_COLUMNS}\n{where_clause}\n{_ORDER_BY}\nLIMIT ? OFFSET ?"
    list_params = (*values, params.limit, params.offset)

    count_sql = f"{_COUNT_FROM}\n{where_clause}"
    # Same predicate, pagination parameters stripped.
    count_params = list_params[:-2]

    return BuiltQuery(list_sql, list_params), BuiltQuery(count_sql, count_params)


def build_export_queries() -> tuple[BuiltQuery, BuiltQuery]:
    """Build the count and row queries for a full export of completed analyses."""
    count_sql = "SELECT COUNT(*) AS count FROM condensed_comments WHERE status = ?"
    rows_sql = """\
SELECT cc.comment_id,
       cc.structured_sections,
       cc.created_at,
       c.attributes_json
FROM condensed_comments cc
LEFT JOIN comments c ON cc.comment_id = c.id
WHERE cc.status = ?
""" + _ORDER_BY
    params = ("completed",)
    return BuiltQuery(count_sql, params), BuiltQuery(rows_sql, params)


def total_pages(total: int, limit: int) -> int:
    """``ceil(total / limit)`` without floats."""
    if limit <= 0:
        return 0
    return -(-total // limit)
