"""Tolerant JSON parsing and priority-chain field lookup.

Raw submissions arrive from several upstream sources, each with its own
attribute names for the same logical field (``comment`` vs ``commentText``
vs ``content``).  Rather than probing objects dynamically, every logical
field is described by an explicit priority chain:

    TEXT_CHAIN = ("comment", "commentText", "content")

An entry in a chain is either a single key or a tuple of keys whose
non-empty values are space-joined (``("firstName", "lastName")``).  The
first entry that yields a non-empty value wins.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Union

import structlog

logger = structlog.get_logger(logger_name=__name__)

ChainEntry = Union[str, tuple[str, ...]]


def parse_json_object(
    raw: str | bytes | None,
    *,
    comment_id: Any = None,
    field_name: str = "json",
    log_level: str = "warning",
) -> dict[str, Any]:
    """Parse a JSON text column into a dict, never raising.

    ``None``, malformed JSON, and JSON values that are not objects all
    degrade to an empty dict.  Failures are logged at *log_level* with the
    comment id so bad rows can be traced without breaking the request.
    """
    if raw is None or raw == "":
        return {}
    log = getattr(logger, log_level)
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        log(
            "json_parse_failed",
            comment_id=comment_id,
            field=field_name,
            error=str(exc),
        )
        return {}

    if not isinstance(parsed, dict):
        log(
            "json_not_an_object",
            comment_id=comment_id,
            field=field_name,
            json_type=type(parsed).__name__,
        )
        return {}
    return parsed


def _as_text(value: Any) -> str:
    """Return *value* as a string, or "" when it counts as empty.

    Empty means None, blank strings, objects, arrays, ``false`` and numeric
    zero.  ``true`` renders as JSON does.
    """
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else ""
    if isinstance(value, (int, float)):
        return str(value) if value else ""
    if isinstance(value, str):
        return value if value.strip() else ""
    return str(value)


def resolve_field(attributes: Mapping[str, Any], chain: Sequence[ChainEntry]) -> str:
    """Resolve a logical field from *attributes* using a priority chain.

    Returns the first non-empty value in chain order, or ``""``.
    """
    for entry in chain:
        if isinstance(entry, tuple):
            parts = [_as_text(attributes.get(key)) for key in entry]
            joined = " ".join(part for part in parts if part)
            if joined:
                return joined
            continue

        value = _as_text(attributes.get(entry))
        if value:
            return value
    return ""
