"""Entity listing: precomputed taxonomy first, deterministic text mining otherwise.

When the ``entity_taxonomy`` tables exist the ranked list comes straight
from SQL.  Otherwise every completed analysis is scanned and three kinds of
mention are counted:

    keypoint      - each ``keyPoints`` string (trimmed, longer than 2 chars)
    category      - the ``category`` string (trimmed)
    organization  - "<Capitalized> <Suffix>" matches in ``detailedContent``

Counts are per occurrence, not per comment.  The accumulator is keyed by
the trimmed name alone, so the first type seen for a name sticks.  Ranking
is by count descending with ties kept in first-seen order.

Design pattern: Service (stateless apart from the shared capability probe).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from fedcomments.interfaces.comment_store import ICommentStore
from fedcomments.models.entities import Entity, EntityType, MiningMode
from fedcomments.services.capability_probe import CapabilityProbe
from fedcomments.utils.json_fields import parse_json_object

logger = structlog.get_logger(logger_name=__name__)

ORGANIZATION_SUFFIXES: tuple[str, ...] = (
    "Health",
    "Medical",
    "Association",
    "Corp",
    "Inc",
    "LLC",
    "Company",
    "Group",
    "Systems",
    "Administration",
    "Institute",
    "Foundation",
    "Society",
    "Coalition",
    "Alliance",
    "Union",
    "Federation",
)

# One capitalized word, a single space, then a suffix from the vocabulary.
_ORGANIZATION_PATTERN = re.compile(
    r"\b([A-Z][a-z]+ (?:" + "|".join(ORGANIZATION_SUFFIXES) + r"))\b"
)

_MIN_KEYPOINT_LENGTH = 3


def extract_organizations(text: str) -> list[str]:
    """Return every organization-like match in *text*, in order, trimmed."""
    if not text:
        return []
    return [match.group(0).strip() for match in _ORGANIZATION_PATTERN.finditer(text)]


@dataclass
class _Tally:
    name: str
    entity_type: EntityType
    first_seen: int
    count: int = 0


class _EntityAccumulator:
    """Ordered name → tally map; first insertion fixes type and tie order."""

    def __init__(self) -> None:
        self._tallies: dict[str, _Tally] = {}

    def add(self, name: str, entity_type: EntityType) -> None:
        tally = self._tallies.get(name)
        if tally is None:
            tally = _Tally(name=name, entity_type=entity_type, first_seen=len(self._tallies))
            self._tallies[name] = tally
        tally.count += 1

    def ranked(self) -> list[Entity]:
        tallies = [t for t in self._tallies.values() if t.count > 0]
        tallies.sort(key=lambda t: (-t.count, t.first_seen))
        return [
            Entity(entity_name=t.name, entity_type=t.entity_type, comment_count=t.count)
            for t in tallies
        ]


def _is_well_formed(parsed: dict[str, Any]) -> bool:
    """A ``keyPoints`` list must hold only strings; otherwise the comment is skipped."""
    key_points = parsed.get("keyPoints")
    if isinstance(key_points, list):
        return all(isinstance(point, str) for point in key_points)
    return True


def _accumulate_sections(acc: _EntityAccumulator, parsed: dict[str, Any]) -> None:
    key_points = parsed.get("keyPoints")
    if isinstance(key_points, list):
        for point in key_points:
            name = point.strip()
            if len(name) >= _MIN_KEYPOINT_LENGTH:
                acc.add(name, EntityType.KEYPOINT)

    category = parsed.get("category")
    if isinstance(category, str) and category.strip():
        acc.add(category.strip(), EntityType.CATEGORY)

    detailed = parsed.get("detailedContent")
    if isinstance(detailed, str):
        for org in extract_organizations(detailed):
            acc.add(org, EntityType.ORGANIZATION)


def mine_entities(sections: Iterable[tuple[Any, str | None]]) -> list[Entity]:
    """Mine and rank entities from ``(comment_id, structured_sections)`` pairs.

    A comment whose sections are unparseable, not an object, or carry a
    non-string ``keyPoints`` item contributes nothing at all; the scan
    carries on with the remaining comments.  A ``keyPoints`` value that is
    not a list is ignored while the rest of the comment still counts.
    """
    acc = _EntityAccumulator()
    skipped = 0
    for comment_id, raw in sections:
        parsed = parse_json_object(
            raw,
            comment_id=comment_id,
            field_name="structured_sections",
            log_level="debug",
        )
        if not parsed:
            skipped += 1
            continue
        if not _is_well_formed(parsed):
            logger.debug("malformed_key_points_skipped", comment_id=comment_id)
            skipped += 1
            continue
        _accumulate_sections(acc, parsed)

    ranked = acc.ranked()
    logger.debug("entities_mined", entities=len(ranked), skipped_comments=skipped)
    return ranked


class EntityMiningService:
    """Produces the ranked entity list using whichever source the store supports."""

    def __init__(self, store: ICommentStore, probe: CapabilityProbe) -> None:
        self._store = store
        self._probe = probe

    async def mining_mode(self) -> MiningMode:
        capabilities = await self._probe.get()
        return capabilities.mining_mode

    async def list_entities(self) -> list[Entity]:
        mode = await self.mining_mode()
        if mode is MiningMode.PRECOMPUTED:
            return await self._store.list_taxonomy_entities()

        logger.info("entity_tables_absent", action="mining_condensed_comments")
        sections = await self._store.list_completed_sections()
        return mine_entities(sections)
