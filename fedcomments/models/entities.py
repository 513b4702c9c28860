"""Entity and theme models plus the store capability flags.

Entities come from one of two places:
  - the precomputed ``entity_taxonomy`` / ``comment_entities`` tables, or
  - fallback mining over condensed analyses (key points, categories and
    organization names found in the detailed content).

Themes only ever come from precomputed ``theme_hierarchy`` tables.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """Where an entity mention was found."""

    KEYPOINT = "keypoint"
    CATEGORY = "category"
    ORGANIZATION = "organization"
    TAXONOMY = "taxonomy"


class MiningMode(str, Enum):
    """Which entity source the store supports, decided once by a schema probe."""

    PRECOMPUTED = "precomputed"
    FALLBACK = "fallback"


class Entity(BaseModel):
    """A named, typed, frequency-counted mention."""

    model_config = ConfigDict(frozen=True)

    entity_name: str = Field(description="Trimmed name; identity is case-sensitive.")
    entity_type: EntityType
    comment_count: int = Field(ge=1, description="Occurrences across scanned comments.")
    entity_id: int | str | None = Field(default=None, description="Taxonomy id for precomputed entities.")
    taxonomy_type: str | None = Field(default=None, description="Stored taxonomy label for precomputed entities.")


class Theme(BaseModel):
    """A theme from the precomputed theme hierarchy."""

    model_config = ConfigDict(frozen=True)

    theme_id: int | str
    theme_name: str
    theme_description: str | None = None
    comment_count: int = 0


class StoreCapabilities(BaseModel):
    """Optional tables present in the store."""

    model_config = ConfigDict(frozen=True)

    entity_tables: bool = False
    theme_tables: bool = False

    @property
    def mining_mode(self) -> MiningMode:
        return MiningMode.PRECOMPUTED if self.entity_tables else MiningMode.FALLBACK
