"""Domain models: re-exports all public model classes.

    - comment.py   - analysis status, normalized/exported comment views, stats
    - entities.py  - entities, themes, mining mode and store capabilities
"""

from __future__ import annotations

from fedcomments.models.comment import (
    AnalysisStatus,
    ExportedComment,
    NormalizedComment,
    ProcessingStats,
    StoreStats,
)
from fedcomments.models.entities import (
    Entity,
    EntityType,
    MiningMode,
    StoreCapabilities,
    Theme,
)

__all__ = [
    "AnalysisStatus",
    "Entity",
    "EntityType",
    "ExportedComment",
    "MiningMode",
    "NormalizedComment",
    "ProcessingStats",
    "StoreCapabilities",
    "StoreStats",
    "Theme",
]
