"""One-time detection of the optional taxonomy tables.

The entity and theme tables are produced by a separate taxonomy job and may
not exist in a given docket database.  Instead of attempting the taxonomy
query on every request and catching the failure, the schema is inspected
once (normally during application startup) and the result is reused for the
life of the process.
"""

from __future__ import annotations

import structlog

from fedcomments.interfaces.comment_store import ICommentStore
from fedcomments.models.entities import StoreCapabilities

logger = structlog.get_logger(logger_name=__name__)


class CapabilityProbe:
    """Caches the first successful :class:`StoreCapabilities` lookup.

    A failed lookup (store unreachable) is not cached, so a probe that
    fails at startup is attempted again on first use.
    """

    def __init__(self, store: ICommentStore) -> None:
        self._store = store
        self._capabilities: StoreCapabilities | None = None

    @property
    def decided(self) -> bool:
        return self._capabilities is not None

    async def get(self) -> StoreCapabilities:
        if self._capabilities is None:
            capabilities = await self._store.probe_capabilities()
            self._capabilities = capabilities
            logger.info(
                "store_capabilities_probed",
                entity_tables=capabilities.entity_tables,
                theme_tables=capabilities.theme_tables,
                mining_mode=capabilities.mining_mode.value,
            )
        return self._capabilities
