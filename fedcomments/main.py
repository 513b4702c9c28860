"""Comment analysis API: FastAPI application entry point.

Wires the SQLite store, the services, and the routes together.  Loads
configuration from ``.env`` and ``config/config.yaml``, configures structured
logging, and probes the store once at startup to decide between the
precomputed-taxonomy and fallback-mining entity paths.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from fedcomments.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from fedcomments.api.routes import router as api_router
from fedcomments.api.routes import service_router
from fedcomments.config.loader import load_config
from fedcomments.config.settings import Settings
from fedcomments.providers.store.sqlite_comment_store import SQLiteCommentStore
from fedcomments.services.capability_probe import CapabilityProbe
from fedcomments.services.comment_service import CommentService
from fedcomments.services.entity_miner import EntityMiningService
from fedcomments.services.export_service import ExportService
from fedcomments.utils.errors import StorageError
from fedcomments.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct the store and every service.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    store = SQLiteCommentStore(db_path=app_settings.database_path)
    probe = CapabilityProbe(store)

    return {
        "comment_store": store,
        "capability_probe": probe,
        "comment_service": CommentService(store=store, probe=probe),
        "entity_service": EntityMiningService(store=store, probe=probe),
        "export_service": ExportService(store=store, max_rows=app_settings.export_max_rows),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build components (unless injected) and run the capability probe."""
    components = getattr(application.state, "components", None)
    if components is None:
        components = _build_all(application.state.settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    probe: CapabilityProbe | None = components.get("capability_probe")
    mining_mode = None
    if probe is not None:
        try:
            mining_mode = (await probe.get()).mining_mode.value
        except StorageError as exc:
            # Decided on first entities/stats/themes request instead.
            _logger.warning("capability_probe_deferred", error=exc.message)

    _logger.info(
        "app_startup",
        environment=application.state.settings.app_env,
        database=application.state.settings.database_path,
        mining_mode=mining_mode,
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to use; defaults to the module-level environment settings.
    components:
        Optional pre-built components (store, services) to place on
        ``app.state`` instead of building them from settings.
    """
    s = app_settings or settings
    config = load_config(settings=s)
    api_config = config.get("api", {})
    cors_config = config.get("cors", {})

    application = FastAPI(
        title=api_config.get("name", "Federal Register Analysis Tool API"),
        version=str(api_config.get("version", "1.0.0")),
        description=(
            "Browse condensed Federal Register public comments, mine and rank "
            "the entities they mention, and export small dockets in bulk."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = s
    application.state.config = config
    if components is not None:
        application.state.components = components

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(
        application,
        allowed_origins=cors_config.get("allowed_origins"),
        allow_methods=cors_config.get("allow_methods"),
        allow_headers=cors_config.get("allow_headers"),
    )

    register_exception_handlers(application)

    # -- Routes --
    application.include_router(service_router)
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "fedcomments.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
