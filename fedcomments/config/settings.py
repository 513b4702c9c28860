"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (priority order):
#
#   1. **Environment variables** - e.g., DATABASE_PATH=/data/docket.sqlite
#   2. **.env file** - key=value lines in the project root .env file
#
# Field ``database_path`` maps to env var ``DATABASE_PATH`` (case-insensitive).
# Defaults apply when neither source sets a field.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Comment analysis API settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Storage ===
    # One SQLite file per docket, produced by the scraping/condensing tools.
    database_path: str = "data/databases/CMS-2025-0050-0031.sqlite"

    # === Listing / export limits ===
    default_page_size: int = 20
    max_page_size: int = 100
    export_max_rows: int = 100

    # === CORS ===
    # Local browser UIs (entity browser, admin panel).
    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
        "http://127.0.0.1:8000",
    ]

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3001
    app_env: str = "development"
    log_level: str = "INFO"
