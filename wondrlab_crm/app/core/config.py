"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration; override them via environment
variables in a real deployment.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Wondrlab CRM API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    log_max_bytes: int = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
    log_backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "3"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "wondrlab_crm.db")

    # ``sqlite`` persists to ``database_url``; ``memory`` keeps all
    # records in process memory and loses them on restart.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

    # Listing defaults shared by every paginated endpoint.
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
    recent_activity_limit: int = int(os.getenv("RECENT_ACTIVITY_LIMIT", "10"))

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
    )

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before this module is imported.
settings = Settings()
