"""
Centralized configuration for the listing ingestion backend.

Constants live on the Config class; anything deployment-specific is read
from the environment.
"""

import os
from pathlib import Path
from typing import List

from .exceptions import ConfigurationError


class Config:
    """Application configuration constants."""

    # === Reporting ===
    SUMMARY_PREVIEW_LENGTH = 100  # Summary characters shown in the listing dump
    REPORT_RULE_WIDTH = 80

    # === Ingestion ===
    DEFAULT_SOURCES = "apartments"
    DEFAULT_MODE = "merge"
    PREVIEW_LIMIT = 10

    # === Environment ===
    @staticmethod
    def database_url() -> str:
        """Storage connection descriptor. Required."""
        url = os.getenv("DATABASE_URL", "").strip()
        if not url:
            raise ConfigurationError("DATABASE_URL environment variable is not set")
        return url

    @staticmethod
    def database_path() -> str:
        """SQLite file path parsed from DATABASE_URL (sqlite:///<path>)."""
        url = Config.database_url()
        prefix = "sqlite:///"
        if not url.startswith(prefix):
            raise ConfigurationError(
                f"Unsupported DATABASE_URL '{url}': expected {prefix}<path>"
            )
        path = url[len(prefix):]
        if not path:
            raise ConfigurationError("DATABASE_URL is missing a database file path")
        return path

    @staticmethod
    def ingest_sources() -> List[str]:
        """Ordered source names to process. Default: apartments."""
        raw = os.getenv("INGEST_SOURCES", Config.DEFAULT_SOURCES)
        return [name.strip() for name in raw.split(",") if name.strip()]

    @staticmethod
    def ingest_mode() -> str:
        """Reconciliation mode: merge (incremental upsert) or bulk (clear and reseed)."""
        mode = os.getenv("INGEST_MODE", Config.DEFAULT_MODE).strip().lower()
        if mode not in ("merge", "bulk"):
            raise ConfigurationError(f"INGEST_MODE must be 'merge' or 'bulk', got '{mode}'")
        return mode

    @staticmethod
    def source_data_dir() -> str:
        """Directory holding the source CSV exports.
        Default: backend/data (next to the rentals package).
        """
        default = str(Path(__file__).parent.parent / "data")
        return os.getenv("SOURCE_DATA_DIR", default)

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()
