"""
Database initialization helper.

Provides programmatic Alembic migration runner for:
- ListingRepository initialization
- Test fixtures
- The ingestion CLI before each run

All table creation happens through Alembic migrations.

Also provides BaseRepository class for SQLite access with scoped
connection handling.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from alembic import command
from alembic.config import Config as AlembicConfig

from .exceptions import StorageError

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).parent.parent


def ensure_schema(db_path: str) -> None:
    """
    Run Alembic migrations to head for the given database.

    Safe to call multiple times - Alembic tracks applied migrations.

    Args:
        db_path: Path to the SQLite database file.
                 Parent directory is created if missing.
    """
    # Configure Alembic programmatically; alembic.ini is only for the alembic CLI
    alembic_cfg = AlembicConfig()
    alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")

    # Suppress Alembic's default logging to avoid noise in tests
    logging.getLogger("alembic").setLevel(logging.WARNING)

    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        command.upgrade(alembic_cfg, "head")
        logger.debug(f"Schema initialized for {db_path}")
    except Exception as e:
        logger.error(f"Migration failed for {db_path}: {e}")
        raise StorageError(f"Migration failed for {db_path}: {e}") from e


class BaseRepository:
    """
    Base class for SQLite repositories.

    Provides common functionality for:
    - Thread-local connection
    - Transaction context management
    - Scoped use via ``with repo:`` (connection closed on exit)

    Every sqlite3 error is re-raised as StorageError.
    """

    def __init__(self, db_path: Optional[str] = None, use_wal: bool = False):
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database. Defaults to Config.database_path()
            use_wal: Enable WAL mode
        """
        if db_path is None:
            from .config import Config
            db_path = Config.database_path()

        self.db_path = str(db_path)
        self._local = threading.local()
        self._use_wal = use_wal

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'connection') or self._local.connection is None:
            try:
                conn = sqlite3.connect(self.db_path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                if self._use_wal:
                    conn.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
            self._local.connection = conn
        return self._local.connection

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Context manager for transactions with automatic commit/rollback."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            conn.rollback()
            raise

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Read-only cursor; sqlite3 errors become StorageError."""
        cursor = self._get_connection().cursor()
        try:
            yield cursor
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def close(self) -> None:
        """Close database connection."""
        if hasattr(self._local, 'connection') and self._local.connection:
            self._local.connection.close()
            self._local.connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
