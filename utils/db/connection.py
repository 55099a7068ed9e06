"""
Database Connection and Schema Management.

This module handles SQLite connection creation and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from config import get_config

DB_FILENAME = "image_points.db"

# Module-level cache: initialize schema once per database path.
# Tests point OUTPUT_DIR at tmp dirs, so schema init must be keyed by db path (not process-global).
_schema_initialized_paths: set[Path] = set()


def _get_db_path() -> Path:
    cfg = get_config()
    output_dir = Path(cfg["OUTPUT_DIR"])
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / DB_FILENAME


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    global _schema_initialized_paths
    db_path = Path(db_path) if db_path else _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_key = db_path.resolve()
    # A file deleted or emptied since the last init needs its schema again.
    is_new_file = not db_path.exists() or db_path.stat().st_size == 0
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    if is_new_file or db_key not in _schema_initialized_paths:
        _init_schema(conn)
        _schema_initialized_paths.add(db_key)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def closing_connection(db_path: str | Path | None = None):
    """Context manager that creates a DB connection and guarantees it is closed.

    IMPORTANT: `with sqlite3.Connection as conn:` only manages transactions
    (commit/rollback), it does NOT call conn.close(). This context manager
    ensures the file descriptor is released when the block exits.

    Usage:
        with closing_connection() as conn:
            conn.execute("SELECT ...")
    """
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _init_schema(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS image_points (
            image_id TEXT PRIMARY KEY,
            storage_key TEXT NOT NULL,
            latitude REAL NOT NULL CHECK (latitude BETWEEN -90 AND 90),
            longitude REAL NOT NULL CHECK (longitude BETWEEN -180 AND 180),
            updated_at TEXT NOT NULL
        );
        """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_image_points_updated_at ON image_points(updated_at DESC);"
    )
    conn.commit()
