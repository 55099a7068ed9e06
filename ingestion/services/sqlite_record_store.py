"""
SQLite Record Store - Local Image Point Persistence.

Implements RecordStoreInterface and PointCatalogInterface on the
utils.db image_points table.
"""

import sqlite3
import threading
from pathlib import Path

from ingestion.interfaces.errors import StoreError
from ingestion.interfaces.record_store import (
    ImageRecord,
    PointCatalogInterface,
    RecordStoreInterface,
    validate_record,
)
from logging_config import get_logger
from utils.db import fetch_image_points, get_connection, upsert_image_point

logger = get_logger(__name__)


class SqliteRecordStore(RecordStoreInterface, PointCatalogInterface):
    """
    Keeps one connection open for the lifetime of the store.

    Features:
    - INSERT OR REPLACE keyed by image_id (upsert)
    - Lock around every statement so fan-out workers can share the store
    """

    def __init__(self, db_path: str | Path | None = None):
        """
        Args:
            db_path: SQLite file. Uses OUTPUT_DIR from config if not provided.
        """
        self._db_path = db_path
        self._conn = get_connection(db_path)
        self._lock = threading.Lock()

    def close(self) -> None:
        """Close owned resources."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("", "Record store is closed", reason="unavailable")
        return self._conn

    def put(self, record: ImageRecord) -> None:
        validate_record(record)
        row = {
            "image_id": record.image_id,
            "storage_key": record.storage_key,
            "latitude": float(record.latitude),
            "longitude": float(record.longitude),
        }
        with self._lock:
            conn = self._connection()
            try:
                upsert_image_point(conn, row)
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise StoreError(
                    record.image_id, f"SQLite rejected record: {e}", reason="validation"
                ) from e
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(
                    record.image_id, f"SQLite write failed: {e}", reason="unavailable"
                ) from e

    def list_records(self) -> list[ImageRecord]:
        with self._lock:
            try:
                rows = fetch_image_points(self._connection())
            except sqlite3.Error as e:
                raise StoreError("", f"SQLite read failed: {e}", reason="unavailable") from e
        return [
            ImageRecord(
                image_id=row["image_id"],
                storage_key=row["storage_key"],
                latitude=row["latitude"],
                longitude=row["longitude"],
            )
            for row in rows
        ]
