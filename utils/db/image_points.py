"""
Image Point Operations.

This module handles reads and writes of the image_points table.
"""

import sqlite3
from datetime import UTC, datetime
from typing import Any


def upsert_image_point(conn: sqlite3.Connection, row: dict[str, Any]) -> None:
    """Inserts a point or replaces the existing one with the same image_id."""
    conn.execute(
        """
        INSERT OR REPLACE INTO image_points (
            image_id,
            storage_key,
            latitude,
            longitude,
            updated_at
        ) VALUES (?, ?, ?, ?, ?);
        """,
        (
            row["image_id"],
            row["storage_key"],
            row["latitude"],
            row["longitude"],
            row.get("updated_at") or datetime.now(UTC).isoformat(),
        ),
    )
    conn.commit()


def fetch_image_points(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """Returns all points ordered by image_id."""
    cur = conn.execute(
        """
        SELECT image_id, storage_key, latitude, longitude, updated_at
        FROM image_points
        ORDER BY image_id;
        """
    )
    return cur.fetchall()


def count_image_points(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) FROM image_points").fetchone()
    return row[0] if row else 0
