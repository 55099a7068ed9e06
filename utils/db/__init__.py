"""
Image Point Database Module.

This package provides SQLite access for the local record store.

Usage:
    from utils.db import get_connection, upsert_image_point
    # or
    from utils.db.image_points import upsert_image_point
"""

# Connection and Schema
from utils.db.connection import (
    DB_FILENAME,
    _get_db_path,
    _init_schema,
    closing_connection,
    get_connection,
)

# Image Point Operations
from utils.db.image_points import (
    count_image_points,
    fetch_image_points,
    upsert_image_point,
)

__all__ = [
    # Connection
    "DB_FILENAME",
    "_get_db_path",
    "closing_connection",
    "get_connection",
    "_init_schema",
    # Image points
    "upsert_image_point",
    "fetch_image_points",
    "count_image_points",
]
