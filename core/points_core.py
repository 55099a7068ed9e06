"""
Points Core - Read Side of the Image Map.

Lists stored image points for the map client.
"""

import threading
from typing import Any

from config import get_config
from core.ingest_core import build_record_store
from ingestion.interfaces.errors import StoreError
from ingestion.interfaces.record_store import PointCatalogInterface

_catalog: PointCatalogInterface | None = None
_catalog_lock = threading.Lock()


def get_catalog() -> PointCatalogInterface:
    """Returns the process-wide catalog built from the configured record store."""
    global _catalog
    with _catalog_lock:
        if _catalog is None:
            _catalog = build_record_store(get_config())
        return _catalog


def list_points(catalog: PointCatalogInterface | None = None) -> list[dict[str, Any]]:
    """
    Returns every stored point as a JSON-ready dict, ordered by imageId.

    Raises:
        StoreError: The record store could not be read.
    """
    if catalog is None:
        catalog = get_catalog()
    records = catalog.list_records()
    return [record.to_item() for record in records]


__all__ = ["StoreError", "get_catalog", "list_points"]
