"""
Points Service - Web Layer Service for the Map Points Listing.

Thin wrapper over core.points_core for web-specific concerns.
"""

from typing import Any

from core import points_core
from core.points_core import StoreError


def list_points() -> list[dict[str, Any]]:
    """
    Returns all stored image points.

    Delegates to core.points_core.
    """
    return points_core.list_points()


__all__ = ["StoreError", "list_points"]
