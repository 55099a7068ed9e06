"""
Image Map Services Package.

This package contains service layer modules that encapsulate business logic,
separating it from Flask routes for better testability and maintainability.

ARCHITECTURE RULE:
- Services may ONLY import from core/* modules
- Services MUST NOT import directly from utils/, ingestion/
"""

from web.services import (
    points_service,
    upload_service,
)

__all__ = [
    "points_service",
    "upload_service",
]
