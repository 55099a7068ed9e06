"""
Ingestion Pipeline Interfaces.

This package defines the abstract ports the ingestion pipeline depends on.
These interfaces enable:
- Swapping cloud, local and in-memory backends without touching the pipeline
- Dependency injection of long-lived client handles
- Independent testing of each component

ARCHITECTURE:
- IngestionPipeline only coordinates these interfaces
- Concrete implementations live in services/
- Every implementation reports failures with the shared error taxonomy
"""

from ingestion.interfaces.errors import (
    ExtractionError,
    FetchError,
    IngestionError,
    StoreError,
)
from ingestion.interfaces.extraction import (
    GeoPoint,
    MetadataExtractorInterface,
    coordinates_in_range,
)
from ingestion.interfaces.fetcher import ObjectFetcherInterface
from ingestion.interfaces.record_store import (
    ImageRecord,
    PointCatalogInterface,
    RecordStoreInterface,
    validate_record,
)

__all__ = [
    # Interfaces
    "MetadataExtractorInterface",
    "ObjectFetcherInterface",
    "RecordStoreInterface",
    "PointCatalogInterface",
    # Data Classes
    "GeoPoint",
    "ImageRecord",
    # Errors
    "IngestionError",
    "FetchError",
    "ExtractionError",
    "StoreError",
    # Helpers
    "coordinates_in_range",
    "validate_record",
]
