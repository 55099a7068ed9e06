"""
Ingestion Error Taxonomy.

Every failure a single notification can hit is one of these. The pipeline
catches them per item, logs them and moves on to the next notification.
"""


class IngestionError(Exception):
    """Base class for per-item ingestion failures."""

    step = "ingest"

    def __init__(self, message: str, reason: str = "unknown"):
        super().__init__(message)
        self.reason = reason


class FetchError(IngestionError):
    """
    The source object could not be read.

    Reasons: 'not_found', 'access_denied', 'unavailable'.
    """

    step = "fetch"

    def __init__(self, container: str, key: str, message: str, reason: str = "unavailable"):
        super().__init__(message, reason)
        self.container = container
        self.key = key


class ExtractionError(IngestionError):
    """
    No usable geotag could be read from the image stream.

    Reasons: 'unrecognized_format', 'missing_metadata', 'malformed_metadata',
    'missing_geotag', 'invalid_geotag'. Callers treat all of them the same.
    """

    step = "extract"


class StoreError(IngestionError):
    """
    The record could not be persisted.

    Reasons: 'validation', 'throttled', 'unavailable'.
    """

    step = "persist"

    def __init__(self, image_id: str, message: str, reason: str = "unavailable"):
        super().__init__(message, reason)
        self.image_id = image_id
