"""
Ingestion Service Implementations.

Concrete implementations of the ingestion/interfaces contracts.
"""

from ingestion.services.dynamodb_record_store import DynamoDbRecordStore
from ingestion.services.exif_extractor import ExifGeoExtractor
from ingestion.services.local_fetcher import LocalDirectoryFetcher
from ingestion.services.memory_backends import InMemoryObjectStore, InMemoryRecordStore
from ingestion.services.s3_fetcher import S3Fetcher
from ingestion.services.sqlite_record_store import SqliteRecordStore

__all__ = [
    "DynamoDbRecordStore",
    "ExifGeoExtractor",
    "InMemoryObjectStore",
    "InMemoryRecordStore",
    "LocalDirectoryFetcher",
    "S3Fetcher",
    "SqliteRecordStore",
]
