"""
Ingest Core - Wiring for the Ingestion Pipeline.

Builds the configured fetcher and record store once per process and hands
them to an IngestionPipeline. Entry points (trigger handler, local CLI)
go through here instead of constructing backends themselves.
"""

import threading
from typing import Any

from config import OBJECT_STORE_BACKENDS, RECORD_STORE_BACKENDS, get_config
from ingestion.events import IngestionNotification, notifications_from_event
from ingestion.interfaces.fetcher import ObjectFetcherInterface
from ingestion.interfaces.record_store import RecordStoreInterface
from ingestion.pipeline import IngestionPipeline, IngestionSummary
from ingestion.services.dynamodb_record_store import DynamoDbRecordStore
from ingestion.services.exif_extractor import ExifGeoExtractor
from ingestion.services.local_fetcher import LocalDirectoryFetcher
from ingestion.services.s3_fetcher import S3Fetcher
from ingestion.services.sqlite_record_store import SqliteRecordStore
from logging_config import get_logger
from utils.aws import create_client

logger = get_logger(__name__)

_pipeline: IngestionPipeline | None = None
_pipeline_lock = threading.Lock()


def build_fetcher(config: dict[str, Any]) -> ObjectFetcherInterface:
    backend = config["OBJECT_STORE_BACKEND"]
    if backend == "s3":
        return S3Fetcher(create_client("s3", config))
    if backend == "local":
        return LocalDirectoryFetcher(config["LOCAL_OBJECT_ROOT"])
    raise ValueError(
        f"Unknown OBJECT_STORE_BACKEND {backend!r}, expected one of {OBJECT_STORE_BACKENDS}"
    )


def build_record_store(config: dict[str, Any]):
    """Returns a store implementing both the write and the read port."""
    backend = config["RECORD_STORE_BACKEND"]
    if backend == "dynamodb":
        return DynamoDbRecordStore(create_client("dynamodb", config), config["TABLE_NAME"])
    if backend == "sqlite":
        return SqliteRecordStore()
    raise ValueError(
        f"Unknown RECORD_STORE_BACKEND {backend!r}, expected one of {RECORD_STORE_BACKENDS}"
    )


def build_pipeline(
    config: dict[str, Any] | None = None,
    store: RecordStoreInterface | None = None,
) -> IngestionPipeline:
    """
    Constructs a pipeline from configuration.

    Args:
        config: Configuration dict. Uses the process config if not provided.
        store: Record store to use instead of the configured one.
    """
    cfg = config or get_config()
    fetcher = build_fetcher(cfg)
    if store is None:
        store = build_record_store(cfg)
    logger.info(
        f"Ingestion pipeline: objects={cfg['OBJECT_STORE_BACKEND']}, "
        f"records={cfg['RECORD_STORE_BACKEND']}, workers={cfg['INGEST_MAX_WORKERS']}"
    )
    return IngestionPipeline(
        fetcher=fetcher,
        extractor=ExifGeoExtractor(),
        store=store,
        max_workers=cfg["INGEST_MAX_WORKERS"],
    )


def get_pipeline() -> IngestionPipeline:
    """Returns the process-wide pipeline, building it on first use."""
    global _pipeline
    with _pipeline_lock:
        if _pipeline is None:
            _pipeline = build_pipeline()
        return _pipeline


def process_event(
    event: dict[str, Any],
    deadline: float | None = None,
    pipeline: IngestionPipeline | None = None,
) -> IngestionSummary:
    """Decodes a trigger payload and runs the batch."""
    notifications = notifications_from_event(event)
    return (pipeline or get_pipeline()).process(notifications, deadline=deadline)


def ingest_object(
    container: str, key: str, pipeline: IngestionPipeline | None = None
) -> IngestionSummary:
    """Runs the pipeline for one explicit object as a single-notification batch."""
    notification = IngestionNotification(container_name=container, object_key=key)
    return (pipeline or get_pipeline()).process([notification])
