"""
Ingestion Pipeline - Object Created → Geotag → Image Point.

Coordinates the three ports for every notification in a batch:

    fetch (ObjectFetcher) → extract (MetadataExtractor) → put (RecordStore)

Every item is independent. A failure downgrades that single item to
skipped, is logged with its key, step and cause, and processing continues
with the next notification. Writes are upserts, so redelivered items are
safe to process again.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass, field
from typing import Iterable

from ingestion.events import IngestionNotification
from ingestion.interfaces.errors import ExtractionError, FetchError, StoreError
from ingestion.interfaces.extraction import MetadataExtractorInterface
from ingestion.interfaces.fetcher import ObjectFetcherInterface
from ingestion.interfaces.record_store import ImageRecord, RecordStoreInterface
from logging_config import get_logger

logger = get_logger(__name__)

STATUS_INGESTED = "ingested"
STATUS_FETCH_FAILED = "fetch_failed"
STATUS_EXTRACTION_FAILED = "extraction_failed"
STATUS_STORE_FAILED = "store_failed"
STATUS_ERROR = "error"
STATUS_ABANDONED = "abandoned"


@dataclass
class ItemOutcome:
    """
    Result of processing one notification.

    Attributes:
        notification: The notification that was processed.
        status: One of the STATUS_* constants.
        step: 'fetch', 'extract' or 'persist' for failures, None otherwise.
        error: Failure message, empty on success.
        record: The persisted record when status is 'ingested'.
    """

    notification: IngestionNotification
    status: str
    step: str | None = None
    error: str = ""
    record: ImageRecord | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_INGESTED


@dataclass
class IngestionSummary:
    """Per-item outcomes of one batch, in delivery order."""

    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def ingested(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(
            1 for o in self.outcomes if o.status not in (STATUS_INGESTED, STATUS_ABANDONED)
        )

    @property
    def abandoned(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_ABANDONED)

    def as_dict(self) -> dict:
        return {
            "processed": len(self.outcomes),
            "ingested": self.ingested,
            "failed": self.failed,
            "abandoned": self.abandoned,
            "failures": [
                {
                    "key": o.notification.object_key,
                    "status": o.status,
                    "step": o.step,
                    "error": o.error,
                }
                for o in self.outcomes
                if not o.succeeded
            ],
        }


class IngestionPipeline:
    """
    Processes batches of object-created notifications.

    The fetcher, extractor and store are long-lived handles owned by the
    caller and injected here; the pipeline itself keeps no state between
    notifications.
    """

    def __init__(
        self,
        fetcher: ObjectFetcherInterface,
        extractor: MetadataExtractorInterface,
        store: RecordStoreInterface,
        max_workers: int = 1,
    ):
        """
        Args:
            fetcher: Opens source objects.
            extractor: Reads the geotag from an object stream.
            store: Persists image records (upsert).
            max_workers: Items processed concurrently. 1 keeps delivery order
                sequential; larger values cap in-flight fetches and writes.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._fetcher = fetcher
        self._extractor = extractor
        self._store = store
        self._max_workers = max_workers

    def process(
        self,
        notifications: Iterable[IngestionNotification],
        deadline: float | None = None,
    ) -> IngestionSummary:
        """
        Processes a batch. Never raises for per-item failures.

        Args:
            notifications: Batch in delivery order.
            deadline: Optional time.monotonic() value. Items not started by then
                are reported as abandoned and left for redelivery.

        Returns:
            IngestionSummary with one outcome per notification, in input order.
        """
        batch = list(notifications)
        if not batch:
            logger.debug("Empty batch, nothing to ingest")
            return IngestionSummary()

        logger.info(f"Starting ingest of {len(batch)} notification(s)")

        if self._max_workers == 1 or len(batch) == 1:
            outcomes = [self._run_item(n, deadline) for n in batch]
        else:
            with ThreadPoolExecutor(
                max_workers=min(self._max_workers, len(batch)),
                thread_name_prefix="ingest",
            ) as executor:
                futures = [executor.submit(self._run_item, n, deadline) for n in batch]
                outcomes = [f.result() for f in futures]

        summary = IngestionSummary(outcomes=outcomes)
        logger.info(
            f"Ingest complete. Ingested: {summary.ingested}, "
            f"Failed: {summary.failed}, Abandoned: {summary.abandoned}"
        )
        return summary

    def _run_item(
        self, notification: IngestionNotification, deadline: float | None
    ) -> ItemOutcome:
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning(
                f"Deadline reached, leaving {notification.object_key} for redelivery"
            )
            return ItemOutcome(notification, STATUS_ABANDONED)
        try:
            return self.process_one(notification)
        except Exception as e:
            # A collaborator broke its contract; contain it to this item.
            logger.error(
                f"Unexpected error ingesting {notification.object_key}: {e}", exc_info=True
            )
            return ItemOutcome(notification, STATUS_ERROR, error=str(e))

    def process_one(self, notification: IngestionNotification) -> ItemOutcome:
        """Runs fetch → extract → persist for a single notification."""
        container = notification.container_name
        key = notification.object_key

        try:
            stream = self._fetcher.fetch(container, key)
        except FetchError as e:
            logger.error(f"Fetch failed for {container}/{key} [{e.reason}]: {e}")
            return ItemOutcome(notification, STATUS_FETCH_FAILED, step=e.step, error=str(e))

        with closing(stream):
            try:
                point = self._extractor.extract(stream)
            except ExtractionError as e:
                logger.error(f"Geo extract failed for {key} [{e.reason}]: {e}")
                return ItemOutcome(
                    notification, STATUS_EXTRACTION_FAILED, step=e.step, error=str(e)
                )
            except FetchError as e:
                logger.error(f"Fetch failed for {container}/{key} [{e.reason}]: {e}")
                return ItemOutcome(notification, STATUS_FETCH_FAILED, step=e.step, error=str(e))

        record = ImageRecord.from_object(key, point)

        try:
            self._store.put(record)
        except StoreError as e:
            logger.error(f"Persist failed for {key} [{e.reason}]: {e}")
            return ItemOutcome(notification, STATUS_STORE_FAILED, step=e.step, error=str(e))

        logger.info(
            f"Ingested {container}/{key} -> ({record.latitude:.6f}, {record.longitude:.6f})"
        )
        return ItemOutcome(notification, STATUS_INGESTED, record=record)
