"""
In-Memory Backends.

Dict-backed fetcher and record store that honour the same contracts and
error taxonomy as the cloud backends. Used by tests and dry runs.
"""

import io
import threading
from typing import BinaryIO

from ingestion.interfaces.errors import FetchError
from ingestion.interfaces.fetcher import ObjectFetcherInterface
from ingestion.interfaces.record_store import (
    ImageRecord,
    PointCatalogInterface,
    RecordStoreInterface,
    validate_record,
)


class InMemoryObjectStore(ObjectFetcherInterface):
    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None):
        self._objects = dict(objects or {})

    def put_object(self, container: str, key: str, body: bytes) -> None:
        self._objects[(container, key)] = body

    def fetch(self, container: str, key: str) -> BinaryIO:
        try:
            body = self._objects[(container, key)]
        except KeyError as e:
            raise FetchError(
                container, key, f"No such object: {container}/{key}", reason="not_found"
            ) from e
        return io.BytesIO(body)


class InMemoryRecordStore(RecordStoreInterface, PointCatalogInterface):
    def __init__(self):
        self._records: dict[str, ImageRecord] = {}
        self._lock = threading.Lock()
        self.put_count = 0

    def put(self, record: ImageRecord) -> None:
        validate_record(record)
        with self._lock:
            self._records[record.image_id] = record
            self.put_count += 1

    def get(self, image_id: str) -> ImageRecord | None:
        return self._records.get(image_id)

    def list_records(self) -> list[ImageRecord]:
        with self._lock:
            return sorted(self._records.values(), key=lambda r: r.image_id)

    def __len__(self) -> int:
        return len(self._records)
