"""
Record Store Tests (SQLite and in-memory backends).
"""

import math

import pytest

from core.points_core import list_points
from ingestion.interfaces.errors import StoreError
from ingestion.interfaces.record_store import ImageRecord, validate_record
from ingestion.services.memory_backends import InMemoryRecordStore
from ingestion.services.sqlite_record_store import SqliteRecordStore
from utils.db import closing_connection, count_image_points


def record(key: str, lat: float = 40.7128, lon: float = -74.006) -> ImageRecord:
    return ImageRecord(image_id=key, storage_key=key, latitude=lat, longitude=lon)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "points.db"


@pytest.fixture
def sqlite_store(db_path):
    store = SqliteRecordStore(db_path)
    yield store
    store.close()


class TestValidation:
    @pytest.mark.parametrize(
        "bad",
        [
            ImageRecord("", "k", 1.0, 1.0),
            ImageRecord("k", "", 1.0, 1.0),
            ImageRecord("k", "k", 90.5, 1.0),
            ImageRecord("k", "k", 1.0, -180.5),
            ImageRecord("k", "k", math.nan, 1.0),
            ImageRecord("k", "k", 1.0, math.inf),
            ImageRecord("k", "k", "north", 1.0),
        ],
    )
    def test_rejects_malformed_records(self, bad):
        with pytest.raises(StoreError) as exc:
            validate_record(bad)
        assert exc.value.reason == "validation"

    def test_accepts_boundaries(self):
        validate_record(ImageRecord("k", "k", -90.0, 180.0))


class TestSqliteRecordStore:
    def test_put_then_list(self, sqlite_store):
        sqlite_store.put(record("b.jpg", 1.5, 2.5))
        sqlite_store.put(record("a.jpg"))

        records = sqlite_store.list_records()

        assert [r.image_id for r in records] == ["a.jpg", "b.jpg"]
        assert records[1] == record("b.jpg", 1.5, 2.5)

    def test_put_is_an_upsert(self, sqlite_store, db_path):
        sqlite_store.put(record("a.jpg", 10.0, 10.0))
        sqlite_store.put(record("a.jpg", 20.0, 30.0))

        with closing_connection(db_path) as conn:
            assert count_image_points(conn) == 1
        assert sqlite_store.list_records() == [record("a.jpg", 20.0, 30.0)]

    def test_invalid_record_is_not_written(self, sqlite_store):
        with pytest.raises(StoreError) as exc:
            sqlite_store.put(record("a.jpg", 120.0, 0.0))

        assert exc.value.reason == "validation"
        assert exc.value.image_id == "a.jpg"
        assert sqlite_store.list_records() == []

    def test_closed_store_reports_unavailable(self, db_path):
        store = SqliteRecordStore(db_path)
        store.close()

        with pytest.raises(StoreError) as exc:
            store.put(record("a.jpg"))
        assert exc.value.reason == "unavailable"

    def test_records_survive_reopen(self, db_path):
        first = SqliteRecordStore(db_path)
        first.put(record("a.jpg"))
        first.close()

        second = SqliteRecordStore(db_path)
        try:
            assert second.list_records() == [record("a.jpg")]
        finally:
            second.close()

    def test_schema_recreated_after_database_file_removed(self, db_path):
        first = SqliteRecordStore(db_path)
        first.put(record("a.jpg"))
        first.close()
        for path in db_path.parent.glob(db_path.name + "*"):
            path.unlink()

        second = SqliteRecordStore(db_path)
        try:
            second.put(record("b.jpg"))
            assert second.list_records() == [record("b.jpg")]
        finally:
            second.close()


class TestInMemoryRecordStore:
    def test_upsert_and_order(self):
        store = InMemoryRecordStore()
        store.put(record("b.jpg"))
        store.put(record("a.jpg", 1.0, 1.0))
        store.put(record("a.jpg", 2.0, 2.0))

        assert len(store) == 2
        assert store.put_count == 3
        assert store.list_records()[0] == record("a.jpg", 2.0, 2.0)

    def test_validates(self):
        with pytest.raises(StoreError):
            InMemoryRecordStore().put(record("", 0.0, 0.0))


class TestPointListing:
    def test_lists_items_in_image_id_order(self):
        store = InMemoryRecordStore()
        store.put(record("b.jpg", 2.0, 3.0))
        store.put(record("a.jpg", -1.0, 1.0))

        assert list_points(store) == [
            {"imageId": "a.jpg", "storageKey": "a.jpg", "latitude": -1.0, "longitude": 1.0},
            {"imageId": "b.jpg", "storageKey": "b.jpg", "latitude": 2.0, "longitude": 3.0},
        ]

    def test_empty_store_lists_nothing(self):
        assert list_points(InMemoryRecordStore()) == []
