"""
Record Store Interface - Image Point Persistence.

Defines the persisted record, the write port used by ingestion and the
read port used by the listing API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ingestion.interfaces.errors import StoreError
from ingestion.interfaces.extraction import GeoPoint, coordinates_in_range


@dataclass(frozen=True)
class ImageRecord:
    """
    One indexed image location.

    Attributes:
        image_id: Primary key. Equal to the source object key.
        storage_key: Location of the source object.
        latitude: Signed decimal degrees, [-90, 90].
        longitude: Signed decimal degrees, [-180, 180].
    """

    image_id: str
    storage_key: str
    latitude: float
    longitude: float

    @classmethod
    def from_object(cls, key: str, point: GeoPoint) -> "ImageRecord":
        return cls(
            image_id=key,
            storage_key=key,
            latitude=point.latitude,
            longitude=point.longitude,
        )

    def to_item(self) -> dict[str, Any]:
        """Wire shape shared by the record stores and the JSON API."""
        return {
            "imageId": self.image_id,
            "storageKey": self.storage_key,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


def validate_record(record: ImageRecord) -> None:
    """Raises StoreError(reason='validation') for records no backend may accept."""
    problems = []
    if not isinstance(record.image_id, str) or not record.image_id:
        problems.append("imageId must be a non-empty string")
    if not isinstance(record.storage_key, str) or not record.storage_key:
        problems.append("storageKey must be a non-empty string")
    try:
        lat = float(record.latitude)
        lon = float(record.longitude)
    except (TypeError, ValueError):
        problems.append("coordinates must be numbers")
    else:
        if not coordinates_in_range(lat, lon):
            problems.append(f"coordinates out of range: ({lat}, {lon})")

    if problems:
        raise StoreError(
            str(record.image_id),
            "Invalid record: " + "; ".join(problems),
            reason="validation",
        )


class RecordStoreInterface(ABC):
    """
    Write port for image records.

    put() is an upsert keyed by image_id: writing the same key twice leaves
    exactly one record holding the latest values.
    """

    @abstractmethod
    def put(self, record: ImageRecord) -> None:
        """
        Persists a record, replacing any record with the same image_id.

        Raises:
            StoreError: The record was rejected or the backend failed.
        """
        pass


class PointCatalogInterface(ABC):
    """Read port for the listing API."""

    @abstractmethod
    def list_records(self) -> list[ImageRecord]:
        """
        Returns every stored record ordered by image_id.

        Raises:
            StoreError: The backend failed.
        """
        pass


__all__ = [
    "ImageRecord",
    "PointCatalogInterface",
    "RecordStoreInterface",
    "StoreError",
    "validate_record",
]
