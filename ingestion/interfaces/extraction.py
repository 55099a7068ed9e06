"""
Extraction Interface - Image Geotag Metadata.

Defines the contract for reading a coordinate pair out of an image stream.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO

from ingestion.interfaces.errors import ExtractionError

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class GeoPoint:
    """
    A WGS84 coordinate pair in signed decimal degrees.

    Attributes:
        latitude: Degrees north, in [-90, 90].
        longitude: Degrees east, in [-180, 180].
    """

    latitude: float
    longitude: float


def coordinates_in_range(latitude: float, longitude: float) -> bool:
    """True when both values are finite and inside their valid ranges."""
    # NaN fails every comparison, so it is rejected here as well.
    return (
        LATITUDE_RANGE[0] <= latitude <= LATITUDE_RANGE[1]
        and LONGITUDE_RANGE[0] <= longitude <= LONGITUDE_RANGE[1]
    )


class MetadataExtractorInterface(ABC):
    """
    Interface for geotag extraction.

    Implementations must:
    - Read only from the given stream (no other I/O, no shared state)
    - Stop reading once the metadata segment has been located
    - Raise ExtractionError for every kind of failure
    """

    @abstractmethod
    def extract(self, stream: BinaryIO) -> GeoPoint:
        """
        Reads the geotag from an image stream.

        Args:
            stream: Readable binary stream positioned at the start of the image.

        Returns:
            GeoPoint with validated coordinates.

        Raises:
            ExtractionError: Unrecognized format, no metadata segment, or no geotag.
        """
        pass


__all__ = [
    "ExtractionError",
    "GeoPoint",
    "LATITUDE_RANGE",
    "LONGITUDE_RANGE",
    "MetadataExtractorInterface",
    "coordinates_in_range",
]
