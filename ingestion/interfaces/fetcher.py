"""
Fetcher Interface - Object Store Reads.

Defines the contract for opening a stored object as a byte stream.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO

from ingestion.interfaces.errors import FetchError


class ObjectFetcherInterface(ABC):
    """
    Interface for reading objects from a container/key addressed store.

    Implementations should handle:
    - Translating backend errors into FetchError (not found, denied, unavailable)
    - Returning a stream that supports read() and close()

    Implementations must not retry; redelivery is the trigger's job.
    """

    @abstractmethod
    def fetch(self, container: str, key: str) -> BinaryIO:
        """
        Opens an object for reading.

        Args:
            container: Bucket or top-level container name.
            key: Object key, already URL-decoded.

        Returns:
            A readable binary stream. The caller owns it and must close it.

        Raises:
            FetchError: The object is missing, access was denied, or the store failed.
        """
        pass


__all__ = ["FetchError", "ObjectFetcherInterface"]
