"""
Local Fetcher - Object Reads from a Directory Tree.

Maps (container, key) to <root>/<container>/<key>. Used for local runs
where a folder stands in for the bucket.
"""

from pathlib import Path
from typing import BinaryIO

from ingestion.interfaces.errors import FetchError
from ingestion.interfaces.fetcher import ObjectFetcherInterface


class LocalDirectoryFetcher(ObjectFetcherInterface):
    def __init__(self, root: str | Path):
        self._root = Path(root).resolve()

    def _resolve(self, container: str, key: str) -> Path:
        base = (self._root / container).resolve()
        path = (base / key).resolve()
        # Names like "../x" must not escape the root or the container directory.
        if not base.is_relative_to(self._root) or not path.is_relative_to(base):
            raise FetchError(
                container, key, f"Key escapes container: {key}", reason="access_denied"
            )
        return path

    def fetch(self, container: str, key: str) -> BinaryIO:
        path = self._resolve(container, key)
        try:
            return open(path, "rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise FetchError(container, key, f"No such object: {path}", reason="not_found") from e
        except PermissionError as e:
            raise FetchError(container, key, f"Permission denied: {path}", reason="access_denied") from e
        except OSError as e:
            raise FetchError(container, key, f"Could not open {path}: {e}", reason="unavailable") from e
