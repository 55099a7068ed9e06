"""
S3 Fetcher - Object Reads from Amazon S3 (or a compatible store).

Implements ObjectFetcherInterface with a shared boto3 S3 client.
"""

from typing import BinaryIO

from botocore.exceptions import BotoCoreError, ClientError
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from ingestion.interfaces.errors import FetchError
from ingestion.interfaces.fetcher import ObjectFetcherInterface
from logging_config import get_logger
from utils.aws import client_error_code

logger = get_logger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "NotFound", "404"}
_ACCESS_DENIED_CODES = {"AccessDenied", "Forbidden", "403", "AllAccessDisabled"}


class S3ObjectStream:
    """
    Read-only wrapper over a botocore StreamingBody.

    Connection failures while the body is being read surface as FetchError,
    the same as failures of the GetObject call itself.
    """

    def __init__(self, body, container: str, key: str):
        self._body = body
        self._container = container
        self._key = key

    def read(self, size: int = -1) -> bytes:
        try:
            if size is None or size < 0:
                return self._body.read()
            return self._body.read(size)
        except (BotoCoreError, Urllib3HTTPError) as e:
            raise FetchError(
                self._container, self._key, f"S3 body read failed: {e}", reason="unavailable"
            ) from e

    def seekable(self) -> bool:
        return False

    def close(self) -> None:
        self._body.close()


class S3Fetcher(ObjectFetcherInterface):
    """
    Opens S3 objects as streaming bodies.

    The botocore StreamingBody behind the returned stream is read lazily, so
    only the bytes the extractor asks for are transferred before the caller closes it.
    """

    def __init__(self, s3_client):
        """
        Args:
            s3_client: A boto3 S3 client. Shared across invocations; boto3
                clients are thread-safe.
        """
        self._s3 = s3_client

    def fetch(self, container: str, key: str) -> BinaryIO:
        try:
            response = self._s3.get_object(Bucket=container, Key=key)
        except ClientError as e:
            code = client_error_code(e)
            if code in _NOT_FOUND_CODES:
                reason = "not_found"
            elif code in _ACCESS_DENIED_CODES:
                reason = "access_denied"
            else:
                reason = "unavailable"
            raise FetchError(
                container, key, f"S3 GetObject failed ({code or 'unknown'}): {e}", reason=reason
            ) from e
        except BotoCoreError as e:
            raise FetchError(
                container, key, f"S3 GetObject failed: {e}", reason="unavailable"
            ) from e

        logger.debug(
            f"Opened s3://{container}/{key} ({response.get('ContentLength', '?')} bytes)"
        )
        return S3ObjectStream(response["Body"], container, key)
