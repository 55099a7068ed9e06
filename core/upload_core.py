"""
Upload Core - Time-Limited Upload Credentials.

Issues presigned S3 PUT URLs under generated keys of the form
<unixTimestamp>-<originalFilename>. Objects uploaded there trigger the
ingestion pipeline.
"""

import ntpath
import posixpath
import time
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from config import get_config
from logging_config import get_logger
from utils.aws import create_client

logger = get_logger(__name__)

DEFAULT_EXPIRES_SECONDS = 15 * 60


class UploadUnavailableError(Exception):
    """Upload URLs cannot be issued with the current configuration."""


def generate_upload_key(filename: str, now: float | None = None) -> str:
    """
    Builds the object key for a new upload.

    Only the final path component of `filename` is kept.

    Raises:
        ValueError: The filename is empty after stripping directories.
    """
    name = ntpath.basename(posixpath.basename((filename or "").strip()))
    if not name:
        raise ValueError("filename is required")
    timestamp = int(time.time() if now is None else now)
    return f"{timestamp}-{name}"


def create_upload_url(
    filename: str,
    s3_client=None,
    config: dict[str, Any] | None = None,
    now: float | None = None,
) -> dict[str, str]:
    """
    Presigns a PUT for a freshly generated key.

    Returns:
        {"uploadUrl": <presigned URL>, "key": <object key>}

    Raises:
        ValueError: Missing filename.
        UploadUnavailableError: Object store is not S3, no bucket configured,
            or presigning failed.
    """
    cfg = config or get_config()
    if cfg["OBJECT_STORE_BACKEND"] != "s3":
        raise UploadUnavailableError("Upload URLs require the s3 object store backend")
    bucket = cfg["BUCKET_NAME"]
    if not bucket:
        raise UploadUnavailableError("BUCKET_NAME is not configured")

    key = generate_upload_key(filename, now=now)
    expires = cfg.get("UPLOAD_URL_EXPIRES_SECONDS") or DEFAULT_EXPIRES_SECONDS
    s3 = s3_client or create_client("s3", cfg)
    try:
        url = s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires,
        )
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Presigning upload for {key} failed: {e}")
        raise UploadUnavailableError(f"Could not presign upload: {e}") from e

    logger.info(f"Issued upload URL for s3://{bucket}/{key} (expires in {expires}s)")
    return {"uploadUrl": url, "key": key}
