"""
Upload Service - Web Layer Service for Upload Credentials.

Thin wrapper over core.upload_core for web-specific concerns.
"""

from core import upload_core
from core.upload_core import UploadUnavailableError


def create_upload_url(filename: str) -> dict[str, str]:
    """
    Issues a presigned upload URL and the key it writes to.

    Delegates to core.upload_core.
    """
    return upload_core.create_upload_url(filename)


__all__ = ["UploadUnavailableError", "create_upload_url"]
