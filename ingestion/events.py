"""
Trigger Event Decoding.

Turns an object-store notification payload into IngestionNotification
items. Accepts direct S3 event records and queue records whose body holds
an S3 event.
"""

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote_plus

from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class IngestionNotification:
    """
    One newly created object.

    Attributes:
        container_name: Bucket holding the object.
        object_key: Object key, URL-decoded.
    """

    container_name: str
    object_key: str


def _s3_record_to_notification(record: dict[str, Any]) -> IngestionNotification | None:
    event_name = record.get("eventName", "")
    if event_name and not event_name.startswith("ObjectCreated"):
        logger.debug(f"Ignoring {event_name} event")
        return None

    s3 = record.get("s3") or {}
    bucket = (s3.get("bucket") or {}).get("name")
    raw_key = (s3.get("object") or {}).get("key")
    if not bucket or not raw_key:
        logger.warning(f"Ignoring S3 record without bucket/key: {record!r}")
        return None

    # Event keys are form-encoded: '+' is a space, '%2B' a literal plus.
    return IngestionNotification(container_name=bucket, object_key=unquote_plus(raw_key))


def notifications_from_event(event: dict[str, Any]) -> list[IngestionNotification]:
    """
    Extracts notifications in delivery order.

    Records that are not object-created events (test events, deletes,
    unreadable queue bodies) are logged and dropped.
    """
    notifications = []
    for record in event.get("Records") or []:
        if "s3" in record:
            notification = _s3_record_to_notification(record)
            if notification:
                notifications.append(notification)
            continue

        body = record.get("body")
        if body is None:
            logger.warning(f"Ignoring record of unknown shape: {record!r}")
            continue
        try:
            inner = json.loads(body) if isinstance(body, str) else body
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring queue record with unreadable body: {e}")
            continue
        if not isinstance(inner, dict):
            logger.warning(f"Ignoring queue record with non-object body: {body!r}")
            continue
        if inner.get("Event") == "s3:TestEvent":
            logger.debug("Ignoring s3:TestEvent")
            continue
        notifications.extend(notifications_from_event(inner))

    return notifications
