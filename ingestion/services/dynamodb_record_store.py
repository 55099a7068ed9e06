"""
DynamoDB Record Store - Image Point Persistence on Amazon DynamoDB.

Implements RecordStoreInterface (PutItem) and PointCatalogInterface (Scan)
with a shared low-level boto3 DynamoDB client.
"""

from decimal import Decimal, InvalidOperation

from botocore.exceptions import BotoCoreError, ClientError

from ingestion.interfaces.errors import StoreError
from ingestion.interfaces.record_store import (
    ImageRecord,
    PointCatalogInterface,
    RecordStoreInterface,
    validate_record,
)
from logging_config import get_logger
from utils.aws import client_error_code

logger = get_logger(__name__)

_THROTTLE_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}
_VALIDATION_CODES = {"ValidationException", "SerializationException"}

# Items written before the attribute was renamed carry "s3Key".
_LEGACY_STORAGE_KEY = "s3Key"


def _number(value: float) -> str:
    return repr(float(value))


def record_to_item(record: ImageRecord) -> dict:
    """Marshals a record into DynamoDB attribute-value form."""
    return {
        "imageId": {"S": record.image_id},
        "storageKey": {"S": record.storage_key},
        "latitude": {"N": _number(record.latitude)},
        "longitude": {"N": _number(record.longitude)},
    }


def item_to_record(item: dict) -> ImageRecord:
    """Unmarshals a scanned item. Raises KeyError/ValueError for malformed items."""
    image_id = item["imageId"]["S"]
    storage_attr = item.get("storageKey") or item.get(_LEGACY_STORAGE_KEY)
    storage_key = storage_attr["S"] if storage_attr else image_id
    try:
        latitude = float(Decimal(item["latitude"]["N"]))
        longitude = float(Decimal(item["longitude"]["N"]))
    except InvalidOperation as e:
        raise ValueError(f"Non-numeric coordinates on {image_id}") from e
    return ImageRecord(
        image_id=image_id,
        storage_key=storage_key,
        latitude=latitude,
        longitude=longitude,
    )


def _store_error(image_id: str, action: str, error: Exception) -> StoreError:
    if isinstance(error, ClientError):
        code = client_error_code(error)
        if code in _THROTTLE_CODES:
            reason = "throttled"
        elif code in _VALIDATION_CODES:
            reason = "validation"
        else:
            reason = "unavailable"
        return StoreError(image_id, f"DynamoDB {action} failed ({code}): {error}", reason=reason)
    return StoreError(image_id, f"DynamoDB {action} failed: {error}", reason="unavailable")


class DynamoDbRecordStore(RecordStoreInterface, PointCatalogInterface):
    """
    Stores one item per image keyed by the 'imageId' partition key.

    PutItem replaces whole items, which gives the upsert semantics redelivered
    notifications rely on.
    """

    def __init__(self, dynamodb_client, table_name: str):
        """
        Args:
            dynamodb_client: A boto3 DynamoDB client (thread-safe, shared).
            table_name: Target table with partition key 'imageId' (S).
        """
        if not table_name:
            raise ValueError("DynamoDB table name is required")
        self._db = dynamodb_client
        self._table = table_name

    @property
    def table_name(self) -> str:
        return self._table

    def put(self, record: ImageRecord) -> None:
        validate_record(record)
        try:
            self._db.put_item(TableName=self._table, Item=record_to_item(record))
        except (ClientError, BotoCoreError) as e:
            raise _store_error(record.image_id, "PutItem", e) from e

    def list_records(self) -> list[ImageRecord]:
        records = []
        try:
            paginator = self._db.get_paginator("scan")
            for page in paginator.paginate(TableName=self._table):
                for item in page.get("Items", []):
                    try:
                        records.append(item_to_record(item))
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning(f"Skipping malformed item in {self._table}: {e}")
        except (ClientError, BotoCoreError) as e:
            raise _store_error("", "Scan", e) from e
        records.sort(key=lambda r: r.image_id)
        return records
