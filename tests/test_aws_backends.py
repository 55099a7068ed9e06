"""
S3 Fetcher and DynamoDB Record Store Tests.

boto3 clients are replaced with MagicMock; errors are real botocore
exceptions so the translation into the port error taxonomy is exercised.
"""

import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    IncompleteReadError,
    ReadTimeoutError,
)
from urllib3.exceptions import ProtocolError

from ingestion.interfaces.errors import FetchError, StoreError
from ingestion.interfaces.record_store import ImageRecord
from ingestion.services.dynamodb_record_store import (
    DynamoDbRecordStore,
    item_to_record,
    record_to_item,
)
from ingestion.services.s3_fetcher import S3Fetcher

TRIP_KEY = "1700000000-trip.jpg"


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestS3Fetcher:
    def test_returns_body_stream(self):
        s3 = MagicMock()
        body = io.BytesIO(b"jpeg bytes")
        s3.get_object.return_value = {"Body": body, "ContentLength": 10}

        stream = S3Fetcher(s3).fetch("photos", TRIP_KEY)

        assert stream.read(4) == b"jpeg"
        assert stream.read() == b" bytes"
        assert not stream.seekable()
        stream.close()
        assert body.closed
        s3.get_object.assert_called_once_with(Bucket="photos", Key=TRIP_KEY)

    @pytest.mark.parametrize(
        "code,reason",
        [
            ("NoSuchKey", "not_found"),
            ("NoSuchBucket", "not_found"),
            ("404", "not_found"),
            ("AccessDenied", "access_denied"),
            ("403", "access_denied"),
            ("SlowDown", "unavailable"),
            ("InternalError", "unavailable"),
        ],
    )
    def test_client_errors_map_to_fetch_errors(self, code, reason):
        s3 = MagicMock()
        s3.get_object.side_effect = client_error(code)

        with pytest.raises(FetchError) as exc:
            S3Fetcher(s3).fetch("photos", TRIP_KEY)

        assert exc.value.reason == reason
        assert exc.value.container == "photos"
        assert exc.value.key == TRIP_KEY
        assert isinstance(exc.value.__cause__, ClientError)

    def test_connection_errors_are_unavailable(self):
        s3 = MagicMock()
        s3.get_object.side_effect = EndpointConnectionError(endpoint_url="http://localhost:9000")

        with pytest.raises(FetchError) as exc:
            S3Fetcher(s3).fetch("photos", TRIP_KEY)
        assert exc.value.reason == "unavailable"

    @pytest.mark.parametrize(
        "error",
        [
            ReadTimeoutError(endpoint_url="https://s3"),
            IncompleteReadError(actual_bytes=10, expected_bytes=4096),
            ProtocolError("Connection broken"),
        ],
    )
    def test_body_read_failures_are_fetch_errors(self, error):
        s3 = MagicMock()
        s3.get_object.return_value = {"Body": MagicMock(**{"read.side_effect": error})}

        stream = S3Fetcher(s3).fetch("photos", TRIP_KEY)
        with pytest.raises(FetchError) as exc:
            stream.read(2)

        assert exc.value.reason == "unavailable"
        assert exc.value.step == "fetch"
        assert exc.value.key == TRIP_KEY


class TestDynamoDbRecordStore:
    def test_put_item_shape(self):
        db = MagicMock()
        store = DynamoDbRecordStore(db, "ImageLocations")

        store.put(ImageRecord(TRIP_KEY, TRIP_KEY, 40.7128, -74.006))

        db.put_item.assert_called_once_with(
            TableName="ImageLocations",
            Item={
                "imageId": {"S": TRIP_KEY},
                "storageKey": {"S": TRIP_KEY},
                "latitude": {"N": "40.7128"},
                "longitude": {"N": "-74.006"},
            },
        )

    def test_invalid_record_never_reaches_dynamodb(self):
        db = MagicMock()

        with pytest.raises(StoreError) as exc:
            DynamoDbRecordStore(db, "ImageLocations").put(ImageRecord(TRIP_KEY, TRIP_KEY, 91.0, 0.0))

        assert exc.value.reason == "validation"
        db.put_item.assert_not_called()

    @pytest.mark.parametrize(
        "code,reason",
        [
            ("ProvisionedThroughputExceededException", "throttled"),
            ("ThrottlingException", "throttled"),
            ("ValidationException", "validation"),
            ("ResourceNotFoundException", "unavailable"),
        ],
    )
    def test_put_errors(self, code, reason):
        db = MagicMock()
        db.put_item.side_effect = client_error(code, "PutItem")

        with pytest.raises(StoreError) as exc:
            DynamoDbRecordStore(db, "ImageLocations").put(ImageRecord(TRIP_KEY, TRIP_KEY, 1.0, 2.0))

        assert exc.value.reason == reason
        assert exc.value.image_id == TRIP_KEY

    def test_list_records_scans_all_pages(self):
        db = MagicMock()
        paginator = MagicMock()
        db.get_paginator.return_value = paginator
        paginator.paginate.return_value = [
            {"Items": [record_to_item(ImageRecord("b.jpg", "b.jpg", 2.0, 3.0))]},
            {
                "Items": [
                    # Written before the attribute was renamed.
                    {"imageId": {"S": "a.jpg"}, "s3Key": {"S": "a.jpg"},
                     "latitude": {"N": "1.5"}, "longitude": {"N": "-1.5"}},
                    {"imageId": {"S": "broken.jpg"}},
                ]
            },
        ]

        records = DynamoDbRecordStore(db, "ImageLocations").list_records()

        db.get_paginator.assert_called_once_with("scan")
        paginator.paginate.assert_called_once_with(TableName="ImageLocations")
        assert records == [
            ImageRecord("a.jpg", "a.jpg", 1.5, -1.5),
            ImageRecord("b.jpg", "b.jpg", 2.0, 3.0),
        ]

    def test_scan_failure_is_a_store_error(self):
        db = MagicMock()
        db.get_paginator.return_value.paginate.side_effect = client_error("InternalServerError", "Scan")

        with pytest.raises(StoreError):
            DynamoDbRecordStore(db, "ImageLocations").list_records()

    def test_table_name_required(self):
        with pytest.raises(ValueError):
            DynamoDbRecordStore(MagicMock(), "")


def test_item_without_storage_key_falls_back_to_image_id():
    item = {"imageId": {"S": "x.jpg"}, "latitude": {"N": "0"}, "longitude": {"N": "0"}}
    assert item_to_record(item).storage_key == "x.jpg"
