"""
AWS client factory.

Credentials come from boto3's default chain (environment, shared profile,
instance role). AWS_ENDPOINT_URL points the clients at an S3/DynamoDB
compatible endpoint such as MinIO or LocalStack.
"""

import boto3

from config import get_config


def create_client(service_name: str, config: dict | None = None):
    """Creates a boto3 client for `service_name` from the application config."""
    cfg = config or get_config()
    kwargs = {"region_name": cfg.get("AWS_REGION")}
    if cfg.get("AWS_ENDPOINT_URL"):
        kwargs["endpoint_url"] = cfg["AWS_ENDPOINT_URL"]
    return boto3.client(service_name, **kwargs)


def client_error_code(error) -> str:
    """Returns the service error code of a botocore ClientError ('' if absent)."""
    response = getattr(error, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))
