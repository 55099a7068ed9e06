# config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file.
load_dotenv()

OBJECT_STORE_BACKENDS = ("s3", "local")
RECORD_STORE_BACKENDS = ("dynamodb", "sqlite")

_config_cache: dict | None = None


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.
    """
    config = {
        # General Settings
        "DEBUG_MODE": os.getenv("DEBUG_MODE", "False").lower() == "true",
        "OUTPUT_DIR": os.getenv("OUTPUT_DIR", "./output"),

        # AWS
        "AWS_REGION": os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1")),
        # Optional, for S3/DynamoDB compatible endpoints (MinIO, LocalStack)
        "AWS_ENDPOINT_URL": os.getenv("AWS_ENDPOINT_URL") or None,
        "BUCKET_NAME": os.getenv("BUCKET_NAME", ""),
        "TABLE_NAME": os.getenv("TABLE_NAME", "ImageLocations"),

        # Backends
        "OBJECT_STORE_BACKEND": os.getenv("OBJECT_STORE_BACKEND", "s3").lower(),
        "RECORD_STORE_BACKEND": os.getenv("RECORD_STORE_BACKEND", "dynamodb").lower(),
        "LOCAL_OBJECT_ROOT": os.getenv("LOCAL_OBJECT_ROOT", "./objects"),

        # Upload credentials
        "UPLOAD_URL_EXPIRES_SECONDS": int(os.getenv("UPLOAD_URL_EXPIRES_SECONDS", 900)),

        # Ingestion
        "INGEST_MAX_WORKERS": max(1, int(os.getenv("INGEST_MAX_WORKERS", 1))),
        "INGEST_DEADLINE_MARGIN_SECONDS": float(os.getenv("INGEST_DEADLINE_MARGIN_SECONDS", 2.0)),

        # Web
        "WEB_HOST": os.getenv("WEB_HOST", "0.0.0.0"),
        "WEB_PORT": int(os.getenv("WEB_PORT", 8050)),
    }
    return config


def get_config():
    """Returns the process-wide configuration, loading it on first use."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


if __name__ == "__main__":
    # For testing purposes, print the configuration
    config = load_config()
    from pprint import pprint

    pprint(config)
