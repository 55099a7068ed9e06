"""
Run the ingestion pipeline for one object without a live trigger.

Usage:
    python ingest_local.py --bucket <bucket> --key <key> [--table <table>]
"""

import argparse
import sys

from config import get_config
from core import ingest_core
from logging_config import get_logger

logger = get_logger("LocalIngest")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest a single stored image into the image map."
    )
    parser.add_argument("--bucket", "-b", required=True, help="Bucket (container) name")
    parser.add_argument("--key", "-k", required=True, help="Object key")
    parser.add_argument(
        "--table", "-t", default=None, help="Record table (default: TABLE_NAME from config)"
    )
    args = parser.parse_args(argv)
    if not args.bucket.strip() or not args.key.strip():
        parser.error("--bucket and --key must not be empty")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    cfg = dict(get_config())
    if args.table:
        cfg["TABLE_NAME"] = args.table

    pipeline = ingest_core.build_pipeline(cfg)
    summary = ingest_core.ingest_object(args.bucket, args.key, pipeline=pipeline)

    if summary.ingested:
        logger.info("Success")
        return 0
    outcome = summary.outcomes[0]
    logger.error(f"Failed to ingest {args.key}: {outcome.status}: {outcome.error}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
