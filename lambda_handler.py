"""
Object-created trigger entry point.

Configure the function handler as `lambda_handler.handler`. The pipeline
and its clients are built on the first invocation and reused by every
later invocation of the same process.
"""

import time

from config import get_config
from core import ingest_core
from logging_config import get_logger

logger = get_logger(__name__)


def _deadline_from_context(context) -> float | None:
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if remaining is None:
        return None
    margin = get_config()["INGEST_DEADLINE_MARGIN_SECONDS"]
    return time.monotonic() + remaining() / 1000.0 - margin


def handler(event, context=None):
    """
    Processes one delivered batch.

    Per-item failures are logged and reported in the returned summary; the
    invocation itself succeeds so already ingested items are not replayed.
    """
    summary = ingest_core.process_event(event, deadline=_deadline_from_context(context))
    return summary.as_dict()
