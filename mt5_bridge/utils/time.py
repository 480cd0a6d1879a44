"""
Ingestion time helpers.

Producer payloads carry their own terminal timestamps, which the bridge
treats as opaque. The bridge adds its own wall-clock ``receivedAt`` stamp
when an update is accepted, and reports ``timestamp`` in health checks.
"""

from datetime import datetime, timezone
from typing import Optional


def ingestion_time() -> datetime:
    """
    Get the current wall-clock time used to stamp accepted updates.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp as ISO-8601 with millisecond precision.

    Naive datetimes are assumed to be UTC. The UTC offset is rendered as
    ``Z``, e.g. ``2024-03-01T12:00:00.125Z``.

    Args:
        ts: Timestamp to format

    Returns:
        ISO8601 formatted string
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    else:
        ts = ts.astimezone(timezone.utc)

    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ingestion_timestamp(now: Optional[datetime] = None) -> str:
    """
    Get the formatted ingestion timestamp.

    Args:
        now: Optional explicit time, defaults to the current wall-clock time

    Returns:
        ISO8601 formatted string
    """
    return format_timestamp(now if now is not None else ingestion_time())
