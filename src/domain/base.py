import secrets
import time
from datetime import UTC, datetime


def generate_object_id() -> str:
    """
    Generate a 24 character hex identifier.

    Layout follows the document-store object id: 4 bytes of seconds since
    the epoch followed by 8 random bytes, so ids sort roughly by creation.
    """
    return f"{int(time.time()):08x}{secrets.token_hex(8)}"


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in DateTime columns"""
    return datetime.now(UTC).replace(tzinfo=None)
