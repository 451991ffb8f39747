# feria/models/common.py
import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Store-generated document id (32 hex chars)."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
