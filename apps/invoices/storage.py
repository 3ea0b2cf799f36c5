"""
Invoice scans in the blob store.

Keys are opaque to the rest of the project. Deletion paths treat the blob
store as best-effort: the database row is authoritative.
"""

import logging
import os
import uuid
from typing import Iterable

from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


def save_blob(*, user_id, uploaded_file) -> str:
    """Store an uploaded scan and return its key."""
    extension = os.path.splitext(uploaded_file.name or '')[1].lower() or '.jpg'
    name = f"invoices/{user_id}/{timezone.now():%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}{extension}"
    return default_storage.save(name, uploaded_file)


def open_blob(key: str):
    """Open a stored scan for reading."""
    return default_storage.open(key, 'rb')


def delete_blob(key: str) -> None:
    """Delete one blob. Raises whatever the storage backend raises."""
    default_storage.delete(key)


def discard_blobs(keys: Iterable[str]) -> int:
    """Delete blobs, logging failures instead of raising. Returns the number deleted."""
    deleted = 0
    for key in keys:
        if not key:
            continue
        try:
            delete_blob(key)
            deleted += 1
        except Exception:
            logger.error("Failed to delete blob %s", key, exc_info=True)
    return deleted


def discard_blobs_on_commit(keys: Iterable[str]) -> None:
    """Schedule ``discard_blobs`` for after the surrounding transaction commits."""
    keys = [key for key in keys if key]
    if keys:
        transaction.on_commit(lambda: discard_blobs(keys))
