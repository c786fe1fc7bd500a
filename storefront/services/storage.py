"""Key/value blob storage used to persist carts between requests."""
import logging
from typing import Dict, Optional

from models import db
from models.storage import StoredBlob

logger = logging.getLogger(__name__)


class KeyValueStorage:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value


class DatabaseStorage(KeyValueStorage):
    """Blobs in the ``stored_blob`` table, committed on every write."""

    def get(self, key):
        row = db.session.get(StoredBlob, key)
        return row.value if row else None

    def set(self, key, value):
        row = db.session.get(StoredBlob, key)
        if row is None:
            row = StoredBlob(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
