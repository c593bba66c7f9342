"""
Local document storage.

Every collection (products, categories, sales, settings) is persisted as a
single JSON document under a fixed key. Writes replace the whole document and
are atomic per key; callers serialize read-modify-write cycles on a key with
``DocumentStore.lock(key)``.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from pos.exceptions import PersistenceError
from pos.models import StorageEntry

logger = logging.getLogger(__name__)

SALES_KEY = 'sales'
PRODUCTS_KEY = 'products'
CATEGORIES_KEY = 'categories'
TAX_SETTINGS_KEY = 'tax_settings'
BUSINESS_INFO_KEY = 'business_info'
RECEIPT_SETTINGS_KEY = 'receipt_settings'


class KeyValueStore(ABC):
    """String key-value storage engine."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when the key was never written."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``. Raises PersistenceError on failure."""


class SqlAlchemyKeyValueStore(KeyValueStore):
    """Key-value store backed by the ``kv_store`` table."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        session = self._session_factory()
        try:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"[STORAGE] Read of '{key}' failed: {e}", exc_info=True)
            raise PersistenceError(f"Could not read '{key}' from storage") from e

    def set(self, key: str, value: str) -> None:
        session = self._session_factory()
        try:
            entry = session.get(StorageEntry, key)
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"[STORAGE] Write of '{key}' failed: {e}", exc_info=True)
            raise PersistenceError() from e


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class DocumentStore:
    """
    JSON documents on top of a KeyValueStore.

    Decimals are written as strings and datetimes as ISO-8601 strings; the
    model ``from_dict`` constructors turn them back into values.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self._locks: Dict[str, threading.RLock] = defaultdict(threading.RLock)
        self._locks_guard = threading.Lock()

    def lock(self, key: str) -> threading.RLock:
        """Per-key lock serializing read-modify-write cycles."""
        with self._locks_guard:
            return self._locks[key]

    def _serialize(self, value: Any) -> str:
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            elif isinstance(obj, Decimal):
                return str(obj)
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
        return json.dumps(value, default=default_handler)

    def load(self, key: str, default_factory: Callable[[], Any]) -> Any:
        """Load the document under ``key``, or ``default_factory()`` if absent."""
        raw = self.backend.get(key)
        if raw is None:
            return default_factory()
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"[STORAGE] Document '{key}' is corrupt: {e}")
            raise PersistenceError(f"Stored '{key}' data is unreadable") from e

    def save(self, key: str, document: Any) -> None:
        """Replace the document under ``key``."""
        try:
            serialized = self._serialize(document)
        except TypeError as e:
            raise PersistenceError(f"Could not serialize '{key}'") from e
        self.backend.set(key, serialized)
        logger.debug(f"[STORAGE] Saved '{key}' ({len(serialized)} bytes)")
