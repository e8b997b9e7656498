"""
Key-value persistence for record collections.

Every collection is written whole under its storage key after each
mutation.  The backend is selected with the ``RECORDS_STORAGE_BACKEND``
setting so the same store and validation code can run against an
in-memory dict in tests and the database in production.
"""
from __future__ import annotations

import json
from contextlib import nullcontext
from typing import Any, Optional

from django.conf import settings
from django.core.cache import caches
from django.db import transaction
from django.utils import timezone
from django.utils.module_loading import import_string


class KeyValueStore:
    """Minimal get/set interface over JSON-serializable values."""

    # Other processes may write the same slots, so readers must not
    # trust a cached copy.
    shared = False

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def atomic(self):
        """Context in which reads followed by writes are isolated."""
        return nullcontext()


class MemoryKeyValueStore(KeyValueStore):
    """Keeps serialized values in a dict; values round-trip through JSON
    so callers never share mutable state with the store."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key):
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key, value):
        self._data[key] = json.dumps(value)

    def raw(self, key: str) -> Optional[str]:
        return self._data.get(key)


class CacheKeyValueStore(KeyValueStore):
    """Stores slots in a Django cache (locmem or Redis) without expiry.

    Reads always go to the cache, but the cache offers no transactions:
    check-then-append is only atomic within one process.
    """

    shared = True

    def __init__(self, alias: str = "default", prefix: str = "records:"):
        self.cache = caches[alias]
        self.prefix = prefix

    def get(self, key):
        return self.cache.get(self.prefix + key)

    def set(self, key, value):
        self.cache.set(self.prefix + key, value, timeout=None)


class DatabaseKeyValueStore(KeyValueStore):
    """Stores each slot as a :class:`records.models.RecordSlot` row.

    Inside :meth:`atomic` reads lock the row (``SELECT ... FOR UPDATE``)
    so concurrent workers serialize their check-then-append.  A slot row
    is inserted with a plain ``INSERT``; a worker racing to create the
    same slot fails with ``IntegrityError`` instead of overwriting it.
    """

    shared = True

    def __init__(self, using: Optional[str] = None):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def _slots(self):
        from .models import RecordSlot

        return RecordSlot.objects.using(self.using)

    def get(self, key):
        qs = self._slots().filter(key=key)
        if transaction.get_connection(self.using).in_atomic_block:
            qs = qs.select_for_update()
        return qs.values_list("value", flat=True).first()

    def set(self, key, value):
        updated = self._slots().filter(key=key).update(value=value, updated_at=timezone.now())
        if not updated:
            self._slots().create(key=key, value=value)


def load_backend(path: Optional[str] = None) -> KeyValueStore:
    path = path or getattr(settings, "RECORDS_STORAGE_BACKEND", "records.storage.DatabaseKeyValueStore")
    return import_string(path)()
