"""
The record store: named, append-only, most-recent-first collections.

A :class:`RecordStore` loads each collection from its key-value slot on
first use and writes the full collection back after every append.  When
the backend is shared with other processes (database, cache) every read
goes back to the slot instead of the in-process copy.  The store never
validates; callers go through :mod:`records.services.submissions` which
checks a candidate against a snapshot inside :meth:`RecordStore.transaction`.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .collections import COLLECTIONS, get_collection
from .storage import KeyValueStore, load_backend

logger = logging.getLogger(__name__)

Record = dict[str, object]
Snapshot = Mapping[str, tuple[Mapping[str, object], ...]]


class RecordStore:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        # Held by submitters across snapshot -> validate -> append.
        self.lock = threading.RLock()
        self._collections: dict[str, list[Record]] = {}

    def _load(self, kind: str) -> list[Record]:
        collection = get_collection(kind)
        records = None if self.kv.shared else self._collections.get(kind)
        if records is None:
            raw = self.kv.get(collection.key)
            if raw is None:
                records = []
            elif not isinstance(raw, list):
                logger.warning("Slot %s holds %s, not a list; starting empty", collection.key, type(raw).__name__)
                records = []
            else:
                records = [dict(r) for r in raw if isinstance(r, dict)]
                if len(records) != len(raw):
                    logger.warning("Dropped %d malformed entries from slot %s", len(raw) - len(records), collection.key)
            self._collections[kind] = records
        return records

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """Isolate a snapshot -> validate -> append sequence.

        Takes the in-process lock and, for backends that support it, a
        storage transaction that locks the slots read inside it.  Across
        processes this only holds for :class:`DatabaseKeyValueStore`.
        """
        with self.lock:
            try:
                with self.kv.atomic():
                    yield self
            except BaseException:
                # The backend may have rolled back a write the cache saw.
                self._collections.clear()
                raise

    def list(self, kind: str) -> list[Record]:
        """Return the collection's records, most recent first."""
        with self.lock:
            return [dict(r) for r in self._load(kind)]

    def append(self, kind: str, record: Mapping[str, object]) -> None:
        """Insert ``record`` at the front and persist the whole collection."""
        with self.lock:
            updated = [dict(record)] + self._load(kind)
            self.kv.set(get_collection(kind).key, updated)
            self._collections[kind] = updated
            logger.debug("Appended to %s (%d records)", kind, len(updated))

    def count(self, kind: str) -> int:
        with self.lock:
            return len(self._load(kind))

    def snapshot(self) -> Snapshot:
        """Read-only view of every collection taken under the store lock."""
        with self.lock:
            return MappingProxyType({
                kind: tuple(MappingProxyType(dict(r)) for r in self._load(kind))
                for kind in COLLECTIONS
            })


_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def get_store() -> RecordStore:
    """Process-wide store built from ``RECORDS_STORAGE_BACKEND``."""
    global _store
    with _store_lock:
        if _store is None:
            _store = RecordStore(load_backend())
        return _store


def reset_store(store: Optional[RecordStore] = None) -> None:
    """Drop the cached store (or install ``store``) so the next call reloads."""
    global _store
    with _store_lock:
        _store = store
