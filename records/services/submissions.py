"""
The add path shared by the API and management commands.

:func:`submit` snapshots the store, validates the candidate and appends
it only when every rule passes.  The whole sequence runs inside
:meth:`RecordStore.transaction` (the store lock plus, on the database
backend, a transaction holding row locks) so two submissions cannot
both pass a uniqueness check against the same stale snapshot.  Each
attempt produces exactly one :class:`Flash` for the caller to show,
even when the websocket broadcast fails.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from django.conf import settings
from prometheus_client import Counter

from ..collections import get_collection
from ..store import RecordStore, get_store
from ..validation import ValidationResult, validate
from .broadcast import announce_append

logger = logging.getLogger(__name__)

ACCEPTED_TOTAL = Counter(
    "records_submissions_accepted_total", "Records appended after validation", ["collection"]
)
REJECTED_TOTAL = Counter(
    "records_submissions_rejected_total", "Submissions rejected by validation", ["collection", "code"]
)


@dataclass(frozen=True)
class Flash:
    type: str
    text: str
    dismiss_after: int

    def as_dict(self) -> dict:
        return {"type": self.type, "text": self.text, "dismissAfter": self.dismiss_after}


@dataclass(frozen=True)
class Submission:
    kind: str
    record: dict
    result: ValidationResult
    flash: Flash

    @property
    def ok(self) -> bool:
        return self.result.ok


def _dismiss_after() -> int:
    return int(getattr(settings, "RECORDS_FLASH_DISMISS_SECONDS", 3))


def success_flash(kind: str) -> Flash:
    return Flash("ok", get_collection(kind).success_text, _dismiss_after())


def error_flash(reason: str) -> Flash:
    return Flash("error", reason, _dismiss_after())


def submit(kind: str, candidate: Mapping[str, object], *, store: Optional[RecordStore] = None) -> Submission:
    store = store or get_store()
    record = dict(candidate)
    with store.transaction():
        result = validate(kind, record, store.snapshot())
        if not result.ok:
            REJECTED_TOTAL.labels(collection=kind, code=result.code).inc()
            logger.info("Rejected %s submission (%s): %s", kind, result.code, result.reason)
            return Submission(kind, record, result, error_flash(result.reason))
        store.append(kind, record)
        count = store.count(kind)
    ACCEPTED_TOTAL.labels(collection=kind).inc()
    logger.info("Accepted %s record %s", kind, _identity(kind, record))
    try:
        announce_append(kind, record, count=count)
    except Exception:
        # The record is already stored; listeners catch up on their next list.
        logger.exception("Could not announce %s record %s", kind, _identity(kind, record))
    return Submission(kind, record, result, success_flash(kind))


def _identity(kind: str, record: Mapping[str, object]) -> str:
    return "/".join(str(record.get(f, "")) for f in get_collection(kind).identity)
