"""
Database models for the records app.

Collections are stored whole, one row per collection, mirroring the
key-value slots the front end kept in browser storage.  The row's
``value`` holds the serialized list of records, most recent first.
"""
from __future__ import annotations

from django.db import models


class RecordSlot(models.Model):
    """One persisted collection, addressed by its storage key."""
    key = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Storage key of the collection (e.g. 'hm_patients')",
    )
    value = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        size = len(self.value) if isinstance(self.value, list) else 0
        return f"{self.key} ({size} records)"
