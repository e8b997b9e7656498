from typing import Mapping
from django.utils import timezone
from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync

GROUP = "records"


def announce_append(kind: str, record: Mapping[str, object], *, count: int) -> None:
    """Tell websocket listeners that ``kind`` gained a record."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {
        "type": "records.appended",
        "collection": kind,
        "record": dict(record),
        "count": count,
        "ts": now.isoformat(),
    }
    async_to_sync(channel_layer.group_send)(GROUP, event)
