import json
from channels.generic.websocket import AsyncWebsocketConsumer

from ..services.broadcast import GROUP

class RecordUpdatesConsumer(AsyncWebsocketConsumer):
    GROUP = GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def records_appended(self, event):
        # event: {"type": "records.appended", "collection": str, "record": {...}, "count": int, "ts": "..."}
        await self.send(json.dumps(event))
