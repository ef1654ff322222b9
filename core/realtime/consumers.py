import json
from channels.generic.websocket import AsyncWebsocketConsumer


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes catalog/ledger change notices so screens can refetch on demand."""
    GROUP = "updates"

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_update(self, event):
        # event: {"type": "broadcast.update", "event": "inventory.changed", "ts": "...", ...}
        payload = dict(event)
        payload["type"] = payload.pop("event")
        await self.send(json.dumps(payload))
