"""
WebSocket consumer for the live positions stream.

Key behavior:
- URL: /ws/positions/
- Every socket gets a server-assigned connection id, which doubles as its session id.
- Every socket joins one Channels group; snapshots are fanned out through it.
- Client frames are JSON objects tagged by `type`:
  {"type":"join","name":"Bob"}
  {"type":"update_location","lat":12.5,"lng":-3.25}
- The server never answers a client frame. Invalid, throttled or unknown
  frames are dropped; the next `positions` frame is the only feedback.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, Optional

from channels.generic.websocket import AsyncWebsocketConsumer

from .manager import PresenceManager
from .serializers import ConnectedEvent

logger = logging.getLogger(__name__)


class PositionsConsumer(AsyncWebsocketConsumer):
    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.connection_id: str = uuid.uuid4().hex
        self.presence: Optional[PresenceManager] = None
        self.group_name: Optional[str] = None

    async def connect(self) -> None:
        # Injected by PresenceMiddleware.
        self.presence = self.scope["presence"]
        self.group_name = self.presence.group_name

        await self.accept()
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.send_json(ConnectedEvent(connection_id=self.connection_id).model_dump())

    async def disconnect(self, close_code: int) -> None:
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        if self.presence:
            await self.presence.handle_leave(self.connection_id)

    async def receive(self, text_data: Optional[str] = None, bytes_data: Optional[bytes] = None) -> None:
        if not text_data or self.presence is None:
            return

        try:
            msg = json.loads(text_data)
        except json.JSONDecodeError:
            logger.debug("Dropped non-JSON frame (connection_id=%s)", self.connection_id)
            return
        if not isinstance(msg, dict):
            return

        msg_type = msg.get("type")
        if msg_type == "join":
            await self.presence.handle_join(self.connection_id, msg)
        elif msg_type == "update_location":
            await self.presence.handle_update(self.connection_id, msg)
        else:
            logger.debug("Dropped frame with unknown type %r (connection_id=%s)", msg_type, self.connection_id)

    async def positions_message(self, event: Dict[str, Any]) -> None:
        """
        Handler for group broadcasts.
        """
        try:
            await self.send_json(event["payload"])
        except Exception:
            # One dead socket must not affect delivery to the rest of the group.
            logger.exception("Failed to deliver positions (connection_id=%s)", self.connection_id)

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.send(text_data=json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
