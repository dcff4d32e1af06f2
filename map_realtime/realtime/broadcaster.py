"""
Snapshot fan-out.

The broadcaster copies the registry snapshot while holding the presence lock,
releases it, and only then hands the payload to the transport. A slow or
broken socket therefore never blocks joins, updates or sweeps.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Protocol

from channels.layers import DEFAULT_CHANNEL_LAYER, get_channel_layer

from .presence import SessionRegistry
from .serializers import positions_payload

logger = logging.getLogger(__name__)

# Consumer handler invoked for each group message (`positions.message` -> `positions_message`).
POSITIONS_MESSAGE_TYPE = "positions.message"


class Transport(Protocol):
    async def broadcast(self, payload: Dict[str, Any]) -> None:
        ...


class ChannelLayerTransport:
    """
    Delivers payloads to every socket in a Channels group.

    The in-memory layer queues one copy per member channel; each consumer then
    writes to its own socket, so a failing recipient cannot stop the others.
    """

    def __init__(self, group_name: str, channel_layer: Any = None, alias: str = DEFAULT_CHANNEL_LAYER):
        self.group_name = group_name
        self._alias = alias
        self._channel_layer = channel_layer

    @property
    def channel_layer(self) -> Any:
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer(self._alias)
            if self._channel_layer is None:
                raise RuntimeError(f"No channel layer configured for alias {self._alias!r}")
        return self._channel_layer

    async def broadcast(self, payload: Dict[str, Any]) -> None:
        await self.channel_layer.group_send(
            self.group_name,
            {"type": POSITIONS_MESSAGE_TYPE, "payload": payload},
        )


class Broadcaster:
    def __init__(self, registry: SessionRegistry, lock: asyncio.Lock, transport: Transport) -> None:
        self._registry = registry
        self._lock = lock
        self.transport = transport

    async def broadcast(self) -> bool:
        """
        Send the full current snapshot to every connected socket.

        Returns False if the transport failed. Failures are logged, never raised:
        the next periodic tick carries the same (or newer) state anyway.
        """

        async with self._lock:
            snapshot = self._registry.snapshot()

        payload = positions_payload(snapshot)
        try:
            await self.transport.broadcast(payload)
        except Exception:
            logger.exception("Positions broadcast failed (sessions=%d)", len(snapshot))
            return False
        return True
