"""
ASGI lifespan handler: starts the presence loops on startup and cancels them on
shutdown, so no timer outlives the server.
"""

from __future__ import annotations

import logging

from .manager import PresenceManager

logger = logging.getLogger(__name__)


class LifespanApp:
    def __init__(self, manager: PresenceManager):
        self.manager = manager

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "lifespan":
            raise ValueError("LifespanApp only supports the lifespan protocol")

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self.manager.start()
                except Exception as exc:
                    logger.exception("Presence manager failed to start")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.manager.stop()
                await send({"type": "lifespan.shutdown.complete"})
                return
