"""
Channels middleware that hands the server's PresenceManager to consumers.
"""

from channels.middleware import BaseMiddleware

from .manager import PresenceManager


class PresenceMiddleware(BaseMiddleware):
    """
    Puts the manager into `scope["presence"]`.

    Servers that do not speak the ASGI lifespan protocol (e.g. Daphne) never
    trigger startup, so the first WebSocket connection starts the background
    loops instead. `start()` is a no-op once they are running.
    """

    def __init__(self, inner, manager: PresenceManager):
        super().__init__(inner)
        self.manager = manager

    async def __call__(self, scope, receive, send):
        if scope.get("type") == "websocket":
            self.manager.start()
        scope = dict(scope, presence=self.manager)
        return await super().__call__(scope, receive, send)
