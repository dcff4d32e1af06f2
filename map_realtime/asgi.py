"""
ASGI config for the map_realtime project.

It exposes the ASGI callable as a module-level variable named ``application``.

Run with a lifespan-aware server (`python -m map_realtime`, i.e. uvicorn) so
the presence loops start and stop with the process. Under Daphne the loops
start on the first WebSocket connection instead.
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "map_realtime.settings")

from channels.routing import ProtocolTypeRouter
from django.core.asgi import get_asgi_application

# Standard Django ASGI application for HTTP. Must run before importing consumers.
django_asgi_app = get_asgi_application()

from map_realtime.realtime.lifespan import LifespanApp  # noqa: E402
from map_realtime.realtime.manager import PresenceManager  # noqa: E402
from map_realtime.realtime.routing import build_websocket_application  # noqa: E402


def build_application(manager: PresenceManager) -> ProtocolTypeRouter:
    return ProtocolTypeRouter(
        {
            "http": django_asgi_app,
            "websocket": build_websocket_application(manager),
            "lifespan": LifespanApp(manager),
        }
    )


# One manager per server process; it owns all live positions.
presence_manager = PresenceManager()

application = build_application(presence_manager)
