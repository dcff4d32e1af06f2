from django.conf import settings
from django.urls import re_path

from channels.routing import URLRouter
from channels.security.websocket import OriginValidator

from .consumers import PositionsConsumer
from .manager import PresenceManager
from .middleware import PresenceMiddleware


websocket_urlpatterns = [
    re_path(r"^ws/positions/$", PositionsConsumer.as_asgi()),
]


def build_websocket_application(manager: PresenceManager):
    """WebSocket ASGI app bound to one PresenceManager, behind the origin check."""
    app = PresenceMiddleware(URLRouter(websocket_urlpatterns), manager)
    return OriginValidator(app, list(getattr(settings, "WS_ALLOWED_ORIGINS", ["*"])))
