import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class RealtimeConfig(AppConfig):
    """Live positions over WebSocket."""

    name = "map_realtime.realtime"
    label = "realtime"

    def ready(self):
        """Fail at startup, not on the first connection, if a PRESENCE_* variable is invalid."""
        from .conf import PresenceSettings

        presence = PresenceSettings()
        logger.debug("Presence settings: %s", presence.model_dump())
