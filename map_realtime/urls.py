"""
URL configuration for map_realtime.

HTTP only carries the health probe; positions travel over /ws/positions/
(see map_realtime.realtime.routing).
"""
from django.urls import re_path

from .health import health

urlpatterns = [
    # Accept both /health and /health/ so probes never hit an APPEND_SLASH redirect.
    re_path(r"^health/?$", health),
]
