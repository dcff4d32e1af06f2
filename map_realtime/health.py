from __future__ import annotations

import time

from django.http import JsonResponse

_STARTED_AT = time.monotonic()


def health(request):
    """
    Load balancer / uptime probe.

    Keep it cheap and dependency-free: no presence lock, no channel layer.
    """

    return JsonResponse(
        {
            "status": "ok",
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
        }
    )
