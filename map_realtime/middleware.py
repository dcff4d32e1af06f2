"""
HTTP middleware for map_realtime.

- HealthCheckCorsMiddleware: answers /health with `Access-Control-Allow-Origin: *`
  even when CORS_ALLOWED_ORIGINS is restricted, so any dashboard can poll it.
  The HTTPS redirect exemption for /health is SECURE_REDIRECT_EXEMPT in settings.
"""

from __future__ import annotations


def _is_health_path(request) -> bool:
    path = (request.path or "").rstrip("/") or "/"
    return path == "/health"


class HealthCheckCorsMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if _is_health_path(request):
            response["Access-Control-Allow-Origin"] = "*"
        return response
