"""
Settings for the live map Django + Channels (ASGI) service.

- Django + Django Channels (ASGI), WebSocket-only, no database
- InMemoryChannelLayer: a single instance owns all presence state
- Environment-based configuration (a local `.env` is loaded for development)

Presence tunables (update window, TTL, reaper and broadcast periods) live in
`map_realtime.realtime.conf.PresenceSettings`, not here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# In production, prefer real environment variables; `.env` never overrides them.
load_dotenv(override=False)


BASE_DIR = Path(__file__).resolve().parent.parent


def _env(name: str, default: str | None = None) -> str | None:
    v = os.environ.get(name)
    return v if v not in (None, "") else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_csv(name: str, default: str = "") -> List[str]:
    raw = _env(name, default) or ""
    return [x.strip() for x in raw.split(",") if x.strip()]


# SECURITY WARNING: Do not hardcode secrets in code.
DEBUG = _env_bool("DJANGO_DEBUG", default=False)

SECRET_KEY = _env("DJANGO_SECRET_KEY", "dev-insecure-secret-key-change-me")
if not DEBUG and (not SECRET_KEY or SECRET_KEY.startswith("dev-insecure-")):
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production")

ALLOWED_HOSTS = _env_csv("DJANGO_ALLOWED_HOSTS", default="localhost,127.0.0.1")

# Browsers on any origin may poll /health; the map frontend usually runs on its own dev server.
CORS_ALLOW_ALL_ORIGINS = _env_bool("CORS_ALLOW_ALL_ORIGINS", default=True)
CORS_ALLOWED_ORIGINS = _env_csv("CORS_ALLOWED_ORIGINS", default="http://localhost:5173,http://127.0.0.1:5173")
CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]

# WebSocket Origin allow-list for channels.security.websocket.OriginValidator ("*" allows any).
WS_ALLOWED_ORIGINS = _env_csv("WS_ALLOWED_ORIGINS", default="*")

USE_X_FORWARDED_HOST = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = _env_bool("DJANGO_SECURE_SSL_REDIRECT", default=False)
# Load balancer probes hit /health over plain HTTP.
SECURE_REDIRECT_EXEMPT = [r"^health/?$"]


INSTALLED_APPS = [
    "corsheaders",
    # Channels must be installed to enable ASGI + websocket routing.
    "channels",
    "map_realtime.realtime.apps.RealtimeConfig",
]

# HealthCheckCors runs outermost so its header wins over the CORS allow-list.
MIDDLEWARE = [
    "map_realtime.middleware.HealthCheckCorsMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "map_realtime.urls"

ASGI_APPLICATION = "map_realtime.asgi.application"

# Positions are memory-only; the service never touches a database.
DATABASES: dict = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


#
# Channels
#
# Cross-instance fan-out is out of scope, so the in-process layer is enough.
#
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
        "CONFIG": {
            "capacity": int(_env("CHANNEL_LAYER_CAPACITY", "100") or "100"),
            "expiry": int(_env("CHANNEL_LAYER_EXPIRY", "60") or "60"),
        },
    }
}


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "default"}},
    "root": {"handlers": ["console"], "level": _env("DJANGO_LOG_LEVEL", "INFO") or "INFO"},
}
