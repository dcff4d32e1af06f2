from __future__ import annotations

import os
from typing import Any, Dict, List

import pytest

# Configure Django before any test module imports channels consumers.
os.environ.setdefault("DJANGO_DEBUG", "1")
os.environ.setdefault("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "map_realtime.settings")

import django  # noqa: E402

django.setup()

from channels.layers import channel_layers  # noqa: E402

from map_realtime.realtime.conf import PresenceSettings  # noqa: E402
from map_realtime.realtime.manager import PresenceManager  # noqa: E402


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingTransport:
    def __init__(self) -> None:
        self.payloads: List[Dict[str, Any]] = []
        self.fail = False

    async def broadcast(self, payload: Dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("transport down")
        self.payloads.append(payload)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
async def manager(clock: FakeClock, transport: RecordingTransport):
    mgr = PresenceManager(settings=PresenceSettings(), transport=transport, clock=clock)
    yield mgr
    await mgr.stop()


@pytest.fixture(autouse=True)
def _fresh_channel_layers():
    # InMemoryChannelLayer queues must not leak between per-test event loops.
    channel_layers.backends.clear()
    yield
    channel_layers.backends.clear()
