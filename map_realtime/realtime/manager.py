"""
Presence manager: the single owner of live map state for one server instance.

It holds the registry, the update rate limiter, the stale reaper and the
broadcaster, all sharing one asyncio.Lock, plus the two background loops
(periodic sweep, periodic broadcast). Consumers only ever talk to this class.

Every handler returns an `Outcome`. Rejections are invisible to clients: the
only observable effect of a dropped event is that the next broadcast does not
reflect it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional

from .broadcaster import Broadcaster, ChannelLayerTransport, Transport
from .conf import PresenceSettings
from .presence import Position, SessionRegistry
from .rate_limit import UpdateRateLimiter
from .reaper import StaleReaper
from .validation import Outcome, Rejection, validate_join, validate_update

logger = logging.getLogger(__name__)


def epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class PresenceManager:
    def __init__(
        self,
        settings: Optional[PresenceSettings] = None,
        transport: Optional[Transport] = None,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        self.settings = settings or PresenceSettings()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._tasks: List[asyncio.Task] = []

        self.registry = SessionRegistry()
        self.limiter = UpdateRateLimiter(self.settings.UPDATE_WINDOW_MS)
        self.broadcaster = Broadcaster(
            self.registry,
            self._lock,
            transport or ChannelLayerTransport(self.settings.GROUP_NAME),
        )
        self.reaper = StaleReaper(
            self.registry,
            self.limiter,
            self._lock,
            ttl_ms=self.settings.STALE_TTL_MS,
            clock=clock,
        )

    @property
    def group_name(self) -> str:
        return self.settings.GROUP_NAME

    # ------------------------------------------------------------------ events

    async def handle_join(self, session_id: str, payload: Any) -> Outcome:
        data, outcome = validate_join(payload)
        if data is None:
            logger.debug("Dropped join (connection_id=%s fields=%s)", session_id, outcome.detail)
            return outcome

        async with self._lock:
            self.registry.join(session_id, data.name, self._clock())
            count = len(self.registry)
        logger.info("Session joined (connection_id=%s name=%r sessions=%d)", session_id, data.name, count)

        await self.broadcaster.broadcast()
        return outcome

    async def handle_update(self, session_id: str, payload: Any) -> Outcome:
        data, outcome = validate_update(payload)
        if data is None:
            logger.debug("Dropped update_location (connection_id=%s fields=%s)", session_id, outcome.detail)
            return outcome

        async with self._lock:
            now = self._clock()
            # The limiter is consulted before the registry, so an update sent
            # before joining still opens a window for that id.
            if not self.limiter.try_accept(session_id, now):
                self.registry.touch(session_id, now)
                outcome = Outcome.rejected(Rejection.THROTTLED)
            elif not self.registry.update(session_id, data.lat, data.lng, now):
                outcome = Outcome.rejected(Rejection.UNKNOWN_SESSION)

        if not outcome.accepted:
            logger.debug("Dropped update_location (connection_id=%s reason=%s)", session_id, outcome.reason.value)
            return outcome

        await self.broadcaster.broadcast()
        return outcome

    async def handle_leave(self, session_id: str) -> Outcome:
        """Connection closed. Always broadcasts, even if the socket never joined."""
        async with self._lock:
            removed = self.registry.remove(session_id)
            self.limiter.forget(session_id)
            count = len(self.registry)
        if removed:
            logger.info("Session left (connection_id=%s sessions=%d)", session_id, count)

        await self.broadcaster.broadcast()
        return Outcome.ok() if removed else Outcome.rejected(Rejection.UNKNOWN_SESSION)

    # ------------------------------------------------------------- maintenance

    async def sweep(self, now: Optional[int] = None) -> List[str]:
        evicted = await self.reaper.sweep(now)
        if evicted:
            await self.broadcaster.broadcast()
        return evicted

    async def broadcast(self) -> bool:
        return await self.broadcaster.broadcast()

    async def snapshot(self) -> List[Position]:
        async with self._lock:
            return self.registry.snapshot()

    # --------------------------------------------------------------- lifecycle

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        """
        Start the sweep and broadcast loops on the running event loop.

        Safe to call repeatedly; only the first call while stopped does anything.
        """

        if self.running:
            return
        self._tasks = [
            asyncio.create_task(
                _run_every(self.settings.REAPER_INTERVAL_MS, self.sweep, "stale reaper"),
                name="presence-reaper",
            ),
            asyncio.create_task(
                _run_every(self.settings.BROADCAST_INTERVAL_MS, self.broadcast, "positions broadcast"),
                name="presence-broadcast",
            ),
        ]
        logger.info(
            "Presence manager started (window=%dms ttl=%dms reaper=%dms broadcast=%dms)",
            self.settings.UPDATE_WINDOW_MS,
            self.settings.STALE_TTL_MS,
            self.settings.REAPER_INTERVAL_MS,
            self.settings.BROADCAST_INTERVAL_MS,
        )

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        if not tasks:
            return
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Presence manager stopped")


async def _run_every(interval_ms: int, job: Callable[[], Awaitable[Any]], name: str) -> None:
    """
    Run `job` every `interval_ms` until cancelled. A failing tick never ends the loop.

    Ticks are scheduled from the loop clock, so a job's run time does not push
    later ticks back. A tick that overruns its slot drops the missed ones.
    """
    interval = interval_ms / 1000
    loop = asyncio.get_running_loop()
    next_run = loop.time() + interval
    try:
        while True:
            await asyncio.sleep(max(0.0, next_run - loop.time()))
            try:
                await job()
            except Exception:
                logger.exception("%s tick failed", name)
            next_run += interval
            now = loop.time()
            if next_run <= now:
                next_run = now + interval
    except asyncio.CancelledError:
        logger.debug("%s loop cancelled", name)
        raise
