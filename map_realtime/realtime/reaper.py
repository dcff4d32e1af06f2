"""
Eviction of abandoned sessions.

Browsers that lose connectivity do not always close their socket cleanly, so a
session that has sent no validated event for longer than the TTL is removed on
the next sweep. Sweeps only ever remove sessions; positions are never touched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from .presence import SessionRegistry
from .rate_limit import UpdateRateLimiter

logger = logging.getLogger(__name__)


class StaleReaper:
    def __init__(
        self,
        registry: SessionRegistry,
        limiter: UpdateRateLimiter,
        lock: asyncio.Lock,
        *,
        ttl_ms: int,
        clock: Callable[[], int],
    ) -> None:
        self._registry = registry
        self._limiter = limiter
        self._lock = lock
        self._clock = clock
        self.ttl_ms = ttl_ms

    async def sweep(self, now: Optional[int] = None) -> List[str]:
        """Remove every session idle for more than the TTL. Returns the evicted ids."""
        async with self._lock:
            if now is None:
                now = self._clock()
            evicted = self._registry.stale_ids(now, self.ttl_ms)
            for session_id in evicted:
                self._registry.remove(session_id)
                # Keep limiter bookkeeping bounded by the live sessions.
                self._limiter.forget(session_id)
            remaining = len(self._registry)

        if evicted:
            logger.info("Evicted %d stale session(s), %d remaining", len(evicted), remaining)
        return evicted
