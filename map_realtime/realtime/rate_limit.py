"""Per-session minimum interval between accepted position updates."""

from __future__ import annotations

from typing import Dict


class UpdateRateLimiter:
    """
    Fixed-window limiter keyed by session id.

    Only the timestamp of the last *accepted* update is kept, so memory is
    bounded by the number of sessions as long as `forget` is called whenever a
    session goes away. Joining does not reset the record.
    """

    def __init__(self, window_ms: int) -> None:
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        self.window_ms = window_ms
        self._last_accepted: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._last_accepted)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._last_accepted

    def try_accept(self, session_id: str, now: int) -> bool:
        last = self._last_accepted.get(session_id)
        # An update exactly one window after the previous one is accepted.
        if last is not None and now - last < self.window_ms:
            return False
        self._last_accepted[session_id] = now
        return True

    def forget(self, session_id: str) -> None:
        self._last_accepted.pop(session_id, None)
