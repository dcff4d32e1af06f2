"""
Live session registry (who is on the map, and where).

Design:
- One in-memory dict per server instance: session id -> Session.
- Python dicts keep insertion order, so snapshots are stable between calls and
  a rejoin keeps the session's original slot.
- The registry does no locking and no validation of its own. The presence
  manager serializes every call behind one lock and only hands it payloads
  that already passed validation and rate limiting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


DEFAULT_LAT = 0.0
DEFAULT_LNG = 0.0


@dataclass
class Session:
    id: str
    name: str
    lat: float
    lng: float
    updated_at: int
    # Last validated event (accepted or throttled). Drives eviction; never sent to clients.
    last_received_at: int


@dataclass(frozen=True)
class Position:
    """Externally visible view of a session."""

    id: str
    name: str
    lat: float
    lng: float
    updated_at: int


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> Optional[Position]:
        session = self._sessions.get(session_id)
        return _public(session) if session else None

    def join(self, session_id: str, name: str, now: int) -> Position:
        """
        Create the session for `session_id`, replacing any existing one.

        A replaced session starts over at the default position with both
        timestamps reset to `now`.
        """

        session = Session(
            id=session_id,
            name=name,
            lat=DEFAULT_LAT,
            lng=DEFAULT_LNG,
            updated_at=now,
            last_received_at=now,
        )
        self._sessions[session_id] = session
        return _public(session)

    def update(self, session_id: str, lat: float, lng: float, now: int) -> bool:
        """Move a session. Returns False (and does nothing) for unknown ids."""
        session = self._sessions.get(session_id)
        if session is None:
            return False
        session.lat = lat
        session.lng = lng
        session.updated_at = now
        session.last_received_at = now
        return True

    def touch(self, session_id: str, now: int) -> bool:
        """Keep a session alive without moving it."""
        session = self._sessions.get(session_id)
        if session is None:
            return False
        session.last_received_at = now
        return True

    def remove(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def stale_ids(self, now: int, ttl_ms: int) -> List[str]:
        # Strictly greater: a session exactly at the TTL survives one more sweep.
        return [sid for sid, s in self._sessions.items() if now - s.last_received_at > ttl_ms]

    def snapshot(self) -> List[Position]:
        return [_public(s) for s in self._sessions.values()]


def _public(session: Session) -> Position:
    return Position(
        id=session.id,
        name=session.name,
        lat=session.lat,
        lng=session.lng,
        updated_at=session.updated_at,
    )
