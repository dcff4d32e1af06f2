"""
Realtime WebSocket app.

This app contains:
- A Channels consumer for `/ws/positions/`
- The in-memory presence manager (session registry, update rate limiting,
  stale session eviction, snapshot broadcast)
- One manager per server instance; cross-instance sync is not supported
"""
