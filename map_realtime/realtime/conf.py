from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PresenceSettings(BaseSettings):
    """Tunables for the presence core; each is independent of the others."""

    model_config = SettingsConfigDict(
        env_prefix="PRESENCE_",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    # Minimum time between two accepted position updates from one session.
    UPDATE_WINDOW_MS: int = Field(default=1_000, gt=0)
    # A session with no validated event for longer than this is evicted.
    STALE_TTL_MS: int = Field(default=30_000, gt=0)
    REAPER_INTERVAL_MS: int = Field(default=15_000, gt=0)
    BROADCAST_INTERVAL_MS: int = Field(default=1_000, gt=0)
    # Channel layer group every connected socket joins.
    GROUP_NAME: str = Field(default="positions", min_length=1, max_length=80)
