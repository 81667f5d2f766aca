"""
Playlist configuration from environment variables.

- Environment variables use the HLS_ prefix
- Defaults suit a short live sliding window
- Validation via Pydantic Field constraints
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from hls_playlist.models.playlist import MediaType
from hls_playlist.version import MIN_VERSION


class PlaylistConfig(BaseSettings):
    """Playlist configuration from environment variables.

    Attributes:
        window_size: Segments shown in a live playlist; 0 shows all (VOD).
        capacity: Slot count of the segment ring buffer.
        version: Initial EXT-X-VERSION. Raised automatically by features.
        duration_as_int: Write EXTINF durations as whole seconds.
        independent_segments: Emit EXT-X-INDEPENDENT-SEGMENTS.
        args: Query-string fragment appended to every URI.
        media_type: EXT-X-PLAYLIST-TYPE, "event" or "vod"; unset for live.
    """

    window_size: int = Field(
        default=5,
        ge=0,
        description="Segments visible in the sliding window (0 = unbounded)",
    )
    capacity: int = Field(
        default=10,
        ge=0,
        description="Segment ring buffer slot count",
    )
    version: int = Field(
        default=MIN_VERSION,
        ge=1,
        le=12,
        description="Initial EXT-X-VERSION",
    )
    duration_as_int: bool = Field(
        default=False,
        description="Write EXTINF durations rounded up to whole seconds",
    )
    independent_segments: bool = Field(
        default=False,
        description="Emit EXT-X-INDEPENDENT-SEGMENTS",
    )
    args: str = Field(
        default="",
        description="Query-string fragment appended to URIs",
    )
    media_type: Literal["event", "vod"] | None = Field(
        default=None,
        description="EXT-X-PLAYLIST-TYPE",
    )

    model_config = {
        "env_prefix": "HLS_",
        "case_sensitive": False,
    }

    @model_validator(mode="after")
    def _window_fits_capacity(self) -> PlaylistConfig:
        if self.window_size > self.capacity:
            raise ValueError(
                f"window_size ({self.window_size}) must not exceed capacity ({self.capacity})"
            )
        return self

    @property
    def playlist_type(self) -> MediaType | None:
        """media_type as a MediaType enum."""
        if self.media_type == "event":
            return MediaType.EVENT
        if self.media_type == "vod":
            return MediaType.VOD
        return None
