"""
Pytest fixtures for playlist tests.

Includes fixtures for:
- Live media playlists (empty and full)
- Segment factories
- Master playlist with shared renditions
- Environment isolation for configuration tests
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

import pytest

from hls_playlist.models.segments import MediaSegment
from hls_playlist.models.variants import Alternative, VariantParams
from hls_playlist.playlist.master import MasterPlaylist
from hls_playlist.playlist.media import MediaPlaylist

# =============================================================================
# Media playlists
# =============================================================================


@pytest.fixture
def live_playlist() -> MediaPlaylist:
    """Empty live playlist: window 3, capacity 5."""
    return MediaPlaylist(window_size=3, capacity=5)


@pytest.fixture
def full_playlist() -> MediaPlaylist:
    """Playlist with capacity 3 holding three 4s segments (seq 0..2)."""
    playlist = MediaPlaylist(window_size=3, capacity=3)
    for i in range(3):
        playlist.append(f"seg{i}.ts", 4.0)
    return playlist


@pytest.fixture
def make_segments() -> Callable[..., list[MediaSegment]]:
    """Factory for unnumbered segments named ``<prefix><i>.ts``."""

    def _make(count: int, duration: float = 4.0, prefix: str = "new") -> list[MediaSegment]:
        return [MediaSegment(uri=f"{prefix}{i}.ts", duration=duration) for i in range(count)]

    return _make


# =============================================================================
# Master playlists
# =============================================================================


@pytest.fixture
def english_audio() -> Alternative:
    """AUDIO rendition in group "aud"."""
    return Alternative(
        type="AUDIO",
        group_id="aud",
        name="English",
        language="en",
        default=True,
        autoselect="YES",
        uri="audio/en.m3u8",
    )


@pytest.fixture
def master_with_shared_audio(english_audio: Alternative) -> MasterPlaylist:
    """Master playlist whose two variants share one AUDIO rendition."""
    master = MasterPlaylist()
    master.append_variant(
        "low/index.m3u8",
        params=VariantParams(bandwidth=800_000, audio="aud", alternatives=[english_audio]),
    )
    master.append_variant(
        "high/index.m3u8",
        params=VariantParams(bandwidth=2_400_000, audio="aud", alternatives=[english_audio]),
    )
    return master


# =============================================================================
# Environment / logging isolation
# =============================================================================

HLS_ENV_VARS = [
    "HLS_WINDOW_SIZE",
    "HLS_CAPACITY",
    "HLS_VERSION",
    "HLS_DURATION_AS_INT",
    "HLS_INDEPENDENT_SEGMENTS",
    "HLS_ARGS",
    "HLS_MEDIA_TYPE",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove HLS_ and LOG_ variables so defaults apply."""
    for name in [*HLS_ENV_VARS, "LOG_LEVEL", "LOG_FOCUS"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root handlers and hls_playlist logger levels after a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("hls_playlist"):
            logging.getLogger(name).setLevel(logging.NOTSET)
