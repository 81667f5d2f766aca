"""
Unit tests for PlaylistConfig.

These tests verify playlist defaults loading from environment variables:
- Default values
- HLS_ environment variable loading
- Validation constraints enforced
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from hls_playlist.config.playlist_config import PlaylistConfig
from hls_playlist.models.playlist import MediaType


class TestPlaylistConfigDefaults:
    """Tests for default configuration values."""

    def test_default_values(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify default values when no environment variables set."""
        config = PlaylistConfig()

        assert config.window_size == 5
        assert config.capacity == 10
        assert config.version == 3
        assert config.duration_as_int is False
        assert config.independent_segments is False
        assert config.args == ""
        assert config.media_type is None
        assert config.playlist_type is None


class TestPlaylistConfigEnvironment:
    """Tests for environment variable loading."""

    def test_loads_from_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify HLS_ variables override defaults."""
        clean_env.setenv("HLS_WINDOW_SIZE", "6")
        clean_env.setenv("HLS_CAPACITY", "12")
        clean_env.setenv("HLS_VERSION", "4")
        clean_env.setenv("HLS_DURATION_AS_INT", "true")
        clean_env.setenv("HLS_ARGS", "token=abc")
        clean_env.setenv("HLS_MEDIA_TYPE", "event")

        config = PlaylistConfig()

        assert config.window_size == 6
        assert config.capacity == 12
        assert config.version == 4
        assert config.duration_as_int is True
        assert config.args == "token=abc"
        assert config.playlist_type == MediaType.EVENT

    def test_case_insensitive(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify lower-case variable names are accepted."""
        clean_env.setenv("hls_window_size", "2")

        assert PlaylistConfig().window_size == 2

    def test_vod_media_type(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify 'vod' maps to MediaType.VOD."""
        clean_env.setenv("HLS_MEDIA_TYPE", "vod")

        assert PlaylistConfig().playlist_type == MediaType.VOD


class TestPlaylistConfigValidation:
    """Tests for validation constraints."""

    def test_window_above_capacity_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify window_size > capacity fails validation."""
        with pytest.raises(ValidationError, match="must not exceed capacity"):
            PlaylistConfig(window_size=11, capacity=10)

    def test_negative_capacity_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify capacity must be >= 0."""
        with pytest.raises(ValidationError):
            PlaylistConfig(window_size=0, capacity=-1)

    @pytest.mark.parametrize("version", [0, 13])
    def test_version_out_of_range(self, clean_env: pytest.MonkeyPatch, version: int) -> None:
        """Verify version must be within 1..12."""
        with pytest.raises(ValidationError):
            PlaylistConfig(version=version)

    def test_unknown_media_type_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        """Verify only 'event' and 'vod' are accepted."""
        clean_env.setenv("HLS_MEDIA_TYPE", "live")

        with pytest.raises(ValidationError):
            PlaylistConfig()
