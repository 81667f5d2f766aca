"""
Configuration module for playlist controllers.

This module provides Pydantic-based configuration models
loaded from environment variables.

Exports:
    PlaylistConfig: Playlist defaults with HLS_ prefix
"""

from hls_playlist.config.playlist_config import PlaylistConfig

__all__ = [
    "PlaylistConfig",
]
