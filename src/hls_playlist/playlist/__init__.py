"""
Playlist controllers.

Components:
- MediaPlaylist: Sliding-window media playlist over a segment ring buffer
- MasterPlaylist: Variant list with renditions and session data
"""

from __future__ import annotations

from hls_playlist.playlist.master import MasterPlaylist
from hls_playlist.playlist.media import MediaPlaylist

__all__ = [
    "MediaPlaylist",
    "MasterPlaylist",
]
