"""
Text encoders for master and media playlists.

Components:
- encode_media_playlist: MediaPlaylist -> UTF-8 bytes
- encode_master_playlist: MasterPlaylist -> UTF-8 bytes
- formatting: shared value formatting helpers
"""

from __future__ import annotations

from hls_playlist.encoder.master import encode_master_playlist
from hls_playlist.encoder.media import ENDLIST_TAG, encode_media_playlist

__all__ = [
    "encode_media_playlist",
    "encode_master_playlist",
    "ENDLIST_TAG",
]
