"""
Playlist-wide attribute models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class MediaType(IntEnum):
    """EXT-X-PLAYLIST-TYPE value."""

    EVENT = 1
    VOD = 2


@dataclass
class WidevineMetadata:
    """Widevine vendor-extension header fields.

    Numeric fields are written when non-zero, string fields when non-empty.
    """

    audio_channels: int = 0
    audio_format: int = 0
    audio_profile_idc: int = 0
    audio_sample_size: int = 0
    audio_sampling_frequency: int = 0
    cypher_version: str = ""
    ecm: str = ""
    video_format: int = 0
    video_frame_rate: int = 0
    video_level_idc: int = 0
    video_profile_idc: int = 0
    video_resolution: str = ""
    video_sar: str = ""
