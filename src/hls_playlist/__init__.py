"""
HLS playlist modelling and serialization.

Builds master and media playlists in memory and renders them to the
RFC 8216 tag grammar. Media playlists keep a bounded sliding window of
segments for live streams.

Components:
- MediaPlaylist / MasterPlaylist: controllers with cached encoding
- SegmentRingBuffer: fixed-capacity segment store
- VersionNegotiator: feature-driven EXT-X-VERSION
- PlaylistConfig: environment-driven defaults
- PlaylistMetrics: Prometheus metrics
"""

from __future__ import annotations

from hls_playlist.buffer import SegmentRingBuffer
from hls_playlist.config import PlaylistConfig
from hls_playlist.errors import (
    MissingDateRangeIDError,
    PlaylistEmptyError,
    PlaylistError,
    PlaylistFullError,
    WindowSizeExceedsCapacityError,
)
from hls_playlist.logging_config import configure_logging
from hls_playlist.metrics import PlaylistMetrics
from hls_playlist.models import (
    SCTE,
    Alternative,
    CustomTag,
    DateRange,
    Key,
    Map,
    MediaSegment,
    MediaType,
    SCTE35CueType,
    SCTE35Syntax,
    SessionData,
    SimpleTag,
    Variant,
    VariantParams,
    WidevineMetadata,
)
from hls_playlist.playlist import MasterPlaylist, MediaPlaylist
from hls_playlist.version import MIN_VERSION, Feature, VersionNegotiator

__version__ = "0.1.0"

__all__ = [
    "MediaPlaylist",
    "MasterPlaylist",
    "SegmentRingBuffer",
    "VersionNegotiator",
    "Feature",
    "MIN_VERSION",
    "PlaylistConfig",
    "PlaylistMetrics",
    "configure_logging",
    "PlaylistError",
    "PlaylistFullError",
    "PlaylistEmptyError",
    "WindowSizeExceedsCapacityError",
    "MissingDateRangeIDError",
    "MediaSegment",
    "Key",
    "Map",
    "SCTE",
    "SCTE35Syntax",
    "SCTE35CueType",
    "DateRange",
    "Variant",
    "VariantParams",
    "Alternative",
    "SessionData",
    "MediaType",
    "WidevineMetadata",
    "CustomTag",
    "SimpleTag",
]
