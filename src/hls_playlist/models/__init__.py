"""
Data models for HLS playlists.

This module provides data models for:
- Segments: MediaSegment, Key, Map, SCTE, DateRange
- Variants: Variant, VariantParams, Alternative, SessionData
- Playlist attributes: MediaType, WidevineMetadata
- Custom tags: CustomTag, SimpleTag
"""

from __future__ import annotations

from hls_playlist.models.playlist import MediaType, WidevineMetadata
from hls_playlist.models.segments import (
    SCTE,
    DateRange,
    Key,
    Map,
    MediaSegment,
    SCTE35CueType,
    SCTE35Syntax,
)
from hls_playlist.models.tags import CustomTag, SimpleTag
from hls_playlist.models.variants import Alternative, SessionData, Variant, VariantParams

__all__ = [
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
