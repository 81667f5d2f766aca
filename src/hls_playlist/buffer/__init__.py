"""
Buffer module for media playlist segment storage.

Components:
- SegmentRingBuffer: Fixed-capacity circular store with sequence numbering
"""

from __future__ import annotations

from hls_playlist.buffer.segment_ring import SegmentRingBuffer

__all__ = [
    "SegmentRingBuffer",
]
