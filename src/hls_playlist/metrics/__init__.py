"""
Metrics module for Prometheus observability.

Components:
- PlaylistMetrics: Prometheus metric definitions and helpers
"""

from __future__ import annotations

from hls_playlist.metrics.prometheus import PlaylistMetrics

__all__ = [
    "PlaylistMetrics",
]
