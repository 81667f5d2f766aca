"""
Prometheus metrics for playlist controllers.

Provides observability metrics for live playlist maintenance:
- Segment append/remove counters
- Live segment, target duration and protocol version gauges
- Encode counter split by cache hit/miss
- Error counters by type
"""

from __future__ import annotations

import logging
from typing import ClassVar

from prometheus_client import Counter, Gauge

logger = logging.getLogger(__name__)


class PlaylistMetrics:
    """Prometheus metrics for one playlist.

    All metrics use the 'hls_playlist_' prefix for namespace isolation.

    Note: Metrics are class-level singletons to avoid Prometheus
    "Duplicated timeseries" errors when creating multiple instances.
    """

    NAMESPACE = "hls"
    SUBSYSTEM = "playlist"

    # Class-level metric singletons (initialized on first use)
    _segments_appended: ClassVar[Counter | None] = None
    _segments_removed: ClassVar[Counter | None] = None
    _live_segments: ClassVar[Gauge | None] = None
    _target_duration: ClassVar[Gauge | None] = None
    _version: ClassVar[Gauge | None] = None
    _encodes: ClassVar[Counter | None] = None
    _errors: ClassVar[Counter | None] = None
    _metrics_initialized: ClassVar[bool] = False

    def __init__(self, playlist_id: str | None = None) -> None:
        """Initialize playlist metrics.

        Args:
            playlist_id: Playlist identifier for labels (optional)
        """
        self.playlist_id = playlist_id or "unknown"
        self._ensure_metrics_initialized()

    @classmethod
    def _ensure_metrics_initialized(cls) -> None:
        """Initialize all Prometheus metrics (once per class)."""
        if cls._metrics_initialized:
            return

        prefix = f"{cls.NAMESPACE}_{cls.SUBSYSTEM}"

        cls._segments_appended = Counter(
            f"{prefix}_segments_appended_total",
            "Total segments appended or inserted",
            ["playlist_id"],
        )

        cls._segments_removed = Counter(
            f"{prefix}_segments_removed_total",
            "Total segments removed from the head",
            ["playlist_id"],
        )

        cls._live_segments = Gauge(
            f"{prefix}_live_segments",
            "Current number of live segments",
            ["playlist_id"],
        )

        cls._target_duration = Gauge(
            f"{prefix}_target_duration_seconds",
            "Current target duration in seconds",
            ["playlist_id"],
        )

        cls._version = Gauge(
            f"{prefix}_version",
            "Current EXT-X-VERSION",
            ["playlist_id"],
        )

        cls._encodes = Counter(
            f"{prefix}_encodes_total",
            "Total encode calls",
            ["playlist_id", "cache"],  # cache: hit|miss
        )

        cls._errors = Counter(
            f"{prefix}_errors_total",
            "Total rejected mutations by error type",
            ["playlist_id", "error_type"],
        )

        cls._metrics_initialized = True

    @property
    def segments_appended(self) -> Counter:
        return self._segments_appended

    @property
    def segments_removed(self) -> Counter:
        return self._segments_removed

    @property
    def live_segments(self) -> Gauge:
        return self._live_segments

    @property
    def target_duration(self) -> Gauge:
        return self._target_duration

    @property
    def version(self) -> Gauge:
        return self._version

    @property
    def encodes(self) -> Counter:
        return self._encodes

    @property
    def errors(self) -> Counter:
        return self._errors

    def record_appended(self, count: int = 1) -> None:
        """Record appended segments.

        Args:
            count: Number of segments added
        """
        self.segments_appended.labels(playlist_id=self.playlist_id).inc(count)

    def record_removed(self) -> None:
        """Record one segment removed from the head."""
        self.segments_removed.labels(playlist_id=self.playlist_id).inc()

    def set_live_segments(self, count: int) -> None:
        self.live_segments.labels(playlist_id=self.playlist_id).set(count)

    def set_target_duration(self, seconds: float) -> None:
        self.target_duration.labels(playlist_id=self.playlist_id).set(seconds)

    def set_version(self, version: int) -> None:
        self.version.labels(playlist_id=self.playlist_id).set(version)

    def record_encode(self, cache_hit: bool) -> None:
        """Record an encode call.

        Args:
            cache_hit: True if the cached buffer was returned
        """
        self.encodes.labels(
            playlist_id=self.playlist_id,
            cache="hit" if cache_hit else "miss",
        ).inc()

    def record_error(self, error_type: str) -> None:
        """Record a rejected mutation.

        Args:
            error_type: Error class name
        """
        self.errors.labels(
            playlist_id=self.playlist_id,
            error_type=error_type,
        ).inc()
