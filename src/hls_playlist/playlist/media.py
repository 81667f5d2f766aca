"""
Media playlist controller.

Owns a SegmentRingBuffer plus the playlist-wide attributes (target
duration, default key and map, window size, closed flag) and exposes the
mutation API for live and VOD playlists.

Caching:
- encode() renders once and returns the same bytes object until the next
  successful mutation
- Every successful mutator clears the cache as its last step; a mutator
  that raises leaves both state and cache untouched
- close() appends EXT-X-ENDLIST to an existing cache instead of re-rendering

Threading: instances are not synchronized. One writer at a time; hosts
that share a playlist across threads or tasks must wrap it in a lock.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from datetime import datetime

from hls_playlist.buffer.segment_ring import SegmentRingBuffer
from hls_playlist.config.playlist_config import PlaylistConfig
from hls_playlist.encoder.media import ENDLIST_TAG, encode_media_playlist
from hls_playlist.errors import (
    MissingDateRangeIDError,
    PlaylistEmptyError,
    PlaylistError,
    PlaylistFullError,
    WindowSizeExceedsCapacityError,
)
from hls_playlist.metrics.prometheus import PlaylistMetrics
from hls_playlist.models.playlist import MediaType, WidevineMetadata
from hls_playlist.models.segments import SCTE, DateRange, Key, Map, MediaSegment, SCTE35Syntax
from hls_playlist.models.tags import CustomTag
from hls_playlist.version import MIN_VERSION, Feature, VersionNegotiator

logger = logging.getLogger(__name__)


class MediaPlaylist:
    """Media playlist with a bounded sliding window of segments.

    Attributes:
        window_size: Segments rendered by encode(); 0 renders all live segments
        capacity: Ring buffer slot count
        count: Live segment count
        media_sequence: Sequence number of the head segment
        target_duration: Upper bound of segment durations, never lowered
            automatically
        closed: True once close() was called (VOD / finished event)
    """

    def __init__(
        self,
        window_size: int,
        capacity: int,
        metrics: PlaylistMetrics | None = None,
        version: int = MIN_VERSION,
    ) -> None:
        """Initialize an empty media playlist.

        Args:
            window_size: Segments shown in output (0 = unbounded)
            capacity: Total segment slots
            metrics: Optional Prometheus metrics sink
            version: Initial EXT-X-VERSION

        Raises:
            ValueError: If window_size or capacity is negative
            WindowSizeExceedsCapacityError: If window_size > capacity
        """
        if window_size < 0:
            raise ValueError(f"window_size must be >= 0, got {window_size}")

        self._ring = SegmentRingBuffer(capacity)
        if window_size > capacity:
            raise WindowSizeExceedsCapacityError(window_size, capacity)

        self._window_size = window_size
        self._versions = VersionNegotiator(version)
        self._metrics = metrics
        self._cache: bytes | None = None

        self._closed = False
        self._target_duration = 0
        self._duration_as_int = False
        self._independent_segments = False
        self._iframe_only = False
        self._default_key: Key | None = None
        self._default_map: Map | None = None
        self._media_type: MediaType | None = None
        self._start_time = 0.0
        self._start_time_precise = False
        self._discontinuity_sequence = 0
        self._widevine: WidevineMetadata | None = None
        self._args = ""
        self._custom: dict[str, CustomTag] = {}

        if self._metrics is not None:
            self._metrics.set_version(self._versions.version)

        logger.debug(f"MediaPlaylist created: window_size={window_size}, capacity={capacity}")

    @classmethod
    def from_config(
        cls,
        config: PlaylistConfig,
        metrics: PlaylistMetrics | None = None,
    ) -> MediaPlaylist:
        """Build a playlist from PlaylistConfig defaults."""
        playlist = cls(
            window_size=config.window_size,
            capacity=config.capacity,
            metrics=metrics,
            version=config.version,
        )
        playlist.set_duration_as_int(config.duration_as_int)
        playlist.set_independent_segments(config.independent_segments)
        playlist.args = config.args
        playlist.media_type = config.playlist_type
        return playlist

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        return self._ring.count

    @property
    def capacity(self) -> int:
        return self._ring.capacity

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def version(self) -> int:
        return self._versions.version

    @property
    def duration_as_int(self) -> bool:
        return self._duration_as_int

    @property
    def independent_segments(self) -> bool:
        return self._independent_segments

    @property
    def iframe_only(self) -> bool:
        return self._iframe_only

    @property
    def default_key(self) -> Key | None:
        return self._default_key

    @property
    def default_map(self) -> Map | None:
        return self._default_map

    @property
    def custom_tags(self) -> dict[str, CustomTag]:
        """Copy of the playlist-level custom tags keyed by name."""
        return dict(self._custom)

    def segments(self) -> Iterator[MediaSegment]:
        """Iterate all live segments, head first."""
        return iter(self._ring)

    def visible_segments(self) -> Iterator[MediaSegment]:
        """Segments rendered by encode(): up to window_size from the head."""
        return self._ring.window(self._window_size)

    # ------------------------------------------------------------------
    # Settable playlist attributes
    # ------------------------------------------------------------------

    @property
    def media_sequence(self) -> int:
        return self._ring.media_sequence

    @media_sequence.setter
    def media_sequence(self, value: int) -> None:
        self._ring.media_sequence = value
        self._invalidate()

    @property
    def target_duration(self) -> int:
        return self._target_duration

    @target_duration.setter
    def target_duration(self, value: float) -> None:
        """Raise the target duration; values below the current one are ignored."""
        self._target_duration = max(self._target_duration, math.ceil(value))
        if self._metrics is not None:
            self._metrics.set_target_duration(self._target_duration)
        self._invalidate()

    @property
    def media_type(self) -> MediaType | None:
        return self._media_type

    @media_type.setter
    def media_type(self, value: MediaType | None) -> None:
        self._media_type = value
        self._invalidate()

    @property
    def start_time(self) -> float:
        return self._start_time

    @start_time.setter
    def start_time(self, value: float) -> None:
        self._start_time = value
        self._invalidate()

    @property
    def start_time_precise(self) -> bool:
        return self._start_time_precise

    @start_time_precise.setter
    def start_time_precise(self, value: bool) -> None:
        self._start_time_precise = value
        self._invalidate()

    @property
    def discontinuity_sequence(self) -> int:
        return self._discontinuity_sequence

    @discontinuity_sequence.setter
    def discontinuity_sequence(self, value: int) -> None:
        self._discontinuity_sequence = value
        self._invalidate()

    @property
    def widevine(self) -> WidevineMetadata | None:
        return self._widevine

    @widevine.setter
    def widevine(self, value: WidevineMetadata | None) -> None:
        self._widevine = value
        self._invalidate()

    @property
    def args(self) -> str:
        """Query-string fragment appended to every segment URI."""
        return self._args

    @args.setter
    def args(self, value: str) -> None:
        self._args = value
        self._invalidate()

    # ------------------------------------------------------------------
    # Ring buffer mutations
    # ------------------------------------------------------------------

    def append(self, uri: str, duration: float, title: str = "") -> MediaSegment:
        """Append a new segment built from ``uri``, ``duration`` and ``title``.

        Raises:
            PlaylistFullError: If no slot is free
        """
        return self.append_segment(MediaSegment(uri=uri, duration=duration, title=title))

    def append_segment(self, segment: MediaSegment) -> MediaSegment:
        """Append ``segment`` at the tail and assign its seq_id.

        Target duration becomes max(current, ceil(segment.duration)).

        Raises:
            PlaylistFullError: If no slot is free
        """
        try:
            self._ring.append(segment)
        except PlaylistFullError as e:
            logger.warning(f"Segment rejected, playlist full: uri={segment.uri}, capacity={e.capacity}")
            self._record_error(e)
            raise

        self._raise_target_duration([segment])
        if self._metrics is not None:
            self._metrics.record_appended()
            self._metrics.set_live_segments(self._ring.count)

        logger.debug(
            f"Segment appended: seq_id={segment.seq_id}, duration={segment.duration:.3f}s, "
            f"count={self._ring.count}"
        )
        self._invalidate()
        return segment

    def remove(self) -> MediaSegment | None:
        """Remove the head segment.

        The media sequence advances unless the playlist is closed.

        Returns:
            The removed segment

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        try:
            removed = self._ring.remove(advance_sequence=not self._closed)
        except PlaylistEmptyError as e:
            self._record_error(e)
            raise

        if self._metrics is not None:
            self._metrics.record_removed()
            self._metrics.set_live_segments(self._ring.count)

        logger.debug(
            f"Segment removed: media_sequence={self._ring.media_sequence}, count={self._ring.count}"
        )
        self._invalidate()
        return removed

    def slide(self, uri: str, duration: float, title: str = "") -> MediaSegment:
        """Evict the oldest segment once the window is full, then append.

        On a closed playlist this is a plain append.

        Raises:
            PlaylistFullError: If the playlist is closed and no slot is free
        """
        if not self._closed and self._ring.count >= self._window_size and self._ring.count > 0:
            logger.debug(f"Window full ({self._window_size}), evicting head segment")
            self.remove()
        return self.append(uri, duration, title)

    def insert_segments(self, segments: Sequence[MediaSegment], at_seq_id: int = 0) -> None:
        """Bulk-insert ``segments``.

        ``at_seq_id`` of 0, or not smaller than the live count, inserts at the
        end; otherwise the segments go to index ``at_seq_id - 1``. Inserted
        segments are numbered from index + 1 and the following segments are
        shifted by the inserted count. Capacity grows when needed.

        Raises:
            PlaylistEmptyError: If ``segments`` is empty
        """
        try:
            index = self._ring.insert(segments, at_seq_id)
        except PlaylistEmptyError as e:
            self._record_error(e)
            raise

        self._raise_target_duration(segments)
        if self._metrics is not None:
            self._metrics.record_appended(len(segments))
            self._metrics.set_live_segments(self._ring.count)

        logger.info(
            f"Inserted {len(segments)} segments at index {index}: "
            f"count={self._ring.count}, capacity={self._ring.capacity}"
        )
        self._invalidate()

    def set_segments(self, segments: Sequence[MediaSegment]) -> None:
        """Replace every slot with ``segments``.

        Capacity and count become ``len(segments)``; seq_ids are kept as
        given. A window size larger than the new capacity is clamped.
        """
        self._ring.replace(segments)
        if self._window_size > self._ring.capacity:
            self._window_size = self._ring.capacity
        self._raise_target_duration(segments)
        if self._metrics is not None:
            self._metrics.set_live_segments(self._ring.count)

        logger.info(f"Segments replaced: count={self._ring.count}, window_size={self._window_size}")
        self._invalidate()

    def set_window_size(self, window_size: int) -> None:
        """Change how many segments encode() renders.

        Raises:
            ValueError: If window_size is negative
            WindowSizeExceedsCapacityError: If window_size > capacity
        """
        if window_size < 0:
            raise ValueError(f"window_size must be >= 0, got {window_size}")
        if window_size > self._ring.capacity:
            error = WindowSizeExceedsCapacityError(window_size, self._ring.capacity)
            self._record_error(error)
            raise error

        logger.info(f"Window size changed: {self._window_size} -> {window_size}")
        self._window_size = window_size
        self._invalidate()

    def close(self) -> None:
        """Mark the playlist as finished.

        Later removals no longer advance the media sequence. A cached
        encoding gets EXT-X-ENDLIST appended instead of being rebuilt.
        """
        if self._closed:
            return
        self._closed = True
        if self._cache is not None:
            self._cache += f"{ENDLIST_TAG}\n".encode()
        logger.info(f"Playlist closed: media_sequence={self._ring.media_sequence}, count={self._ring.count}")

    # ------------------------------------------------------------------
    # Playlist-wide settings
    # ------------------------------------------------------------------

    def set_default_key(
        self,
        method: str,
        uri: str = "",
        iv: str = "",
        keyformat: str = "",
        keyformatversions: str = "",
    ) -> Key:
        """Install the header EXT-X-KEY used until a segment overrides it."""
        key = Key(method, uri, iv, keyformat, keyformatversions)
        if key.has_format:
            self._require(Feature.KEY_FORMAT)
        self._default_key = key
        self._invalidate()
        return key

    def set_default_map(self, uri: str, limit: int = 0, offset: int = 0) -> Map:
        """Install the header EXT-X-MAP. Per-segment maps are then not written."""
        self._require(Feature.MAP)
        self._default_map = Map(uri, limit, offset)
        self._invalidate()
        return self._default_map

    def set_iframe_only(self) -> None:
        self._require(Feature.IFRAMES_ONLY)
        self._iframe_only = True
        self._invalidate()

    def set_duration_as_int(self, enabled: bool) -> None:
        """Write EXTINF durations rounded up to whole seconds."""
        if enabled:
            self._require(Feature.INTEGER_DURATION)
        self._duration_as_int = enabled
        self._invalidate()

    def set_independent_segments(self, enabled: bool) -> None:
        self._independent_segments = enabled
        self._invalidate()

    def set_version(self, version: int) -> None:
        """Override the EXT-X-VERSION; later features may still raise it."""
        self._versions.set(version)
        if self._metrics is not None:
            self._metrics.set_version(version)
        self._invalidate()

    def set_custom_tag(self, tag: CustomTag) -> None:
        """Store a playlist-level custom tag, replacing one with the same name."""
        self._custom[tag.tag_name()] = tag
        self._invalidate()

    # ------------------------------------------------------------------
    # Current-segment setters (target the most recently appended segment)
    # ------------------------------------------------------------------

    def set_key(
        self,
        method: str,
        uri: str = "",
        iv: str = "",
        keyformat: str = "",
        keyformatversions: str = "",
    ) -> Key:
        """Attach a new Key to the current segment.

        The new Key is a distinct object, so it is written even when its
        fields equal the default key. Use assign_key() to share a Key.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        key = Key(method, uri, iv, keyformat, keyformatversions)
        if key.has_format:
            self._require(Feature.KEY_FORMAT)
        segment.key = key
        logger.debug(f"Key set on seq_id={segment.seq_id}: method={method}")
        self._invalidate()
        return key

    def assign_key(self, key: Key) -> None:
        """Attach an existing Key object to the current segment.

        Assigning ``default_key`` itself suppresses the per-segment tag.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        if key.has_format:
            self._require(Feature.KEY_FORMAT)
        segment.key = key
        self._invalidate()

    def set_map(self, uri: str, limit: int = 0, offset: int = 0) -> Map:
        """Attach an initialization section to the current segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        self._require(Feature.MAP)
        segment.map = Map(uri, limit, offset)
        self._invalidate()
        return segment.map

    def set_byte_range(self, limit: int, offset: int) -> None:
        """Set EXT-X-BYTERANGE length and offset on the current segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        self._require(Feature.BYTE_RANGE)
        segment.limit = limit
        segment.offset = offset
        self._invalidate()

    def set_scte35(self, scte: SCTE) -> None:
        """Attach an SCTE-35 cue to the current segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        segment.scte = scte
        logger.debug(f"SCTE-35 cue set on seq_id={segment.seq_id}: syntax={scte.syntax.value}")
        self._invalidate()

    def set_scte(self, cue: str, id: str = "", time: float = 0.0) -> None:
        """Attach a legacy 67-2014 cue to the current segment."""
        self.set_scte35(SCTE(syntax=SCTE35Syntax.SCTE35_67_2014, cue=cue, id=id, time=time))

    def set_date_range(self, date_ranges: Sequence[DateRange]) -> None:
        """Replace the current segment's date ranges.

        Raises:
            PlaylistEmptyError: If there are no live segments
            MissingDateRangeIDError: If any DateRange has no id
        """
        segment = self._current()
        for date_range in date_ranges:
            self._check_date_range(date_range)
        segment.date_ranges = list(date_ranges)
        logger.debug(f"Date ranges set on seq_id={segment.seq_id}: {len(segment.date_ranges)}")
        self._invalidate()

    def append_date_range(self, date_range: DateRange) -> None:
        """Add one date range to the current segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
            MissingDateRangeIDError: If the DateRange has no id
        """
        segment = self._current()
        self._check_date_range(date_range)
        segment.date_ranges.append(date_range)
        self._invalidate()

    def set_discontinuity(self) -> None:
        segment = self._current()
        segment.discontinuity = True
        logger.debug(f"Discontinuity set on seq_id={segment.seq_id}")
        self._invalidate()

    def set_gap(self) -> None:
        segment = self._current()
        segment.gap = True
        self._invalidate()

    def set_program_date_time(self, value: datetime) -> None:
        segment = self._current()
        segment.program_date_time = value
        self._invalidate()

    def set_custom_segment_tag(self, tag: CustomTag) -> None:
        """Store a custom tag on the current segment, replacing by name.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._current()
        segment.set_custom_tag(tag)
        self._invalidate()

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self) -> bytes:
        """Return the playlist text, rendering it only if the cache is empty."""
        if self._cache is not None:
            if self._metrics is not None:
                self._metrics.record_encode(cache_hit=True)
            return self._cache

        self._cache = encode_media_playlist(self)
        if self._metrics is not None:
            self._metrics.record_encode(cache_hit=False)
        logger.debug(f"Media playlist encoded: {len(self._cache)} bytes, count={self._ring.count}")
        return self._cache

    def reset_cache(self) -> None:
        """Drop the cached encoding so the next encode() re-renders."""
        self._invalidate()

    def __str__(self) -> str:
        return self.encode().decode("utf-8")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _invalidate(self) -> None:
        self._cache = None

    def _current(self) -> MediaSegment:
        try:
            return self._ring.last()
        except PlaylistEmptyError as e:
            self._record_error(e)
            raise

    def _check_date_range(self, date_range: DateRange) -> None:
        if not date_range.id:
            error = MissingDateRangeIDError()
            self._record_error(error)
            raise error

    def _require(self, feature: Feature) -> None:
        if self._versions.require_feature(feature) and self._metrics is not None:
            self._metrics.set_version(self._versions.version)

    def _raise_target_duration(self, segments: Sequence[MediaSegment]) -> None:
        longest = max((math.ceil(s.duration) for s in segments if s is not None), default=0)
        if longest > self._target_duration:
            self._target_duration = longest
            if self._metrics is not None:
                self._metrics.set_target_duration(longest)

    def _record_error(self, error: PlaylistError) -> None:
        if self._metrics is not None:
            self._metrics.record_error(type(error).__name__)
