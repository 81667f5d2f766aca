"""
Fixed-capacity circular store of media segments.

Backs a media playlist with an indexable slot array plus head/tail/count
bookkeeping. All index arithmetic is modulo capacity.

Slot layout:
- head: slot of the oldest live segment
- tail: slot the next appended segment is written to
- count: number of live segments
- count == 0 implies head == tail; the ring is full when count == capacity

Sequence numbering:
- An appended segment gets the previous live segment's seq_id + 1, or the
  base media sequence when the ring is empty
- Removing from the head advances the base media sequence unless the
  caller says otherwise (closed playlists keep it fixed)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from hls_playlist.errors import PlaylistEmptyError, PlaylistFullError
from hls_playlist.models.segments import MediaSegment

logger = logging.getLogger(__name__)


class SegmentRingBuffer:
    """Circular array of segment slots.

    Attributes:
        capacity: Number of slots
        count: Number of live segments
        head: Slot index of the oldest live segment
        tail: Slot index the next segment is written to
        media_sequence: Base sequence number (seq_id of a segment appended
            to an empty ring)
    """

    def __init__(self, capacity: int, media_sequence: int = 0) -> None:
        """Initialize an empty ring.

        Args:
            capacity: Slot count (>= 0)
            media_sequence: Initial base sequence number

        Raises:
            ValueError: If capacity is negative
        """
        if capacity < 0:
            raise ValueError(f"SegmentRingBuffer capacity must be >= 0, got {capacity}")

        self._slots: list[MediaSegment | None] = [None] * capacity
        self._capacity = capacity
        self._head = 0
        self._tail = 0
        self._count = 0
        self.media_sequence = media_sequence

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    @property
    def head(self) -> int:
        return self._head

    @property
    def tail(self) -> int:
        return self._tail

    @property
    def slots(self) -> tuple[MediaSegment | None, ...]:
        """Read-only snapshot of the raw slot array."""
        return tuple(self._slots)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[MediaSegment]:
        """Iterate live segments from head to tail, skipping empty slots."""
        for i in range(self._count):
            segment = self._slots[(self._head + i) % self._capacity]
            if segment is not None:
                yield segment

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == self._capacity

    def last_index(self) -> int:
        """Slot of the most recently appended segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        if self._count == 0:
            raise PlaylistEmptyError()
        return (self._tail - 1) % self._capacity

    def last(self) -> MediaSegment:
        """Most recently appended segment.

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        segment = self._slots[self.last_index()]
        if segment is None:
            raise PlaylistEmptyError("current segment slot is empty")
        return segment

    def append(self, segment: MediaSegment) -> None:
        """Write ``segment`` into the tail slot and assign its seq_id.

        Raises:
            PlaylistFullError: If every slot holds a live segment
        """
        if self.is_full():
            raise PlaylistFullError(self._capacity)

        if self._count > 0:
            previous = self._slots[(self._tail - 1) % self._capacity]
            segment.seq_id = previous.seq_id + 1 if previous is not None else self.media_sequence
        else:
            segment.seq_id = self.media_sequence

        self._slots[self._tail] = segment
        self._tail = (self._tail + 1) % self._capacity
        self._count += 1

    def remove(self, advance_sequence: bool = True) -> MediaSegment | None:
        """Drop the segment at the head.

        The vacated slot is reused by a later append.

        Args:
            advance_sequence: Increment the base media sequence

        Returns:
            The removed segment (None if the slot was empty)

        Raises:
            PlaylistEmptyError: If there are no live segments
        """
        if self._count == 0:
            raise PlaylistEmptyError()

        removed = self._slots[self._head]
        self._slots[self._head] = None
        self._head = (self._head + 1) % self._capacity
        self._count -= 1
        if advance_sequence:
            self.media_sequence += 1
        return removed

    def window(self, limit: int) -> Iterator[MediaSegment]:
        """Iterate up to ``limit`` live segments starting at head.

        Empty slots are skipped and do not count against the limit.
        A limit of 0 means unbounded.
        """
        emitted = 0
        for i in range(self._count):
            if limit and emitted >= limit:
                return
            segment = self._slots[(self._head + i) % self._capacity]
            if segment is None:
                continue
            emitted += 1
            yield segment

    def insert(self, segments: Sequence[MediaSegment], at_seq_id: int) -> int:
        """Insert ``segments`` at a position derived from ``at_seq_id``.

        The target index is the end of the live list when ``at_seq_id`` is 0
        or not smaller than the live count, otherwise ``at_seq_id - 1``.
        Inserted segments are numbered ``index + 1, index + 2, ...`` and
        every following segment's seq_id is shifted by the inserted count.
        Storage grows by the inserted count when the new total would not fit.
        The live list is re-laid out starting at slot 0.

        Positions are 1-based while seq_ids follow the base media sequence,
        so a middle insert on a ring numbered from 0 yields a duplicate id
        (e.g. [0, 1, 2] with one segment at 2 gives [0, 2, 2, 3]).

        Returns:
            The index the segments were inserted at

        Raises:
            PlaylistEmptyError: If ``segments`` is empty
        """
        if not segments:
            raise PlaylistEmptyError("no segments to insert")

        ordered = [self._slots[(self._head + i) % self._capacity] for i in range(self._count)]
        length = len(ordered)
        if at_seq_id == 0 or at_seq_id >= length:
            index = length
        else:
            index = at_seq_id - 1

        added = len(segments)
        for offset, segment in enumerate(segments):
            segment.seq_id = index + 1 + offset
        for segment in ordered[index:]:
            if segment is not None:
                segment.seq_id += added

        new_count = length + added
        if new_count > self._capacity:
            self._capacity += added

        self._slots = ordered[:index] + list(segments) + ordered[index:]
        self._slots.extend([None] * (self._capacity - new_count))
        self._head = 0
        self._count = new_count
        self._tail = new_count % self._capacity

        logger.debug(
            f"Inserted {added} segments at index {index}: "
            f"count={self._count}, capacity={self._capacity}"
        )
        return index

    def replace(self, segments: Sequence[MediaSegment]) -> None:
        """Discard all slots and use ``segments`` as the full, live list.

        Capacity and count both become ``len(segments)``. Segment seq_ids
        are kept as given.
        """
        self._slots = list(segments)
        self._capacity = len(self._slots)
        self._count = self._capacity
        self._head = 0
        self._tail = 0
