"""
Error types raised by playlist mutators.

All errors are local, synchronous and recoverable. A mutator that raises
leaves the playlist and its cached encoding untouched.
"""

from __future__ import annotations


class PlaylistError(Exception):
    """Base class for all playlist errors."""

    pass


class PlaylistFullError(PlaylistError):
    """Raised when the segment ring buffer has no free slot."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"playlist is full (capacity={capacity})")


class PlaylistEmptyError(PlaylistError):
    """Raised when an operation needs at least one live segment.

    Also raised by bulk insertion when it is given zero segments.
    """

    def __init__(self, message: str = "playlist is empty") -> None:
        super().__init__(message)


class WindowSizeExceedsCapacityError(PlaylistError, ValueError):
    """Raised when the window size is set above the buffer capacity."""

    def __init__(self, window_size: int, capacity: int) -> None:
        self.window_size = window_size
        self.capacity = capacity
        super().__init__(
            f"capacity must be greater than or equal to window size "
            f"(window_size={window_size}, capacity={capacity})"
        )


class MissingDateRangeIDError(PlaylistError, ValueError):
    """Raised when a DateRange without an ID is attached to a segment."""

    def __init__(self) -> None:
        super().__init__("DateRange ID is required")
