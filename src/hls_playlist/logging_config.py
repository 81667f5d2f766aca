"""
Logging configuration for playlist hosts.

Usage:
  Call configure_logging() once at process start-up.
  Set LOG_FOCUS=1 to show only the ring buffer, controllers and encoders
  at LOG_LEVEL; every other logger is held at WARNING.

Modules included in focused logging:
  - hls_playlist.buffer.segment_ring (slot bookkeeping)
  - hls_playlist.playlist.media (segment mutations, window changes)
  - hls_playlist.playlist.master (variant changes)
  - hls_playlist.version (version bumps)

Example:
  LOG_LEVEL=DEBUG LOG_FOCUS=1 python -m my_origin_server
"""

import logging
import os

FOCUSED_MODULES = [
    "hls_playlist.buffer.segment_ring",
    "hls_playlist.playlist.media",
    "hls_playlist.playlist.master",
    "hls_playlist.version",
]


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL and LOG_FOCUS.

    When LOG_FOCUS=1 is set:
    - Focused modules log at LOG_LEVEL (default INFO)
    - Other modules log at WARNING only
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_focus = os.getenv("LOG_FOCUS", "0") == "1"

    log_format = "%(asctime)s.%(msecs)03d | %(name)s | %(levelname)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=log_level if not log_focus else logging.WARNING,
        format=log_format,
        datefmt=date_format,
        force=True,
    )

    if not log_focus:
        return

    for module in FOCUSED_MODULES:
        logging.getLogger(module).setLevel(log_level)

    logging.getLogger().warning(
        f"Focused logging enabled: {', '.join(FOCUSED_MODULES)} at {log_level}"
    )


# Grep patterns for the message families emitted by the controllers
LOG_PATTERNS = {
    "segments": [
        "Segment appended",
        "Segment removed",
        "Segment rejected",
        "evicting head segment",
    ],
    "bulk": [
        "Inserted",
        "Segments replaced",
        "Window size changed",
    ],
    "encode": [
        "Media playlist encoded",
        "Master playlist encoded",
        "Playlist closed",
    ],
    "version": [
        "Protocol version raised",
    ],
}


def get_grep_pattern(focus: str) -> str:
    """Get grep pattern for filtering logs.

    Args:
        focus: One of 'segments', 'bulk', 'encode', 'version', or 'all'

    Returns:
        Grep-compatible regex pattern (empty for an unknown focus)
    """
    if focus == "all":
        all_patterns = []
        for patterns in LOG_PATTERNS.values():
            all_patterns.extend(patterns)
        return "|".join(all_patterns)

    return "|".join(LOG_PATTERNS.get(focus, []))
