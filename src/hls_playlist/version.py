"""
Protocol version negotiation.

Playlists start at MIN_VERSION and are raised as version-gated features
are used. The stored version only ever goes up automatically; an explicit
``set()`` is the only way to lower it.

Feature table (minimum EXT-X-VERSION):
    - ALTERNATIVES: EXT-X-MEDIA renditions on a variant -> 4
    - INTEGER_DURATION: integer EXTINF values -> 3
    - KEY_FORMAT: KEYFORMAT / KEYFORMATVERSIONS on EXT-X-KEY -> 5
    - MAP: EXT-X-MAP (default or per segment) -> 5
    - IFRAMES_ONLY: EXT-X-I-FRAMES-ONLY -> 4
    - BYTE_RANGE: EXT-X-BYTERANGE on a segment -> 4
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)

MIN_VERSION = 3


class Feature(str, Enum):
    """Version-gated playlist features."""

    ALTERNATIVES = "alternatives"
    INTEGER_DURATION = "integer_duration"
    KEY_FORMAT = "key_format"
    MAP = "map"
    IFRAMES_ONLY = "iframes_only"
    BYTE_RANGE = "byte_range"


FEATURE_MIN_VERSION: dict[Feature, int] = {
    Feature.ALTERNATIVES: 4,
    Feature.INTEGER_DURATION: 3,
    Feature.KEY_FORMAT: 5,
    Feature.MAP: 5,
    Feature.IFRAMES_ONLY: 4,
    Feature.BYTE_RANGE: 4,
}


class VersionNegotiator:
    """Monotonic minimum-required-version counter.

    Attributes:
        version: Current EXT-X-VERSION value for the owning playlist.
    """

    def __init__(self, version: int = MIN_VERSION) -> None:
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    def require(self, version: int) -> bool:
        """Raise the stored version to at least ``version``.

        Returns:
            True if the stored version changed.
        """
        if self._version < version:
            logger.debug(f"Protocol version raised: {self._version} -> {version}")
            self._version = version
            return True
        return False

    def require_feature(self, feature: Feature) -> bool:
        """Raise the stored version to what ``feature`` needs."""
        return self.require(FEATURE_MIN_VERSION[feature])

    def set(self, version: int) -> None:
        """Override the version, possibly lowering it."""
        self._version = version
