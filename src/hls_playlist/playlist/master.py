"""
Master playlist controller.

Holds the variant list, session data and custom tags of a master
playlist. Independent of any ring buffer: variants only keep a
non-owning reference to their media playlist.

Session data and custom tags are stored last-write-wins. Duplicate
renditions and session data are only dropped from the encoded output.
"""

from __future__ import annotations

import logging

from hls_playlist.config.playlist_config import PlaylistConfig
from hls_playlist.encoder.master import encode_master_playlist
from hls_playlist.metrics.prometheus import PlaylistMetrics
from hls_playlist.models.tags import CustomTag
from hls_playlist.models.variants import SessionData, Variant, VariantParams
from hls_playlist.playlist.media import MediaPlaylist
from hls_playlist.version import MIN_VERSION, Feature, VersionNegotiator

logger = logging.getLogger(__name__)


class MasterPlaylist:
    """Master playlist listing the variants of one presentation.

    Attributes:
        variants: Variants in append order
        session_data: Stored EXT-X-SESSION-DATA entries
        version: Current EXT-X-VERSION
        independent_segments: Emit EXT-X-INDEPENDENT-SEGMENTS
        args: Query-string fragment appended to variant URIs
    """

    def __init__(self, metrics: PlaylistMetrics | None = None, version: int = MIN_VERSION) -> None:
        self._variants: list[Variant] = []
        self._session_data: dict[tuple[str, str], SessionData] = {}
        self._custom: dict[str, CustomTag] = {}
        self._versions = VersionNegotiator(version)
        self._independent_segments = False
        self._args = ""
        self._metrics = metrics
        self._cache: bytes | None = None

        if self._metrics is not None:
            self._metrics.set_version(self._versions.version)

    @classmethod
    def from_config(
        cls,
        config: PlaylistConfig,
        metrics: PlaylistMetrics | None = None,
    ) -> MasterPlaylist:
        """Build a master playlist from the version, flag and args defaults."""
        playlist = cls(metrics=metrics, version=config.version)
        playlist.independent_segments = config.independent_segments
        playlist.args = config.args
        return playlist

    @property
    def variants(self) -> list[Variant]:
        return list(self._variants)

    @property
    def session_data(self) -> list[SessionData]:
        return list(self._session_data.values())

    @property
    def custom_tags(self) -> dict[str, CustomTag]:
        return dict(self._custom)

    @property
    def version(self) -> int:
        return self._versions.version

    @property
    def independent_segments(self) -> bool:
        return self._independent_segments

    @independent_segments.setter
    def independent_segments(self, value: bool) -> None:
        self._independent_segments = value
        self._invalidate()

    @property
    def args(self) -> str:
        return self._args

    @args.setter
    def args(self, value: str) -> None:
        self._args = value
        self._invalidate()

    def append_variant(
        self,
        uri: str,
        chunklist: MediaPlaylist | None = None,
        params: VariantParams | None = None,
    ) -> Variant:
        """Add a variant pointing at ``uri``.

        A variant that carries renditions raises the version to 4.

        Args:
            uri: Media playlist URI
            chunklist: Media playlist served at ``uri`` (not owned, never encoded)
            params: Stream attributes and renditions

        Returns:
            The created Variant
        """
        variant = Variant(uri=uri, params=params or VariantParams(), chunklist=chunklist)
        if variant.alternatives:
            if self._versions.require_feature(Feature.ALTERNATIVES) and self._metrics is not None:
                self._metrics.set_version(self._versions.version)

        self._variants.append(variant)
        logger.debug(
            f"Variant appended: uri={uri}, bandwidth={variant.params.bandwidth}, "
            f"alternatives={len(variant.alternatives)}, iframe={variant.iframe}"
        )
        self._invalidate()
        return variant

    def set_session_data(self, entry: SessionData) -> None:
        """Store ``entry``, replacing one with the same data id and language."""
        self._session_data[entry.storage_key] = entry
        self._invalidate()

    def set_custom_tag(self, tag: CustomTag) -> None:
        """Store a custom tag, replacing one with the same name."""
        self._custom[tag.tag_name()] = tag
        self._invalidate()

    def set_independent_segments(self, enabled: bool) -> None:
        self.independent_segments = enabled

    def set_version(self, version: int) -> None:
        """Override the EXT-X-VERSION; later variants may still raise it."""
        self._versions.set(version)
        if self._metrics is not None:
            self._metrics.set_version(version)
        self._invalidate()

    def encode(self) -> bytes:
        """Return the playlist text, rendering it only if the cache is empty."""
        if self._cache is not None:
            if self._metrics is not None:
                self._metrics.record_encode(cache_hit=True)
            return self._cache

        self._cache = encode_master_playlist(self)
        if self._metrics is not None:
            self._metrics.record_encode(cache_hit=False)
        logger.debug(f"Master playlist encoded: {len(self._cache)} bytes, variants={len(self._variants)}")
        return self._cache

    def reset_cache(self) -> None:
        self._invalidate()

    def __str__(self) -> str:
        return self.encode().decode("utf-8")

    def _invalidate(self) -> None:
        self._cache = None
