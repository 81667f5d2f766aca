"""
Master playlist data models: variants, renditions and session data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hls_playlist.playlist.media import MediaPlaylist


@dataclass
class Alternative:
    """An EXT-X-MEDIA rendition shared by variants in the same group.

    Two alternatives with the same (type, group_id, name, language) are
    written once per master playlist.

    Attributes:
        type: AUDIO, VIDEO, SUBTITLES or CLOSED-CAPTIONS (unquoted).
        group_id: GROUP-ID the rendition belongs to.
        name: Human-readable NAME.
        language: LANGUAGE tag.
        default: DEFAULT=YES when True, DEFAULT=NO otherwise.
        autoselect: AUTOSELECT value, "YES" or "NO" (unquoted).
        forced: FORCED value, "YES" or "NO" (unquoted).
        characteristics: CHARACTERISTICS attribute.
        subtitles: SUBTITLES attribute.
        uri: Rendition playlist URI.
        instream_id: INSTREAM-ID for closed captions.
        channels: CHANNELS attribute.
    """

    type: str = ""
    group_id: str = ""
    name: str = ""
    language: str = ""
    default: bool = False
    autoselect: str = ""
    forced: str = ""
    characteristics: str = ""
    subtitles: str = ""
    uri: str = ""
    instream_id: str = ""
    channels: str = ""

    @property
    def dedup_key(self) -> tuple[str, str, str, str]:
        """Key used to write each rendition only once."""
        return (self.type, self.group_id, self.name, self.language)


@dataclass
class VariantParams:
    """EXT-X-STREAM-INF / EXT-X-I-FRAME-STREAM-INF attributes.

    Attributes:
        program_id: PROGRAM-ID, always written.
        bandwidth: Peak BANDWIDTH in bits per second, always written.
        average_bandwidth: AVERAGE-BANDWIDTH, written when non-zero.
        codecs: CODECS list.
        resolution: RESOLUTION as WIDTHxHEIGHT (unquoted).
        audio: AUDIO group reference.
        video: VIDEO group reference.
        subtitles: SUBTITLES group reference.
        captions: CLOSED-CAPTIONS group reference, or "NONE" (unquoted).
        name: NAME attribute.
        iframe: Write an I-frame stream tag instead of a stream tag.
        video_range: VIDEO-RANGE value (SDR, PQ, HLG).
        hdcp_level: HDCP-LEVEL value (TYPE-0, NONE).
        frame_rate: FRAME-RATE, written with 3 decimals when non-zero.
        alternatives: Renditions used by this variant.
    """

    program_id: int = 0
    bandwidth: int = 0
    average_bandwidth: int = 0
    codecs: str = ""
    resolution: str = ""
    audio: str = ""
    video: str = ""
    subtitles: str = ""
    captions: str = ""
    name: str = ""
    iframe: bool = False
    video_range: str = ""
    hdcp_level: str = ""
    frame_rate: float = 0.0
    alternatives: list[Alternative] = field(default_factory=list)


@dataclass
class Variant:
    """One rendition entry of a master playlist.

    ``chunklist`` is a convenience back-reference to the media playlist
    served at ``uri``. The master playlist neither owns nor serializes it.
    """

    uri: str
    params: VariantParams = field(default_factory=VariantParams)
    chunklist: MediaPlaylist | None = field(default=None, repr=False, compare=False)

    @property
    def alternatives(self) -> list[Alternative]:
        return self.params.alternatives

    @property
    def iframe(self) -> bool:
        return self.params.iframe


@dataclass
class SessionData:
    """EXT-X-SESSION-DATA entry.

    Only one of ``value`` and ``uri`` is written; ``value`` wins when both
    are set.
    """

    data_id: str
    value: str = ""
    uri: str = ""
    language: str = ""

    @property
    def storage_key(self) -> tuple[str, str]:
        """Exact-match key for last-write-wins storage."""
        return (self.data_id, self.language)

    @property
    def dedup_key(self) -> tuple[str, str]:
        """Case-insensitive key for encode-time deduplication."""
        return (self.data_id.lower(), self.language.lower())
