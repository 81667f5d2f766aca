"""
Media segment data models.

A MediaSegment is one playable chunk in a media playlist: a URI, a
duration and the per-segment tags that precede its EXTINF line.

Keys are compared by identity, not by value: the encoder re-emits
EXT-X-KEY for a segment whenever its key object is not the very object
installed as the playlist default, even if every field matches. Key is
therefore declared with ``eq=False``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from hls_playlist.models.tags import CustomTag


class SCTE35Syntax(str, Enum):
    """Wire form used for an SCTE-35 cue."""

    SCTE35_67_2014 = "scte35_67_2014"  # #EXT-SCTE35:CUE="..."
    OATCLS = "oatcls"  # #EXT-X-CUE-OUT / -CONT / -IN


class SCTE35CueType(str, Enum):
    """Position of an OATCLS cue within an ad break."""

    START = "start"
    MID = "mid"
    END = "end"


@dataclass(eq=False)
class Key:
    """Encryption key for EXT-X-KEY.

    Attributes:
        method: Encryption method ("NONE", "AES-128", "SAMPLE-AES").
        uri: Key URI.
        iv: Initialization vector, written unquoted.
        keyformat: KEYFORMAT attribute (requires version 5).
        keyformatversions: KEYFORMATVERSIONS attribute (requires version 5).
    """

    method: str
    uri: str = ""
    iv: str = ""
    keyformat: str = ""
    keyformatversions: str = ""

    @property
    def has_format(self) -> bool:
        """True if KEYFORMAT or KEYFORMATVERSIONS is set."""
        return bool(self.keyformat or self.keyformatversions)


@dataclass
class Map:
    """Media initialization section for EXT-X-MAP.

    Attributes:
        uri: Initialization section URI.
        limit: Byte length; BYTERANGE is written only when > 0.
        offset: Byte offset.
    """

    uri: str
    limit: int = 0
    offset: int = 0


@dataclass
class SCTE:
    """SCTE-35 ad-insertion cue attached to a segment.

    Attributes:
        syntax: Legacy 67-2014 cue or OATCLS form.
        cue: Opaque base64 cue payload.
        id: Cue identifier (legacy form only).
        time: Cue time (legacy) or break duration (OATCLS).
        cue_type: OATCLS position in the break.
        elapsed: Seconds elapsed in the break (OATCLS mid only).
    """

    syntax: SCTE35Syntax = SCTE35Syntax.SCTE35_67_2014
    cue: str = ""
    id: str = ""
    time: float = 0.0
    cue_type: SCTE35CueType = SCTE35CueType.START
    elapsed: float = 0.0


@dataclass
class DateRange:
    """EXT-X-DATERANGE metadata interval.

    Every attribute other than ``id`` is written only when it differs
    from its default.

    Attributes:
        id: Required unique identifier.
        class_name: CLASS attribute.
        start_date: START-DATE timestamp.
        end_date: END-DATE timestamp.
        duration: DURATION in seconds.
        planned_duration: PLANNED-DURATION in seconds.
        scte35_cmd: SCTE35-CMD hex string, written unquoted.
        scte35_in: SCTE35-IN hex string, written unquoted.
        scte35_out: SCTE35-OUT hex string, written unquoted.
        end_on_next: END-ON-NEXT=YES flag.
        x_resume_offset: X-RESUME-OFFSET in seconds.
        x_playout_limit: X-PLAYOUT-LIMIT in seconds.
        x_snap: X-SNAP attribute.
        x_restrict: X-RESTRICT attribute.
        x_asset_uri: X-ASSET-URI attribute.
        x_asset_list: X-ASSET-LIST attribute.
        extensions: Other X- attributes, written quoted.
    """

    id: str
    class_name: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration: float = 0.0
    planned_duration: float = 0.0
    scte35_cmd: str = ""
    scte35_in: str = ""
    scte35_out: str = ""
    end_on_next: bool = False
    x_resume_offset: float = 0.0
    x_playout_limit: float = 0.0
    x_snap: str = ""
    x_restrict: str = ""
    x_asset_uri: str = ""
    x_asset_list: str = ""
    extensions: dict[str, str] = field(default_factory=dict)


@dataclass
class MediaSegment:
    """One media segment in a media playlist.

    Attributes:
        uri: Segment URI.
        duration: Duration in seconds.
        title: Optional EXTINF title.
        seq_id: Media sequence number, assigned by the playlist.
        key: Per-segment key override.
        map: Per-segment initialization section override.
        scte: SCTE-35 cue marker.
        date_ranges: DateRange tags, written in list order.
        discontinuity: Emit EXT-X-DISCONTINUITY before the segment.
        gap: Emit EXT-X-GAP before the segment.
        program_date_time: EXT-X-PROGRAM-DATE-TIME value.
        limit: Byte-range length; EXT-X-BYTERANGE is written only when > 0.
        offset: Byte-range offset.
        custom: Custom segment tags keyed by tag name.

    Invariants:
        - seq_id values strictly increase in slot order within the live window
        - duration >= 0
    """

    uri: str = ""
    duration: float = 0.0
    title: str = ""
    seq_id: int = 0
    key: Key | None = None
    map: Map | None = None
    scte: SCTE | None = None
    date_ranges: list[DateRange] = field(default_factory=list)
    discontinuity: bool = False
    gap: bool = False
    program_date_time: datetime | None = None
    limit: int = 0
    offset: int = 0
    custom: dict[str, CustomTag] = field(default_factory=dict)

    def set_custom_tag(self, tag: CustomTag) -> None:
        """Store ``tag`` under its name, replacing any previous tag."""
        self.custom[tag.tag_name()] = tag
