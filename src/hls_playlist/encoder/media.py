"""
Media playlist text encoder.

Renders a MediaPlaylist into HLS tag grammar. The output order is:

1. #EXTM3U and EXT-X-VERSION
2. EXT-X-INDEPENDENT-SEGMENTS, custom playlist tags
3. Default EXT-X-KEY and EXT-X-MAP
4. EXT-X-PLAYLIST-TYPE (EVENT adds EXT-X-ALLOW-CACHE:NO), EXT-X-MEDIA-SEQUENCE,
   EXT-X-TARGETDURATION, EXT-X-START, EXT-X-DISCONTINUITY-SEQUENCE,
   EXT-X-I-FRAMES-ONLY, Widevine vendor tags
5. Per visible segment: SCTE cue, key change, date ranges, discontinuity,
   gap, map, program date time, byte range, custom tags, EXTINF and URI
6. EXT-X-ENDLIST when the playlist is closed

The encoder is pure: it reads the playlist and never mutates it. Caching
is the controller's job.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from hls_playlist.encoder.formatting import (
    append_query,
    format_byte_range,
    format_datetime,
    format_duration,
    format_float,
    key_tag,
    map_tag,
    quoted,
)
from hls_playlist.models.playlist import MediaType, WidevineMetadata
from hls_playlist.models.segments import SCTE, DateRange, MediaSegment, SCTE35CueType, SCTE35Syntax

if TYPE_CHECKING:
    from hls_playlist.playlist.media import MediaPlaylist

ENDLIST_TAG = "#EXT-X-ENDLIST"


def encode_media_playlist(playlist: MediaPlaylist) -> bytes:
    """Render ``playlist`` as UTF-8 playlist text."""
    lines: list[str] = ["#EXTM3U", f"#EXT-X-VERSION:{playlist.version}"]

    if playlist.independent_segments:
        lines.append("#EXT-X-INDEPENDENT-SEGMENTS")

    for tag in playlist.custom_tags.values():
        text = tag.render()
        if text is not None:
            lines.append(text)

    if playlist.default_key is not None:
        lines.append(key_tag(playlist.default_key))
    if playlist.default_map is not None:
        lines.append(map_tag(playlist.default_map))

    if playlist.media_type == MediaType.EVENT:
        lines.append("#EXT-X-PLAYLIST-TYPE:EVENT")
        lines.append("#EXT-X-ALLOW-CACHE:NO")
    elif playlist.media_type == MediaType.VOD:
        lines.append("#EXT-X-PLAYLIST-TYPE:VOD")

    lines.append(f"#EXT-X-MEDIA-SEQUENCE:{playlist.media_sequence}")
    lines.append(f"#EXT-X-TARGETDURATION:{math.ceil(playlist.target_duration)}")

    if playlist.start_time > 0.0:
        start = f"#EXT-X-START:TIME-OFFSET={format_float(playlist.start_time)}"
        if playlist.start_time_precise:
            start += ",PRECISE=YES"
        lines.append(start)

    if playlist.discontinuity_sequence != 0:
        lines.append(f"#EXT-X-DISCONTINUITY-SEQUENCE:{playlist.discontinuity_sequence}")

    if playlist.iframe_only:
        lines.append("#EXT-X-I-FRAMES-ONLY")

    if playlist.widevine is not None:
        lines.extend(_widevine_lines(playlist.widevine))

    durations: dict[float, str] = {}
    for segment in playlist.visible_segments():
        _append_segment(lines, playlist, segment, durations)

    if playlist.closed:
        lines.append(ENDLIST_TAG)

    return ("\n".join(lines) + "\n").encode("utf-8")


def _append_segment(
    lines: list[str],
    playlist: MediaPlaylist,
    segment: MediaSegment,
    durations: dict[float, str],
) -> None:
    if segment.scte is not None:
        lines.extend(_scte_lines(segment.scte))

    # Identity check: an equal-valued but distinct Key is written again.
    if segment.key is not None and segment.key is not playlist.default_key:
        lines.append(key_tag(segment.key))

    for date_range in segment.date_ranges:
        lines.append(_date_range_line(date_range))

    if segment.discontinuity:
        lines.append("#EXT-X-DISCONTINUITY")
    if segment.gap:
        lines.append("#EXT-X-GAP")

    if playlist.default_map is None and segment.map is not None:
        lines.append(map_tag(segment.map))

    if segment.program_date_time is not None:
        lines.append(f"#EXT-X-PROGRAM-DATE-TIME:{format_datetime(segment.program_date_time)}")

    if segment.limit > 0:
        lines.append(f"#EXT-X-BYTERANGE:{format_byte_range(segment.limit, segment.offset)}")

    for tag in segment.custom.values():
        text = tag.render()
        if text is not None:
            lines.append(text)

    duration = durations.get(segment.duration)
    if duration is None:
        duration = format_duration(segment.duration, playlist.duration_as_int)
        durations[segment.duration] = duration

    lines.append(f"#EXTINF:{duration},{segment.title}")
    lines.append(append_query(segment.uri, playlist.args))


def _scte_lines(scte: SCTE) -> list[str]:
    if scte.syntax == SCTE35Syntax.SCTE35_67_2014:
        attrs = [f"CUE={quoted(scte.cue)}"]
        if scte.id:
            attrs.append(f"ID={quoted(scte.id)}")
        if scte.time != 0:
            attrs.append(f"TIME={format_float(scte.time)}")
        return ["#EXT-SCTE35:" + ",".join(attrs)]

    if scte.cue_type == SCTE35CueType.START:
        lines = []
        if scte.cue:
            lines.append(f"#EXT-OATCLS-SCTE35:{scte.cue}")
        lines.append(f"#EXT-X-CUE-OUT:{format_float(scte.time)}")
        return lines
    if scte.cue_type == SCTE35CueType.MID:
        return [
            f"#EXT-X-CUE-OUT-CONT:ElapsedTime={format_float(scte.elapsed)},"
            f"Duration={format_float(scte.time)},SCTE35={scte.cue}"
        ]
    return ["#EXT-X-CUE-IN"]


def _date_range_line(date_range: DateRange) -> str:
    attrs = [f"ID={quoted(date_range.id)}"]
    if date_range.class_name:
        attrs.append(f"CLASS={quoted(date_range.class_name)}")
    if date_range.start_date is not None:
        attrs.append(f"START-DATE={quoted(format_datetime(date_range.start_date))}")
    if date_range.end_date is not None:
        attrs.append(f"END-DATE={quoted(format_datetime(date_range.end_date))}")
    if date_range.duration > 0:
        attrs.append(f"DURATION={format_float(date_range.duration)}")
    if date_range.planned_duration > 0:
        attrs.append(f"PLANNED-DURATION={format_float(date_range.planned_duration)}")
    if date_range.scte35_cmd:
        attrs.append(f"SCTE35-CMD={date_range.scte35_cmd}")
    if date_range.scte35_in:
        attrs.append(f"SCTE35-IN={date_range.scte35_in}")
    if date_range.scte35_out:
        attrs.append(f"SCTE35-OUT={date_range.scte35_out}")
    if date_range.end_on_next:
        attrs.append("END-ON-NEXT=YES")
    if date_range.x_resume_offset > 0:
        attrs.append(f"X-RESUME-OFFSET={format_float(date_range.x_resume_offset)}")
    if date_range.x_playout_limit > 0:
        attrs.append(f"X-PLAYOUT-LIMIT={format_float(date_range.x_playout_limit)}")
    if date_range.x_snap:
        attrs.append(f"X-SNAP={quoted(date_range.x_snap)}")
    if date_range.x_restrict:
        attrs.append(f"X-RESTRICT={quoted(date_range.x_restrict)}")
    if date_range.x_asset_uri:
        attrs.append(f"X-ASSET-URI={quoted(date_range.x_asset_uri)}")
    if date_range.x_asset_list:
        attrs.append(f"X-ASSET-LIST={quoted(date_range.x_asset_list)}")
    for name, value in date_range.extensions.items():
        attrs.append(f"{name}={quoted(value)}")
    return "#EXT-X-DATERANGE:" + ",".join(attrs)


def _widevine_lines(wv: WidevineMetadata) -> list[str]:
    fields = [
        ("#WV-AUDIO-CHANNELS", wv.audio_channels),
        ("#WV-AUDIO-FORMAT", wv.audio_format),
        ("#WV-AUDIO-PROFILE-IDC", wv.audio_profile_idc),
        ("#WV-AUDIO-SAMPLE-SIZE", wv.audio_sample_size),
        ("#WV-AUDIO-SAMPLING-FREQUENCY", wv.audio_sampling_frequency),
        ("#WV-CYPHER-VERSION", wv.cypher_version),
        ("#WV-ECM", wv.ecm),
        ("#WV-VIDEO-FORMAT", wv.video_format),
        ("#WV-VIDEO-FRAME-RATE", wv.video_frame_rate),
        ("#WV-VIDEO-LEVEL-IDC", wv.video_level_idc),
        ("#WV-VIDEO-PROFILE-IDC", wv.video_profile_idc),
        ("#WV-VIDEO-RESOLUTION", wv.video_resolution),
        ("#WV-VIDEO-SAR", wv.video_sar),
    ]
    return [f"{tag} {value}" for tag, value in fields if value]
