"""
Master playlist text encoder.

Output order:

1. #EXTM3U and EXT-X-VERSION
2. EXT-X-INDEPENDENT-SEGMENTS, custom tags
3. EXT-X-SESSION-DATA, deduplicated by (DATA-ID, LANGUAGE) ignoring case
4. EXT-X-MEDIA for every variant's renditions, deduplicated by
   (TYPE, GROUP-ID, NAME, LANGUAGE)
5. Per variant: EXT-X-I-FRAME-STREAM-INF (URI as attribute), or
   EXT-X-STREAM-INF followed by the URI line

Deduplication only affects output; the stored entries are untouched and
the first occurrence wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from hls_playlist.encoder.formatting import append_query, format_fixed, quoted
from hls_playlist.models.variants import Alternative, SessionData, Variant

if TYPE_CHECKING:
    from hls_playlist.playlist.master import MasterPlaylist


def encode_master_playlist(playlist: MasterPlaylist) -> bytes:
    """Render ``playlist`` as UTF-8 playlist text."""
    lines: list[str] = ["#EXTM3U", f"#EXT-X-VERSION:{playlist.version}"]

    if playlist.independent_segments:
        lines.append("#EXT-X-INDEPENDENT-SEGMENTS")

    for tag in playlist.custom_tags.values():
        text = tag.render()
        if text is not None:
            lines.append(text)

    lines.extend(_session_data_lines(playlist.session_data))

    written: set[tuple[str, str, str, str]] = set()
    for variant in playlist.variants:
        for alternative in variant.alternatives:
            if alternative.dedup_key in written:
                continue
            written.add(alternative.dedup_key)
            lines.append(_media_line(alternative))

    for variant in playlist.variants:
        if variant.iframe:
            lines.append(_iframe_stream_line(variant))
        else:
            lines.append(_stream_line(variant))
            lines.append(append_query(variant.uri, playlist.args, check_existing=True))

    return ("\n".join(lines) + "\n").encode("utf-8")


def _session_data_lines(entries: Iterable[SessionData]) -> list[str]:
    lines = []
    written: set[tuple[str, str]] = set()
    for entry in entries:
        # Entries without a language are never considered duplicates.
        if entry.language:
            if entry.dedup_key in written:
                continue
            written.add(entry.dedup_key)

        attrs = [f"DATA-ID={quoted(entry.data_id)}"]
        if entry.value:
            attrs.append(f"VALUE={quoted(entry.value)}")
        elif entry.uri:
            attrs.append(f"URI={quoted(entry.uri)}")
        if entry.language:
            attrs.append(f"LANGUAGE={quoted(entry.language)}")
        lines.append("#EXT-X-SESSION-DATA:" + ",".join(attrs))
    return lines


def _media_line(alt: Alternative) -> str:
    attrs = []
    if alt.type:
        attrs.append(f"TYPE={alt.type}")
    if alt.group_id:
        attrs.append(f"GROUP-ID={quoted(alt.group_id)}")
    if alt.name:
        attrs.append(f"NAME={quoted(alt.name)}")
    attrs.append(f"DEFAULT={'YES' if alt.default else 'NO'}")
    if alt.autoselect:
        attrs.append(f"AUTOSELECT={alt.autoselect}")
    if alt.language:
        attrs.append(f"LANGUAGE={quoted(alt.language)}")
    if alt.forced:
        attrs.append(f"FORCED={alt.forced}")
    if alt.characteristics:
        attrs.append(f"CHARACTERISTICS={quoted(alt.characteristics)}")
    if alt.subtitles:
        attrs.append(f"SUBTITLES={quoted(alt.subtitles)}")
    if alt.uri:
        attrs.append(f"URI={quoted(alt.uri)}")
    if alt.instream_id:
        attrs.append(f"INSTREAM-ID={quoted(alt.instream_id)}")
    if alt.channels:
        attrs.append(f"CHANNELS={quoted(alt.channels)}")
    return "#EXT-X-MEDIA:" + ",".join(attrs)


def _common_attrs(variant: Variant) -> list[str]:
    params = variant.params
    attrs = [f"PROGRAM-ID={params.program_id}", f"BANDWIDTH={params.bandwidth}"]
    if params.average_bandwidth != 0:
        attrs.append(f"AVERAGE-BANDWIDTH={params.average_bandwidth}")
    if params.codecs:
        attrs.append(f"CODECS={quoted(params.codecs)}")
    if params.resolution:
        attrs.append(f"RESOLUTION={params.resolution}")
    return attrs


def _iframe_stream_line(variant: Variant) -> str:
    params = variant.params
    attrs = _common_attrs(variant)
    if params.video:
        attrs.append(f"VIDEO={quoted(params.video)}")
    if params.video_range:
        attrs.append(f"VIDEO-RANGE={params.video_range}")
    if params.hdcp_level:
        attrs.append(f"HDCP-LEVEL={params.hdcp_level}")
    if variant.uri:
        attrs.append(f"URI={quoted(variant.uri)}")
    return "#EXT-X-I-FRAME-STREAM-INF:" + ",".join(attrs)


def _stream_line(variant: Variant) -> str:
    params = variant.params
    attrs = _common_attrs(variant)
    if params.audio:
        attrs.append(f"AUDIO={quoted(params.audio)}")
    if params.video:
        attrs.append(f"VIDEO={quoted(params.video)}")
    if params.captions:
        captions = params.captions if params.captions == "NONE" else quoted(params.captions)
        attrs.append(f"CLOSED-CAPTIONS={captions}")
    if params.subtitles:
        attrs.append(f"SUBTITLES={quoted(params.subtitles)}")
    if params.name:
        attrs.append(f"NAME={quoted(params.name)}")
    if params.frame_rate != 0:
        attrs.append(f"FRAME-RATE={format_fixed(params.frame_rate, 3)}")
    if params.video_range:
        attrs.append(f"VIDEO-RANGE={params.video_range}")
    if params.hdcp_level:
        attrs.append(f"HDCP-LEVEL={params.hdcp_level}")
    return "#EXT-X-STREAM-INF:" + ",".join(attrs)
