"""
Value formatting shared by the master and media encoders.

Rules:
- Real numbers use the shortest positional form that round-trips
  (no exponent, no trailing ".0") unless a fixed precision is named
- Timestamps are RFC 3339 with trailing zeros of the fraction trimmed
  and "Z" for UTC; naive datetimes are treated as UTC
- Byte ranges are "<length>@<offset>"
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal

from hls_playlist.models.segments import Key, Map


def format_float(value: float) -> str:
    """Shortest positional decimal for ``value``: 4.0 -> "4", 1e-05 -> "0.00001"."""
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_fixed(value: float, places: int = 3) -> str:
    return f"{value:.{places}f}"


def format_duration(duration: float, as_int: bool) -> str:
    """EXTINF duration: rounded up to whole seconds, or 3 decimals."""
    if as_int:
        return str(math.ceil(duration))
    return format_fixed(duration, 3)


def format_datetime(value: datetime) -> str:
    """RFC 3339 timestamp, e.g. "2024-05-01T12:00:00.5Z"."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")

    offset = value.utcoffset()
    if not offset:
        return text + "Z"

    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, remainder = divmod(abs(total), 3600)
    return f"{text}{sign}{hours:02d}:{remainder // 60:02d}"


def quoted(value: str) -> str:
    return f'"{value}"'


def format_byte_range(limit: int, offset: int) -> str:
    return f"{limit}@{offset}"


def append_query(uri: str, args: str, check_existing: bool = False) -> str:
    """Append the ``args`` query fragment to ``uri``.

    Args:
        uri: Target URI
        args: Query fragment without a leading separator; empty leaves uri as is
        check_existing: Join with '&' when uri already has a '?'
    """
    if not args:
        return uri
    if check_existing and "?" in uri:
        return f"{uri}&{args}"
    return f"{uri}?{args}"


def key_tag(key: Key) -> str:
    """EXT-X-KEY line for ``key``; attributes beyond METHOD only if not NONE."""
    attrs = [f"METHOD={key.method}"]
    if key.method != "NONE":
        attrs.append(f"URI={quoted(key.uri)}")
        if key.iv:
            attrs.append(f"IV={key.iv}")
        if key.keyformat:
            attrs.append(f"KEYFORMAT={quoted(key.keyformat)}")
        if key.keyformatversions:
            attrs.append(f"KEYFORMATVERSIONS={quoted(key.keyformatversions)}")
    return "#EXT-X-KEY:" + ",".join(attrs)


def map_tag(init: Map) -> str:
    """EXT-X-MAP line; BYTERANGE only when the length is positive."""
    attrs = [f"URI={quoted(init.uri)}"]
    if init.limit > 0:
        attrs.append(f"BYTERANGE={format_byte_range(init.limit, init.offset)}")
    return "#EXT-X-MAP:" + ",".join(attrs)
