"""
Scalar classification for flat (non-nested) values.

Rules, checked in order on the trimmed value:

1. ``rgb(R,G,B)`` -> ``Color``. A value shaped as ``rgb(...)`` whose
   channels are not three unsigned ASCII integers in 0-255 is a FormatError.
2. Exactly ``YYYY-MM-DD HH:MM:SS`` -> ``datetime`` (naive, second
   precision). Anything that merely resembles it, including impossible
   calendar dates, falls through to rule 3.
3. Otherwise the trimmed text.

Numbers are not classified: ``width: 5`` stays the string ``"5"``.
"""

from __future__ import annotations

import re
from datetime import datetime

from mse_ingest.exceptions import FormatError
from mse_ingest.values import Color, TypedValue

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")
_CHANNEL_PATTERN = re.compile(r"[0-9]+")


def looks_like_color(value: str) -> bool:
    return value.startswith("rgb(") and value.endswith(")")


def parse_color(
    value: str,
    line: int | None = None,
    title: str | None = None,
) -> Color:
    """Parse an ``rgb(R,G,B)`` literal.

    Raises:
        FormatError: If *value* is not a valid color literal.
    """
    value = value.strip()
    if not looks_like_color(value):
        raise FormatError("Not an rgb(R,G,B) literal", text=value, line=line, title=title)
    channels = [c.strip() for c in value[4:-1].split(",")]
    if len(channels) != 3:
        raise FormatError(
            f"Color literal needs 3 channels, got {len(channels)}",
            text=value, line=line, title=title,
        )
    numbers: list[int] = []
    for channel in channels:
        if not _CHANNEL_PATTERN.fullmatch(channel):
            raise FormatError(
                f"Color channel {channel!r} is not an integer",
                text=value, line=line, title=title,
            )
        number = int(channel)
        if not 0 <= number <= 255:
            raise FormatError(
                f"Color channel {number} out of range 0-255",
                text=value, line=line, title=title,
            )
        numbers.append(number)
    return Color(*numbers)


def try_parse_timestamp(value: str) -> datetime | None:
    """Parse an exact ``YYYY-MM-DD HH:MM:SS`` value, or return ``None``."""
    value = value.strip()
    if not _TIMESTAMP_PATTERN.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def parse_timestamp(
    value: str,
    line: int | None = None,
    title: str | None = None,
) -> datetime:
    """Parse an exact ``YYYY-MM-DD HH:MM:SS`` value.

    Raises:
        FormatError: If *value* does not match the pattern exactly or is not
            a real calendar date-time.
    """
    parsed = try_parse_timestamp(value)
    if parsed is None:
        raise FormatError(
            "Expected a 'YYYY-MM-DD HH:MM:SS' timestamp",
            text=value.strip(), line=line, title=title,
        )
    return parsed


def classify_scalar(
    value: str,
    line: int | None = None,
    title: str | None = None,
) -> TypedValue:
    """Type a flat raw value as Color, datetime or str (in that order)."""
    stripped = value.strip()
    if looks_like_color(stripped):
        return parse_color(stripped, line=line, title=title)
    timestamp = try_parse_timestamp(stripped)
    if timestamp is not None:
        return timestamp
    return stripped
