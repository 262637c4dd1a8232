from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional


TIMESTAMP_LENGTH = 21
TIMESTAMP_SUFFIX = "GMT"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_DIGITS = re.compile(r"[0-9]+")

# (start, end) slices of 'YYYYMMDDHHMMSS.mmmGMT'
_FIELD_SLICES = (
    (0, 4),
    (4, 6),
    (6, 8),
    (8, 10),
    (10, 12),
    (12, 14),
    (15, 18),
)


def parse_timestamp(text: str) -> Optional[datetime]:
    """
    Decode a survey timestamp such as '20160407235833.627GMT' into a UTC instant.

    Only the shape is checked: the text must be 21 characters and end in 'GMT'.
    Field values are not range-checked; out-of-range values roll over into the
    next unit (month 13 is January of the following year). Returns None when
    the text cannot be decoded.
    """
    if len(text) != TIMESTAMP_LENGTH or text[18:21] != TIMESTAMP_SUFFIX:
        return None

    fields = []
    for start, end in _FIELD_SLICES:
        chunk = text[start:end]
        if not _DIGITS.fullmatch(chunk):
            return None
        fields.append(int(chunk))

    year, month, day, hour, minute, second, millisecond = fields
    try:
        return _utc_instant(year, month, day, hour, minute, second, millisecond)
    except (ValueError, OverflowError):
        return None


def _utc_instant(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
) -> datetime:
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    base = datetime(year, month, 1, tzinfo=timezone.utc)
    return base + timedelta(
        days=day - 1,
        hours=hour,
        minutes=minute,
        seconds=second,
        milliseconds=millisecond,
    )


def to_epoch_ms(instant: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    return (instant - _EPOCH) // _ONE_MS


def difference_ms(first: datetime, second: datetime) -> int:
    """Signed millisecond difference ``first - second``."""
    return to_epoch_ms(first) - to_epoch_ms(second)
