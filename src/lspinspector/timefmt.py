"""Time and duration rendering for trace records.

The timestamp layout is fixed at 24 ASCII characters
(``2006-01-02T15:04:05.000Z``) so log consumers can slice it by offset.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

ISO8601_LENGTH = 24
_ZERO = ord("0")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    # Naive values are taken to already be UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def encode_iso8601(dt: datetime) -> str:
    """Serialize ``dt`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Writes digits straight into a fixed buffer instead of going through
    ``strftime``, which is locale dependent and noticeably slower.
    """
    t = _as_utc(dt)
    year, month, day = t.year, t.month, t.day
    hour, minute, second = t.hour, t.minute, t.second
    msec = t.microsecond // 1000

    b = bytearray(ISO8601_LENGTH)
    b[0] = (year // 1000) % 10 + _ZERO
    b[1] = (year // 100) % 10 + _ZERO
    b[2] = (year // 10) % 10 + _ZERO
    b[3] = year % 10 + _ZERO
    b[4] = ord("-")
    b[5] = month // 10 + _ZERO
    b[6] = month % 10 + _ZERO
    b[7] = ord("-")
    b[8] = day // 10 + _ZERO
    b[9] = day % 10 + _ZERO
    b[10] = ord("T")
    b[11] = hour // 10 + _ZERO
    b[12] = hour % 10 + _ZERO
    b[13] = ord(":")
    b[14] = minute // 10 + _ZERO
    b[15] = minute % 10 + _ZERO
    b[16] = ord(":")
    b[17] = second // 10 + _ZERO
    b[18] = second % 10 + _ZERO
    b[19] = ord(".")
    b[20] = (msec // 100) % 10 + _ZERO
    b[21] = (msec // 10) % 10 + _ZERO
    b[22] = msec % 10 + _ZERO
    b[23] = ord("Z")
    return b.decode("ascii")


def decode_iso8601(text: str) -> datetime:
    """Parse the output of :func:`encode_iso8601` back into an aware datetime."""
    if len(text) != ISO8601_LENGTH or not text.endswith("Z"):
        raise ValueError(f"Not a millisecond ISO-8601 UTC timestamp: {text!r}")
    parsed = datetime.strptime(text[:-1], "%Y-%m-%dT%H:%M:%S.%f")
    return parsed.replace(tzinfo=timezone.utc)


def elapsed_ms(start: datetime, now: datetime) -> int:
    """Whole milliseconds from ``start`` to ``now``; clock skew yields 0."""
    delta = _as_utc(now) - _as_utc(start)
    return max(0, delta // timedelta(milliseconds=1))


def format_latency(latency: timedelta | None) -> str:
    """Render a latency for summary lines.

    ``None`` means "not measured" and renders as ``-`` so it stays
    distinguishable from a measured ``0ms``.
    """
    if latency is None:
        return "-"
    return f"{max(0, latency // timedelta(milliseconds=1))}ms"
