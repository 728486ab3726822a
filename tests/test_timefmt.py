"""Tests for timestamp encoding and latency rendering."""

import re
from datetime import datetime, timedelta, timezone

import pytest

from lspinspector.timefmt import (
    ISO8601_LENGTH,
    decode_iso8601,
    elapsed_ms,
    encode_iso8601,
    format_latency,
)

_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestEncodeIso8601:
    """Fixed-width timestamp encoder tests."""

    def test_given_utc_instant_when_encoded_then_matches_reference_layout(self) -> None:
        # Given
        t = datetime(2021, 3, 4, 10, 15, 30, 123456, tzinfo=timezone.utc)

        # When
        result = encode_iso8601(t)

        # Then
        assert result == "2021-03-04T10:15:30.123Z"

    def test_given_offset_instant_when_encoded_then_normalized_to_utc(self) -> None:
        # Given - 23:30 at UTC-05:00 is 04:30 the next day in UTC
        tz = timezone(timedelta(hours=-5))
        t = datetime(2020, 12, 31, 23, 30, 0, 5000, tzinfo=tz)

        # When
        result = encode_iso8601(t)

        # Then
        assert result == "2021-01-01T04:30:00.005Z"

    def test_given_naive_instant_when_encoded_then_treated_as_utc(self) -> None:
        assert encode_iso8601(datetime(2006, 1, 2, 15, 4, 5)) == "2006-01-02T15:04:05.000Z"

    def test_given_small_year_when_encoded_then_zero_padded(self) -> None:
        t = datetime(7, 1, 1, tzinfo=timezone.utc)
        assert encode_iso8601(t) == "0007-01-01T00:00:00.000Z"

    def test_given_sub_millisecond_fraction_when_encoded_then_truncated(self) -> None:
        t = datetime(2021, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
        assert encode_iso8601(t) == "2021-01-01T00:00:00.999Z"

    @pytest.mark.parametrize(
        "t",
        [
            datetime(1970, 1, 1, tzinfo=timezone.utc),
            datetime(1999, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc),
            datetime(2024, 2, 29, 12, 0, 0, 1000, tzinfo=timezone(timedelta(hours=9))),
            datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        ],
    )
    def test_output_is_fixed_width_and_decodes_to_truncated_instant(self, t: datetime) -> None:
        encoded = encode_iso8601(t)

        assert len(encoded) == ISO8601_LENGTH
        assert _PATTERN.match(encoded)
        expected = t.astimezone(timezone.utc).replace(microsecond=t.microsecond // 1000 * 1000)
        assert decode_iso8601(encoded) == expected


class TestDecodeIso8601:
    """Decoder tests."""

    @pytest.mark.parametrize(
        "text",
        ["2021-03-04T10:15:30Z", "2021-03-04T10:15:30.123", "2021-13-04T10:15:30.123Z", ""],
    )
    def test_given_malformed_text_when_decoded_then_raises(self, text: str) -> None:
        with pytest.raises(ValueError):
            decode_iso8601(text)

    def test_decoded_value_is_aware_utc(self) -> None:
        result = decode_iso8601("2021-03-04T10:15:30.123Z")
        assert result.tzinfo == timezone.utc
        assert result.microsecond == 123000


class TestElapsedMs:
    """Elapsed-time computation tests."""

    def test_given_150ms_gap_then_reports_150(self) -> None:
        t0 = datetime(2021, 1, 1, tzinfo=timezone.utc)
        assert elapsed_ms(t0, t0 + timedelta(milliseconds=150)) == 150

    def test_given_fractional_ms_then_floors(self) -> None:
        t0 = datetime(2021, 1, 1, tzinfo=timezone.utc)
        assert elapsed_ms(t0, t0 + timedelta(microseconds=1999)) == 1

    def test_given_clock_skew_then_clamps_to_zero(self) -> None:
        t0 = datetime(2021, 1, 1, tzinfo=timezone.utc)
        assert elapsed_ms(t0, t0 - timedelta(seconds=2)) == 0

    def test_given_naive_start_and_aware_now_then_start_is_utc(self) -> None:
        start = datetime(2021, 1, 1, 0, 0, 0)
        now = datetime(2021, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert elapsed_ms(start, now) == 1000


class TestFormatLatency:
    """Latency rendering tests."""

    def test_absent_latency_renders_as_dash(self) -> None:
        assert format_latency(None) == "-"

    def test_measured_zero_renders_distinctly(self) -> None:
        assert format_latency(timedelta(0)) == "0ms"

    def test_measured_latency_renders_whole_ms(self) -> None:
        assert format_latency(timedelta(seconds=1, microseconds=500)) == "1000ms"

    def test_negative_latency_clamps_to_zero(self) -> None:
        assert format_latency(timedelta(milliseconds=-5)) == "0ms"
