from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from eventkey.core.timestamp import (
    prefix_to_epoch,
    timestamp_prefix,
    to_epoch_seconds,
)

EPOCH_2016 = 1451613600  # 2016-01-01T02:00:00Z


def test_prefix_is_big_endian_low_32_bits() -> None:
    assert timestamp_prefix(EPOCH_2016) == EPOCH_2016.to_bytes(4, "big")
    assert timestamp_prefix(0) == b"\x00\x00\x00\x00"
    assert timestamp_prefix(0xFFFFFFFF) == b"\xff\xff\xff\xff"


def test_prefix_drops_bits_above_32() -> None:
    assert timestamp_prefix(0x1_2345_6789) == b"\x23\x45\x67\x89"


def test_negative_epoch_wraps_as_twos_complement() -> None:
    assert timestamp_prefix(-1) == b"\xff\xff\xff\xff"
    assert timestamp_prefix(-256) == b"\xff\xff\xff\x00"
    assert prefix_to_epoch(timestamp_prefix(-1)) == 0xFFFFFFFF


def test_prefix_round_trip() -> None:
    assert prefix_to_epoch(timestamp_prefix(EPOCH_2016) + b"rest") == EPOCH_2016


def test_prefix_to_epoch_needs_four_bytes() -> None:
    with pytest.raises(ValueError):
        prefix_to_epoch(b"\x00\x01")


def test_missing_timestamp_is_epoch_zero() -> None:
    assert to_epoch_seconds(None) == 0


def test_datetime_values() -> None:
    aware = datetime(2016, 1, 1, 2, 0, tzinfo=timezone.utc)
    assert to_epoch_seconds(aware) == EPOCH_2016
    # Naive datetimes are UTC
    assert to_epoch_seconds(datetime(2016, 1, 1, 2, 0)) == EPOCH_2016
    # Other offsets are honoured
    plus_two = timezone(timedelta(hours=2))
    assert to_epoch_seconds(datetime(2016, 1, 1, 4, 0, tzinfo=plus_two)) == EPOCH_2016
    # Sub-second parts are floored
    assert to_epoch_seconds(aware.replace(microsecond=999_999)) == EPOCH_2016
    before_1970 = datetime(1969, 12, 31, 23, 59, 59, 500_000, tzinfo=timezone.utc)
    assert to_epoch_seconds(before_1970) == -1


def test_date_is_midnight_utc() -> None:
    assert to_epoch_seconds(date(2016, 1, 1)) == EPOCH_2016 - 7200


def test_numbers() -> None:
    assert to_epoch_seconds(EPOCH_2016) == EPOCH_2016
    assert to_epoch_seconds(1.9) == 1
    assert to_epoch_seconds(-1.9) == -1
    assert to_epoch_seconds(float("nan")) == 0


@pytest.mark.parametrize(
    "text",
    [
        "2016-01-01T02:00:00Z",
        "2016-01-01T02:00:00.000Z",
        "2016-01-01T03:00:00+01:00",
        "2016-01-01 02:00:00",
        "1451613600",
        "1451613600.75",
    ],
)
def test_strings(text: str) -> None:
    assert to_epoch_seconds(text) == EPOCH_2016


def test_unparseable_values_fall_back_to_zero(
    captured_diagnostics: list[dict],
) -> None:
    assert to_epoch_seconds("") == 0
    assert to_epoch_seconds("yesterday") == 0
    assert to_epoch_seconds(True) == 0
    assert to_epoch_seconds(["2016"]) == 0
    assert any(p["component"] == "timestamp" for p in captured_diagnostics)
