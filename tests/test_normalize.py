from datetime import datetime, timezone

from secret_mcp.chain.normalize import (
    iso_utc,
    normalize_bytes,
    normalize_timestamp,
    to_amount,
    to_float,
    to_int,
)


def test_timestamp_forms():
    assert normalize_timestamp("2024-01-01T00:00:00Z") == "2024-01-01T00:00:00Z"
    assert normalize_timestamp({"seconds": 0, "nanos": 5}) == "1970-01-01T00:00:00.000Z"
    assert normalize_timestamp({"seconds": "1700000000"}) == "2023-11-14T22:13:20.000Z"
    moment = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)
    assert normalize_timestamp(moment) == "2024-05-06T07:08:09.123Z"
    assert normalize_timestamp(None) == ""
    assert normalize_timestamp({"nanos": 1}) == ""


def test_naive_datetime_treated_as_utc():
    assert iso_utc(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"


def test_byte_forms():
    assert normalize_bytes("ABCD") == "ABCD"
    assert normalize_bytes(b"\x0a\xff") == "0aff"
    assert normalize_bytes([1, 2, 255]) == "0102ff"
    assert normalize_bytes(None) == ""
    assert normalize_bytes([300]) == ""


def test_numeric_coercion():
    assert to_int("42") == 42
    assert to_int(None) == 0
    assert to_int("x", default=9) == 9
    assert to_float("0.13") == 0.13
    assert to_float(b"0.5") == 0.5
    assert to_float(None) is None
    assert to_amount(None) == "0"
    assert to_amount("") == "0"
    assert to_amount(1000) == "1000"
