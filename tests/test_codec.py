from datetime import datetime, timedelta, timezone

import pytest

from mintledger.codec import (
    from_unix_datetime,
    i32_to_u32,
    i64_to_u64,
    keyset_id_from_i64,
    keyset_id_to_i64,
    to_unix_datetime,
    u32_to_i32,
    u64_to_i64,
)
from mintledger.errors import DbToRuntimeConversionError, RuntimeToDbConversionError


@pytest.mark.parametrize("value", [0, 1, 2**63 - 1, 2**63, 2**64 - 1])
def test_u64_round_trip(value):
    assert i64_to_u64(u64_to_i64(value)) == value


def test_u64_max_maps_to_minus_one():
    assert u64_to_i64(2**64 - 1) == -1


def test_small_u64_keeps_value():
    assert u64_to_i64(42) == 42


@pytest.mark.parametrize("value", [-1, 2**64])
def test_u64_out_of_range(value):
    with pytest.raises(RuntimeToDbConversionError):
        u64_to_i64(value)


def test_i64_out_of_range():
    with pytest.raises(DbToRuntimeConversionError):
        i64_to_u64(2**63)


@pytest.mark.parametrize("value", [0, 7, 2**31 - 1, 2**31, 2**32 - 1])
def test_u32_round_trip(value):
    assert i32_to_u32(u32_to_i32(value)) == value


def test_u32_high_values_become_negative():
    assert u32_to_i32(2**31) < 0
    assert u32_to_i32(2**31 - 1) == 2**31 - 1


def test_u32_out_of_range():
    with pytest.raises(RuntimeToDbConversionError):
        u32_to_i32(2**32)
    with pytest.raises(DbToRuntimeConversionError):
        i32_to_u32(2**31)


def test_keyset_id_from_one():
    assert keyset_id_from_i64(0x1) == b"\x00" * 7 + b"\x01"


@pytest.mark.parametrize(
    "keyset_id",
    [b"\x00" * 8, b"\x00\x11\x22\x33\x44\x55\x66\x77", b"\xff" * 8],
)
def test_keyset_id_round_trip(keyset_id):
    assert keyset_id_from_i64(keyset_id_to_i64(keyset_id)) == keyset_id


def test_keyset_id_wrong_length():
    with pytest.raises(RuntimeToDbConversionError):
        keyset_id_to_i64(b"\x00" * 7)


def test_keyset_id_from_out_of_range():
    with pytest.raises(DbToRuntimeConversionError):
        keyset_id_from_i64(2**63)


def test_epoch_datetime():
    assert to_unix_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("expiry", [0, 1, 1_700_000_000, 4_102_444_800])
def test_datetime_round_trip(expiry):
    assert from_unix_datetime(to_unix_datetime(expiry)) == expiry


def test_naive_datetime_is_utc():
    aware = to_unix_datetime(1_700_000_000)
    assert from_unix_datetime(aware.replace(tzinfo=None)) == 1_700_000_000


def test_negative_expiry_rejected():
    with pytest.raises(RuntimeToDbConversionError):
        to_unix_datetime(-1)


def test_huge_expiry_rejected():
    with pytest.raises(RuntimeToDbConversionError):
        to_unix_datetime(2**63 - 1)


def test_datetime_before_epoch_rejected():
    before = to_unix_datetime(0) - timedelta(seconds=1)
    with pytest.raises(DbToRuntimeConversionError):
        from_unix_datetime(before)