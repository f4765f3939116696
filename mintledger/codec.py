"""Conversions between program values and their database representations."""

from datetime import datetime, timedelta, timezone

from .errors import DbToRuntimeConversionError, RuntimeToDbConversionError

_U64_LIMIT = 1 << 64
_U32_LIMIT = 1 << 32
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1
_KEYSET_ID_LENGTH = 8
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _reinterpret(value: int, size: int, *, signed_out: bool) -> int:
    return int.from_bytes(
        value.to_bytes(size, "big", signed=not signed_out), "big", signed=signed_out
    )


def u64_to_i64(value: int) -> int:
    """Reinterpret an unsigned 64-bit integer as a signed one, bit for bit."""
    if not 0 <= value < _U64_LIMIT:
        raise RuntimeToDbConversionError(f"{value} is not an unsigned 64-bit integer")
    return _reinterpret(value, 8, signed_out=True)


def i64_to_u64(value: int) -> int:
    """Reinterpret a signed 64-bit integer as an unsigned one, bit for bit."""
    if not _I64_MIN <= value <= _I64_MAX:
        raise DbToRuntimeConversionError(f"{value} is not a signed 64-bit integer")
    return _reinterpret(value, 8, signed_out=False)


def u32_to_i32(value: int) -> int:
    """Reinterpret an unsigned 32-bit integer as a signed one, bit for bit."""
    if not 0 <= value < _U32_LIMIT:
        raise RuntimeToDbConversionError(f"{value} is not an unsigned 32-bit integer")
    return _reinterpret(value, 4, signed_out=True)


def i32_to_u32(value: int) -> int:
    """Reinterpret a signed 32-bit integer as an unsigned one, bit for bit."""
    if not _I32_MIN <= value <= _I32_MAX:
        raise DbToRuntimeConversionError(f"{value} is not a signed 32-bit integer")
    return _reinterpret(value, 4, signed_out=False)


def keyset_id_to_i64(keyset_id: bytes) -> int:
    """Store an 8-byte keyset id as a big-endian signed 64-bit integer."""
    raw = bytes(keyset_id)
    if len(raw) != _KEYSET_ID_LENGTH:
        raise RuntimeToDbConversionError(
            f"keyset id must be {_KEYSET_ID_LENGTH} bytes, got {len(raw)}"
        )
    return int.from_bytes(raw, "big", signed=True)


def keyset_id_from_i64(value: int) -> bytes:
    """Recover the 8-byte keyset id from its stored integer."""
    if not _I64_MIN <= value <= _I64_MAX:
        raise DbToRuntimeConversionError(f"{value} is not a signed 64-bit integer")
    return value.to_bytes(_KEYSET_ID_LENGTH, "big", signed=True)


def to_unix_datetime(expiry: int) -> datetime:
    """Turn a unix timestamp in seconds into an aware UTC datetime."""
    if not 0 <= expiry <= _I64_MAX:
        raise RuntimeToDbConversionError(f"{expiry} is not a valid expiry")
    try:
        return _EPOCH + timedelta(seconds=expiry)
    except OverflowError as exc:
        raise RuntimeToDbConversionError(f"{expiry} is out of datetime range") from exc


def from_unix_datetime(moment: datetime) -> int:
    """Turn a datetime into a non-negative unix timestamp in whole seconds.

    Naive datetimes are taken to be in UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = (moment - _EPOCH) // timedelta(seconds=1)
    if not 0 <= seconds < _U64_LIMIT:
        raise DbToRuntimeConversionError(f"{moment.isoformat()} is before the unix epoch")
    return seconds