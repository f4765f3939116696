"""Access to the keyset table."""

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Mapping, TypeVar

from .codec import i32_to_u32, keyset_id_from_i64, keyset_id_to_i64
from .errors import DbToRuntimeConversionError, InvalidUnitError
from .queries import _Connection, _fetch_one

U = TypeVar("U")

_MAX_ORDER_LIMIT = 256


@dataclass(frozen=True)
class KeysetInfo(Generic[U]):
    """Stored properties of one keyset."""

    unit: U
    active: bool
    max_order: int
    derivation_path_index: int


def _parse_unit(parse_unit: Callable[[str], U], raw: str) -> U:
    try:
        return parse_unit(raw)
    except (ValueError, KeyError, TypeError) as exc:
        raise InvalidUnitError(raw) from exc


def _info_from_record(record: Mapping, parse_unit: Callable[[str], U]) -> KeysetInfo[U]:
    max_order = int(record["max_order"])
    if not 0 <= max_order < _MAX_ORDER_LIMIT:
        raise DbToRuntimeConversionError(f"max_order {max_order} does not fit in a byte")
    return KeysetInfo(
        unit=_parse_unit(parse_unit, record["unit"]),
        active=bool(record["active"]),
        max_order=max_order,
        derivation_path_index=i32_to_u32(int(record["derivation_path_index"])),
    )


async def get_keysets(conn: _Connection) -> list[tuple[bytes, str, bool]]:
    """Every keyset as ``(id, unit, active)``."""
    records = await conn.fetch("SELECT id, unit, active FROM keyset")
    return [
        (keyset_id_from_i64(int(r["id"])), r["unit"], bool(r["active"]))
        for r in records
    ]


async def get_keyset(
    conn: _Connection, keyset_id: bytes, parse_unit: Callable[[str], U]
) -> KeysetInfo[U]:
    """Properties of one keyset; ``parse_unit`` turns the stored unit text into a unit."""
    record = await _fetch_one(
        conn,
        """SELECT unit, active, max_order, derivation_path_index
        FROM keyset
        WHERE id = $1""",
        keyset_id_to_i64(keyset_id),
    )
    return _info_from_record(record, parse_unit)


async def get_active_keyset_for_unit(conn: _Connection, unit: str) -> bytes:
    """Id of the active keyset of ``unit``."""
    record = await _fetch_one(
        conn,
        """SELECT id
        FROM keyset
        WHERE unit = $1 AND active = true""",
        str(unit),
    )
    return keyset_id_from_i64(int(record["id"]))


async def get_active_keysets(
    conn: _Connection, parse_unit: Callable[[str], U]
) -> list[tuple[bytes, KeysetInfo[U]]]:
    """Every active keyset with its properties."""
    records = await conn.fetch(
        """SELECT id, unit, active, max_order, derivation_path_index
        FROM keyset
        WHERE active = TRUE"""
    )
    return [
        (keyset_id_from_i64(int(r["id"])), _info_from_record(r, parse_unit))
        for r in records
    ]


async def deactivate_keysets(conn: _Connection, keyset_ids: Iterable[int]) -> None:
    """Mark the keysets with these stored ids inactive."""
    await conn.execute(
        "UPDATE keyset SET active = false WHERE id = ANY($1)", list(keyset_ids)
    )