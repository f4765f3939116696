"""Access to the melt_quote table."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar
from uuid import UUID

from .codec import from_unix_datetime, i64_to_u64, to_unix_datetime, u64_to_i64
from .errors import DbToRuntimeConversionError
from .queries import _Connection, _fetch_one

U = TypeVar("U")

_HASH_LENGTH = 32


class MeltQuoteState(str, Enum):
    """Progress of a melt quote."""

    UNPAID = "UNPAID"
    PENDING = "PENDING"
    PAID = "PAID"


@dataclass(frozen=True)
class MeltQuoteResponse:
    """A melt quote as returned to clients."""

    quote: UUID
    amount: int
    fee: int
    state: MeltQuoteState
    expiry: int


def _check_hash(value: bytes) -> bytes:
    raw = bytes(value)
    if len(raw) != _HASH_LENGTH:
        raise ValueError(f"quote hash must be {_HASH_LENGTH} bytes, got {len(raw)}")
    return raw


def _parse_state(raw: Any) -> MeltQuoteState:
    try:
        return MeltQuoteState(raw)
    except ValueError as exc:
        raise DbToRuntimeConversionError(f"unknown melt quote state {raw!r}") from exc


async def insert_new(
    conn: _Connection,
    quote_id: UUID,
    quote_hash: bytes,
    unit: Any,
    amount: int,
    fee: int,
    request: str,
    expiry: int,
) -> None:
    """Store a new UNPAID melt quote."""
    quote_hash = _check_hash(quote_hash)
    expires_at = to_unix_datetime(expiry)
    await conn.execute(
        "INSERT INTO melt_quote (id, invoice_id, unit, amount, fee, request, expiry, state) "
        "VALUES ($1, $2, $3, $4, $5, $6, $7, 'UNPAID')",
        quote_id,
        quote_hash,
        str(unit),
        u64_to_i64(amount),
        u64_to_i64(fee),
        request,
        expires_at,
    )


async def build_response_from_db(conn: _Connection, quote_id: UUID) -> MeltQuoteResponse:
    """Load a melt quote as a client response."""
    record = await _fetch_one(
        conn,
        "SELECT amount, fee, state, expiry FROM melt_quote where id = $1",
        quote_id,
    )
    return MeltQuoteResponse(
        quote=quote_id,
        amount=i64_to_u64(int(record["amount"])),
        fee=i64_to_u64(int(record["fee"])),
        state=_parse_state(record["state"]),
        expiry=from_unix_datetime(record["expiry"]),
    )


async def get_data(
    conn: _Connection, quote_id: UUID, parse_unit: Callable[[str], U]
) -> tuple[U, int, int, MeltQuoteState, int]:
    """Load ``(unit, amount, fee, state, expiry)`` of a melt quote."""
    record = await _fetch_one(
        conn,
        "SELECT unit, amount, fee, state, expiry FROM melt_quote where id = $1",
        quote_id,
    )
    try:
        unit = parse_unit(record["unit"])
    except (ValueError, KeyError, TypeError) as exc:
        raise DbToRuntimeConversionError() from exc
    return (
        unit,
        i64_to_u64(int(record["amount"])),
        i64_to_u64(int(record["fee"])),
        _parse_state(record["state"]),
        from_unix_datetime(record["expiry"]),
    )


async def get_state(conn: _Connection, quote_id: UUID) -> MeltQuoteState:
    """Current state of a melt quote."""
    record = await _fetch_one(
        conn, "SELECT state FROM melt_quote where id = $1", quote_id
    )
    return _parse_state(record["state"])


async def set_state(conn: _Connection, quote_id: UUID, state: MeltQuoteState) -> None:
    """Change the state of a melt quote."""
    await conn.execute(
        """
            UPDATE melt_quote
            SET state = $2
            WHERE id = $1
        """,
        quote_id,
        MeltQuoteState(state).value,
    )