"""Access to the mint_quote table."""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from .codec import from_unix_datetime, i64_to_u64, to_unix_datetime, u64_to_i64
from .errors import DbToRuntimeConversionError
from .queries import _Connection, _fetch_one

_INVOICE_ID_LENGTH = 32


class MintQuoteState(str, Enum):
    """Progress of a mint quote."""

    UNPAID = "UNPAID"
    PAID = "PAID"
    ISSUED = "ISSUED"


@dataclass(frozen=True)
class MintQuoteResponse:
    """A mint quote as returned to clients."""

    quote: UUID
    request: str
    state: MintQuoteState
    expiry: int


def _check_invoice_id(value: bytes) -> bytes:
    raw = bytes(value)
    if len(raw) != _INVOICE_ID_LENGTH:
        raise ValueError(f"invoice id must be {_INVOICE_ID_LENGTH} bytes, got {len(raw)}")
    return raw


def _parse_state(raw: Any) -> MintQuoteState:
    try:
        return MintQuoteState(raw)
    except ValueError as exc:
        raise DbToRuntimeConversionError(f"unknown mint quote state {raw!r}") from exc


async def insert_new(
    conn: _Connection,
    quote_id: UUID,
    invoice_id: bytes,
    unit: Any,
    amount: int,
    request: str,
    expiry: int,
) -> None:
    """Store a new UNPAID mint quote."""
    invoice_id = _check_invoice_id(invoice_id)
    expires_at = to_unix_datetime(expiry)
    await conn.execute(
        "INSERT INTO mint_quote (id, invoice_id, unit, amount, request, expiry, state) "
        "VALUES ($1, $2, $3, $4, $5, $6, 'UNPAID')",
        quote_id,
        invoice_id,
        str(unit),
        u64_to_i64(amount),
        request,
        expires_at,
    )


async def build_response_from_db(conn: _Connection, quote_id: UUID) -> MintQuoteResponse:
    """Load a mint quote as a client response."""
    record = await _fetch_one(
        conn,
        "SELECT request, state, expiry FROM mint_quote where id = $1",
        quote_id,
    )
    return MintQuoteResponse(
        quote=quote_id,
        request=record["request"],
        state=_parse_state(record["state"]),
        expiry=from_unix_datetime(record["expiry"]),
    )


async def get_amount_and_state(
    conn: _Connection, quote_id: UUID
) -> tuple[int, MintQuoteState]:
    """Amount and state of a mint quote."""
    record = await _fetch_one(
        conn, "SELECT amount, state FROM mint_quote where id = $1", quote_id
    )
    return i64_to_u64(int(record["amount"])), _parse_state(record["state"])


async def set_state(conn: _Connection, quote_id: UUID, state: MintQuoteState) -> None:
    """Change the state of a mint quote."""
    await conn.execute(
        """
            UPDATE mint_quote
            SET state = $2
            WHERE id = $1
        """,
        quote_id,
        MintQuoteState(state).value,
    )


async def get_quote_id_by_invoice_id(conn: _Connection, invoice_id: bytes) -> UUID | None:
    """Id of the quote paid through ``invoice_id``, if there is one."""
    record = await conn.fetchrow(
        "SELECT id from mint_quote WHERE invoice_id = $1 LIMIT 1",
        _check_invoice_id(invoice_id),
    )
    return None if record is None else record["id"]


async def get_amount_from_invoice_id(conn: _Connection, invoice_id: bytes) -> int:
    """Amount of the quote paid through ``invoice_id``."""
    record = await _fetch_one(
        conn,
        "SELECT amount FROM mint_quote WHERE invoice_id = $1 LIMIT 1",
        _check_invoice_id(invoice_id),
    )
    return i64_to_u64(int(record["amount"]))