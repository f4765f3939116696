"""Ledger-wide queries and serializable transaction helpers."""

from typing import Any, Iterable, Mapping, Protocol, Sequence

from .codec import i64_to_u64
from .errors import DbNodeError, DbToRuntimeConversionError

_SERIALIZABLE = "SET TRANSACTION ISOLATION LEVEL SERIALIZABLE;"

_BLIND_MESSAGE_USED = """SELECT EXISTS (
            SELECT * FROM blind_signature WHERE y = ANY($1)
        ) AS "exists";"""

_PROOF_USED = """SELECT EXISTS (
            SELECT * FROM proof WHERE y = ANY($1) AND state = 1
        ) AS "exists";"""

_SUM_IN_CIRCULATION = """
            SELECT SUM(amount) AS "sum" FROM blind_signature
            INNER JOIN keyset ON blind_signature.keyset_id = keyset.id
            WHERE keyset.unit = $1;
        """


class _Connection(Protocol):
    async def execute(self, query: str, *args: Any) -> Any: ...

    async def fetch(self, query: str, *args: Any) -> Sequence[Mapping[str, Any]]: ...

    async def fetchrow(self, query: str, *args: Any) -> Mapping[str, Any] | None: ...


async def _fetch_one(conn: _Connection, query: str, *args: Any) -> Mapping[str, Any]:
    """Fetch exactly one row, raising when the query returns none."""
    row = await conn.fetchrow(query, *args)
    if row is None:
        raise DbNodeError("no rows returned by a query that expected one")
    return row


async def is_any_blind_message_already_used(
    conn: _Connection, blind_secrets: Iterable[bytes]
) -> bool:
    """Whether any of these blinded messages has already been signed."""
    ys = [bytes(pk) for pk in blind_secrets]
    row = await _fetch_one(conn, _BLIND_MESSAGE_USED, ys)
    return bool(row["exists"])


async def is_any_proof_already_used(
    conn: _Connection, secret_derived_pubkeys: Iterable[bytes]
) -> bool:
    """Whether any of these proofs is already stored as SPENT."""
    ys = [bytes(pk) for pk in secret_derived_pubkeys]
    row = await _fetch_one(conn, _PROOF_USED, ys)
    return bool(row["exists"])


async def sum_amount_of_unit_in_circulation(conn: _Connection, unit: Any) -> int:
    """Total amount signed so far across all keysets of ``unit``."""
    row = await _fetch_one(conn, _SUM_IN_CIRCULATION, str(unit))
    total = row["sum"]
    if total is None:
        raise DbToRuntimeConversionError("no amount in circulation for this unit")
    return i64_to_u64(int(total))


async def _set_serializable(tx: _Connection) -> None:
    # Concurrency between swaps is left to the database: conflicting
    # serializable transactions are reordered or one of them fails.
    await tx.execute(_SERIALIZABLE)


async def begin_db_tx(pool: Any) -> Any:
    """Begin a serializable transaction on a pooled connection."""
    tx = await pool.begin()
    await _set_serializable(tx)
    return tx


async def start_db_tx_from_conn(conn: Any) -> Any:
    """Begin a serializable transaction on an existing connection."""
    tx = await conn.begin()
    await _set_serializable(tx)
    return tx