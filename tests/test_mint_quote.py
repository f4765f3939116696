from uuid import UUID

import pytest

from mintledger.codec import from_unix_datetime, to_unix_datetime, u64_to_i64
from mintledger.errors import DbNodeError, DbToRuntimeConversionError
from mintledger.mint_quote import (
    MintQuoteResponse,
    MintQuoteState,
    build_response_from_db,
    get_amount_and_state,
    get_amount_from_invoice_id,
    get_quote_id_by_invoice_id,
    insert_new,
    set_state,
)

QUOTE_ID = UUID("87654321-4321-8765-4321-876543218765")
INVOICE_ID = bytes(range(32, 64))
EXPIRY = 1_800_000_000


class FakeConnection:
    def __init__(self, rows=()):
        self.rows = list(rows)
        self.calls = []

    async def execute(self, query, *args):
        self.calls.append((query, args))

    async def fetch(self, query, *args):
        self.calls.append((query, args))
        return list(self.rows)

    async def fetchrow(self, query, *args):
        self.calls.append((query, args))
        return self.rows[0] if self.rows else None


@pytest.mark.asyncio
async def test_insert_new_binds_values():
    conn = FakeConnection()
    await insert_new(conn, QUOTE_ID, INVOICE_ID, "strk", 7, "req", EXPIRY)
    query, args = conn.calls[0]
    assert "INSERT INTO mint_quote" in query
    assert args[:5] == (QUOTE_ID, INVOICE_ID, "strk", 7, "req")
    assert from_unix_datetime(args[5]) == EXPIRY


@pytest.mark.asyncio
async def test_insert_new_rejects_bad_invoice_id():
    conn = FakeConnection()
    with pytest.raises(ValueError):
        await insert_new(conn, QUOTE_ID, INVOICE_ID[:31], "strk", 7, "req", EXPIRY)


@pytest.mark.asyncio
async def test_build_response_from_db():
    conn = FakeConnection(
        [{"request": "req", "state": "ISSUED", "expiry": to_unix_datetime(EXPIRY)}]
    )
    response = await build_response_from_db(conn, QUOTE_ID)
    assert response == MintQuoteResponse(
        quote=QUOTE_ID, request="req", state=MintQuoteState.ISSUED, expiry=EXPIRY
    )


@pytest.mark.asyncio
async def test_get_amount_and_state():
    big = (1 << 64) - 2
    conn = FakeConnection([{"amount": u64_to_i64(big), "state": "PAID"}])
    assert await get_amount_and_state(conn, QUOTE_ID) == (big, MintQuoteState.PAID)


@pytest.mark.asyncio
async def test_get_amount_and_state_unknown_state():
    conn = FakeConnection([{"amount": 1, "state": "MELTED"}])
    with pytest.raises(DbToRuntimeConversionError):
        await get_amount_and_state(conn, QUOTE_ID)


@pytest.mark.asyncio
async def test_set_state():
    conn = FakeConnection()
    await set_state(conn, QUOTE_ID, MintQuoteState.ISSUED)
    assert conn.calls[0][1] == (QUOTE_ID, "ISSUED")


@pytest.mark.asyncio
async def test_get_quote_id_by_invoice_id_found_and_missing():
    conn = FakeConnection([{"id": QUOTE_ID}])
    assert await get_quote_id_by_invoice_id(conn, INVOICE_ID) == QUOTE_ID
    assert conn.calls[0][1] == (INVOICE_ID,)
    assert await get_quote_id_by_invoice_id(FakeConnection(), INVOICE_ID) is None


@pytest.mark.asyncio
async def test_get_amount_from_invoice_id():
    conn = FakeConnection([{"amount": u64_to_i64(1 << 63)}])
    assert await get_amount_from_invoice_id(conn, INVOICE_ID) == 1 << 63
    with pytest.raises(DbNodeError):
        await get_amount_from_invoice_id(FakeConnection(), INVOICE_ID)