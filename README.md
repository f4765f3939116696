# mintledger

`mintledger` is the storage layer of an ecash mint backed by PostgreSQL. It
holds the SQL that records keysets, mint and melt quotes, spent proofs,
issued blind signatures and on-chain payment events. It also converts values
between the mint's own types and the column types the database stores.

It has no runtime dependencies and brings no database driver of its own.

## Installation

```
pip install mintledger
```

To run the test suite:

```
pip install "mintledger[test]"
pytest
```

## The connection you pass in

The query functions are coroutines. Each takes, as its first argument, an
asynchronous connection object that you have opened. The object must provide:

- `await conn.execute(query, *args)`: run a statement.
- `await conn.fetch(query, *args)`: return a sequence of rows. Each row is a
  mapping from column name to value.
- `await conn.fetchrow(query, *args)`: return one such row, or `None`.

Queries use numbered `$1`, `$2`, … placeholders. Arguments for `= ANY($1)` are
passed as Python lists. `expiry` columns are written as aware UTC `datetime`
values and are read back from `datetime` values.

`begin_db_tx(pool)` and `start_db_tx_from_conn(conn)` take an object whose
`await obj.begin()` returns a transaction with the same `execute` method.

## Modules

- `mintledger.errors`: the exception hierarchy. `DbNodeError` is the base
  class. Its subclasses are `LockError`, `HashOnCurveError`,
  `InvalidUnitError` (which keeps the offending text in `.unit`),
  `DbToRuntimeConversionError` and `RuntimeToDbConversionError`.
- `mintledger.codec`: conversions between runtime values and database
  columns.
  - `u64_to_i64` / `i64_to_u64` and `u32_to_i32` / `i32_to_u32` reinterpret
    integers between unsigned and signed, bit for bit. A value out of range
    raises `RuntimeToDbConversionError` on the way in and
    `DbToRuntimeConversionError` on the way out.
  - `keyset_id_to_i64` / `keyset_id_from_i64` pack an 8-byte keyset id into a
    big-endian signed `BIGINT` and unpack it again.
  - `to_unix_datetime` turns a non-negative unix timestamp into an aware UTC
    `datetime`. `from_unix_datetime` turns a `datetime` back into whole
    seconds. A naive `datetime` is taken to be UTC, and a time before the
    epoch is rejected.
- `mintledger.models`: the frozen `BlindSignature(amount, keyset_id, c)` and
  `Proof(amount, keyset_id, secret, c)` records. Amounts must fit in 64
  unsigned bits, `keyset_id` must be 8 bytes and `c` 33 bytes. If not,
  `ValueError` is raised.
- `mintledger.query_builders`: `QueryBuilder` plus three batch insert
  builders. Each batch builder writes many rows in one statement.
  - `InsertBlindSignaturesQueryBuilder.add_row(blind_message, blind_signature)`
  - `InsertKeysetsQueryBuilder.add_row(keyset_id, unit, max_order, index)`
    inserts keysets as active and ends with `ON CONFLICT DO NOTHING`.
  - `InsertSpentProofsQueryBuilder.add_row(y, proof)` inserts proofs with
    state `1` (spent). It ends with
    `ON CONFLICT (y) WHERE state = 0 DO UPDATE SET state = 1`, so a proof
    that is already unspent in the table is moved to spent, and the
    database rejects the statement when a proof is already spent.
- `mintledger.queries`:
  - `is_any_blind_message_already_used(conn, blind_secrets)` reports whether
    any of the given blinded messages already has a signature.
  - `is_any_proof_already_used(conn, secret_derived_pubkeys)` reports whether
    any of the given proofs is stored as spent.
  - `sum_amount_of_unit_in_circulation(conn, unit)` sums the signed amount
    across all keysets of a unit. It raises `DbToRuntimeConversionError`
    when nothing has been signed.
  - `begin_db_tx(pool)` and `start_db_tx_from_conn(conn)` open a transaction
    and set it to `SERIALIZABLE` before anything else runs.
- `mintledger.keyset`:
  - `KeysetInfo(unit, active, max_order, derivation_path_index)`
  - `get_keysets(conn)` returns `(id, unit, active)` tuples.
  - `get_keyset(conn, keyset_id, parse_unit)`
  - `get_active_keyset_for_unit(conn, unit)`
  - `get_active_keysets(conn, parse_unit)`
  - `deactivate_keysets(conn, keyset_ids)` takes the stored integer ids.

  `parse_unit` turns the stored unit text into your unit type. If it raises
  `ValueError`, `KeyError` or `TypeError`, the error becomes
  `InvalidUnitError`.
- `mintledger.mint_quote`: the `MintQuoteState` states are `UNPAID`, `PAID`
  and `ISSUED`. Functions:
  - `insert_new` stores a quote as `UNPAID`.
  - `build_response_from_db` returns a `MintQuoteResponse`.
  - `get_amount_and_state`
  - `set_state`
  - `get_quote_id_by_invoice_id` returns `None` when no quote matches.
  - `get_amount_from_invoice_id`
- `mintledger.melt_quote`: the `MeltQuoteState` states are `UNPAID`,
  `PENDING` and `PAID`. Functions:
  - `insert_new` stores a quote as `UNPAID`.
  - `build_response_from_db` returns a `MeltQuoteResponse`.
  - `get_data(conn, quote_id, parse_unit)` returns
    `(unit, amount, fee, state, expiry)`.
  - `get_state`
  - `set_state`
- `mintledger.payment_event`:
  - `U256(low, high)`, with `U256.from_int` and the `.value` property.
  - `PaymentEvent(block_id, tx_hash, event_idx, asset, invoice_id, amount)`
  - `insert_new_payment_event(conn, payment_event)`
  - `get_current_paid(conn, invoice_id)` returns the
    `(amount_low, amount_high)` strings paid against an invoice.

A function that expects exactly one row raises `DbNodeError` when the query
returns none.

## Building SQL with `QueryBuilder`

`QueryBuilder` builds a statement with numbered placeholders. Text goes in
with `push`, and each value with `push_bind`:

```python
from mintledger.query_builders import QueryBuilder

builder = QueryBuilder("SELECT id FROM keyset WHERE unit = ")
builder.push_bind("strk")
builder.push(" AND active = TRUE")

print(builder.sql())        # SELECT id FROM keyset WHERE unit = $1 AND active = TRUE
print(builder.arguments())  # ['strk']
```

The batch builders keep their `QueryBuilder` in the `builder` attribute.
Call `add_row` once for each record, then `await batch.execute(conn)` to
send them all as one `INSERT`:

```python
from mintledger.models import BlindSignature
from mintledger.query_builders import InsertBlindSignaturesQueryBuilder

point = bytes.fromhex(
    "02194603ffa36356f4a56b7df9371fc3192472351453ec7398b8da8117e7c3e104"
)
signature = BlindSignature(amount=1, keyset_id=(1).to_bytes(8, "big"), c=point)

batch = InsertBlindSignaturesQueryBuilder()
batch.add_row(point, signature)
batch.add_row(point, signature)
print(batch.builder.sql())
# INSERT INTO blind_signature (y, amount, keyset_id, c) VALUES ($1, $2, $3, $4), ($5, $6, $7, $8)
```

## What the package does not do

`mintledger` only issues statements against tables that already exist. It
does not:

- create the schema or run migrations;
- open connections or manage a pool;
- sign, verify or hash anything on a curve.

Those are left to the program that uses it.