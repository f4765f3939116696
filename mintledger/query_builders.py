"""Builders for multi-row INSERT statements with numbered placeholders."""

from typing import Any, Protocol

from .codec import keyset_id_to_i64, u32_to_i32, u64_to_i64
from .models import BlindSignature, Proof


class Connection(Protocol):
    """A database connection that runs statements with ``$n`` placeholders."""

    async def execute(self, query: str, *args: Any) -> Any: ...


class QueryBuilder:
    """Accumulates SQL text and bound arguments, numbering placeholders."""

    def __init__(self, sql: str) -> None:
        self._parts = [sql]
        self._arguments: list[Any] = []

    def push(self, text: str) -> "QueryBuilder":
        """Append raw SQL text."""
        self._parts.append(str(text))
        return self

    def push_bind(self, value: Any) -> "QueryBuilder":
        """Append a placeholder bound to ``value``."""
        self._arguments.append(value)
        self._parts.append(f"${len(self._arguments)}")
        return self

    def sql(self) -> str:
        """The SQL text built so far."""
        return "".join(self._parts)

    def arguments(self) -> list[Any]:
        """The bound arguments, in placeholder order."""
        return list(self._arguments)


class _RowsInsertBuilder:
    _prefix = ""
    _suffix = ""

    def __init__(self) -> None:
        self.builder = QueryBuilder(self._prefix)
        self._first = True

    def _push_row(self, *items: tuple[bool, Any]) -> None:
        if self._first:
            self._first = False
        else:
            self.builder.push(", ")
        self.builder.push("(")
        for is_bound, item in items:
            if is_bound:
                self.builder.push_bind(item)
            else:
                self.builder.push(item)
        self.builder.push(")")

    async def _run(self, conn: Connection) -> None:
        await conn.execute(self.builder.sql() + self._suffix, *self.builder.arguments())


def _bind(value: Any) -> tuple[bool, Any]:
    return True, value


def _raw(text: str) -> tuple[bool, str]:
    return False, text


class InsertBlindSignaturesQueryBuilder(_RowsInsertBuilder):
    """Inserts blind signatures keyed by the blinded message they sign."""

    _prefix = "INSERT INTO blind_signature (y, amount, keyset_id, c) VALUES "
    _suffix = ";"

    def add_row(self, blind_message: bytes, blind_signature: BlindSignature) -> None:
        """Add one signature for the given blinded message public key."""
        self._push_row(
            _bind(bytes(blind_message)),
            _raw(", "),
            _bind(u64_to_i64(blind_signature.amount)),
            _raw(", "),
            _bind(keyset_id_to_i64(blind_signature.keyset_id)),
            _raw(", "),
            _bind(bytes(blind_signature.c)),
        )

    async def execute(self, conn: Connection) -> None:
        """Run the statement on ``conn``."""
        await self._run(conn)


class InsertKeysetsQueryBuilder(_RowsInsertBuilder):
    """Inserts active keysets, ignoring ones that already exist."""

    _prefix = (
        "INSERT INTO keyset (id, unit, active, max_order, derivation_path_index) VALUES "
    )
    _suffix = " ON CONFLICT DO NOTHING;"

    def add_row(self, keyset_id: bytes, unit: Any, max_order: int, index: int) -> None:
        """Add one active keyset."""
        self._push_row(
            _bind(keyset_id_to_i64(keyset_id)),
            _raw(", "),
            _bind(str(unit)),
            _raw(", TRUE, "),
            _bind(u32_to_i32(max_order)),
            _raw(", "),
            _bind(u32_to_i32(index)),
        )

    async def execute(self, conn: Connection) -> None:
        """Run the statement on ``conn``."""
        await self._run(conn)


class InsertSpentProofsQueryBuilder(_RowsInsertBuilder):
    """Marks proofs as spent.

    New proofs are inserted as SPENT (state 1) and existing UNSPENT ones
    (state 0) are updated; a proof already SPENT makes the statement fail.
    """

    _prefix = "INSERT INTO proof (y, amount, keyset_id, secret, c, state) VALUES "
    _suffix = " ON CONFLICT (y) WHERE state = 0 DO UPDATE SET state = 1;"

    def add_row(self, y: bytes, proof: Proof) -> None:
        """Add one proof, identified by its curve point ``y``."""
        self._push_row(
            _bind(bytes(y)),
            _raw(", "),
            _bind(u64_to_i64(proof.amount)),
            _raw(", "),
            _bind(keyset_id_to_i64(proof.keyset_id)),
            _raw(", "),
            _bind(proof.secret),
            _raw(", "),
            _bind(bytes(proof.c)),
            _raw(", "),
            _raw("1"),
        )

    async def execute(self, conn: Connection) -> None:
        """Run the statement on ``conn``."""
        await self._run(conn)