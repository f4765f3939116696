"""Access to the payment_event table."""

from dataclasses import dataclass

from .codec import u64_to_i64
from .queries import _Connection

_U128_LIMIT = 1 << 128
_FELT_PRIME = 2**251 + 17 * 2**192 + 1
_INVOICE_ID_LENGTH = 32


def _check_felt(name: str, value: int) -> None:
    if not 0 <= value < _FELT_PRIME:
        raise ValueError(f"{name} {value} is not a field element")


@dataclass(frozen=True)
class U256:
    """A 256-bit unsigned integer split into two 128-bit halves."""

    low: int
    high: int

    def __post_init__(self) -> None:
        for name in ("low", "high"):
            part = getattr(self, name)
            if not 0 <= part < _U128_LIMIT:
                raise ValueError(f"{name} {part} is not an unsigned 128-bit integer")

    @classmethod
    def from_int(cls, value: int) -> "U256":
        """Split ``value`` into halves."""
        if not 0 <= value < _U128_LIMIT * _U128_LIMIT:
            raise ValueError(f"{value} is not an unsigned 256-bit integer")
        return cls(low=value % _U128_LIMIT, high=value // _U128_LIMIT)

    @property
    def value(self) -> int:
        """The full integer."""
        return self.high * _U128_LIMIT + self.low


@dataclass(frozen=True)
class PaymentEvent:
    """An on-chain payment observed by the indexer."""

    block_id: str
    tx_hash: int
    event_idx: int
    asset: int
    invoice_id: int
    amount: U256

    def __post_init__(self) -> None:
        _check_felt("tx_hash", self.tx_hash)
        _check_felt("asset", self.asset)
        _check_felt("invoice_id", self.invoice_id)


async def insert_new_payment_event(conn: _Connection, payment_event: PaymentEvent) -> None:
    """Store a payment event."""
    await conn.execute(
        "INSERT INTO payment_event "
        "(block_id, tx_hash, event_index, asset, invoice_id, amount_low, amount_high) "
        "VALUES ($1, $2, $3, $4, $5, $6, $7)",
        payment_event.block_id,
        str(payment_event.tx_hash),
        u64_to_i64(payment_event.event_idx),
        str(payment_event.asset),
        payment_event.invoice_id.to_bytes(_INVOICE_ID_LENGTH, "big"),
        str(payment_event.amount.low),
        str(payment_event.amount.high),
    )


async def get_current_paid(conn: _Connection, invoice_id: bytes) -> list[tuple[str, str]]:
    """Every ``(amount_low, amount_high)`` paid so far to ``invoice_id``."""
    raw = bytes(invoice_id)
    if len(raw) != _INVOICE_ID_LENGTH:
        raise ValueError(f"invoice id must be {_INVOICE_ID_LENGTH} bytes, got {len(raw)}")
    records = await conn.fetch(
        """SELECT  amount_low, amount_high
        FROM payment_event
        WHERE invoice_id = $1""",
        raw,
    )
    return [(r["amount_low"], r["amount_high"]) for r in records]