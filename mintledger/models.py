"""Records written to the ledger tables."""

from dataclasses import dataclass

_PUBLIC_KEY_LENGTH = 33
_KEYSET_ID_LENGTH = 8
_U64_LIMIT = 1 << 64


def _check_amount(amount: int) -> None:
    if not 0 <= amount < _U64_LIMIT:
        raise ValueError(f"amount {amount} is not an unsigned 64-bit integer")


def _check_bytes(instance: object, name: str, length: int) -> None:
    value = bytes(getattr(instance, name))
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    object.__setattr__(instance, name, value)


@dataclass(frozen=True)
class BlindSignature:
    """A signature issued by the mint on a blinded message.

    ``c`` is the compressed public key of the signature.
    """

    amount: int
    keyset_id: bytes
    c: bytes

    def __post_init__(self) -> None:
        _check_amount(self.amount)
        _check_bytes(self, "keyset_id", _KEYSET_ID_LENGTH)
        _check_bytes(self, "c", _PUBLIC_KEY_LENGTH)


@dataclass(frozen=True)
class Proof:
    """An unblinded token presented to the mint to be spent."""

    amount: int
    keyset_id: bytes
    secret: str
    c: bytes

    def __post_init__(self) -> None:
        _check_amount(self.amount)
        _check_bytes(self, "keyset_id", _KEYSET_ID_LENGTH)
        _check_bytes(self, "c", _PUBLIC_KEY_LENGTH)