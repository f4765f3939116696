import dataclasses

import pytest

from mintledger.models import BlindSignature, Proof

PUBKEY = bytes.fromhex("02194603ffa36356f4a56b7df9371fc3192472351453ec7398b8da8117e7c3e104")
KEYSET_ID = b"\x00" * 7 + b"\x01"


def test_blind_signature_keeps_fields():
    signature = BlindSignature(amount=1, keyset_id=KEYSET_ID, c=PUBKEY)
    assert (signature.amount, signature.keyset_id, signature.c) == (1, KEYSET_ID, PUBKEY)


def test_bytearray_is_normalised_to_bytes():
    signature = BlindSignature(amount=1, keyset_id=bytearray(KEYSET_ID), c=bytearray(PUBKEY))
    assert signature == BlindSignature(amount=1, keyset_id=KEYSET_ID, c=PUBKEY)
    assert isinstance(signature.c, bytes) and signature.c == PUBKEY


@pytest.mark.parametrize("amount", [-1, 2**64])
def test_amount_out_of_range(amount):
    with pytest.raises(ValueError):
        BlindSignature(amount=amount, keyset_id=KEYSET_ID, c=PUBKEY)
    with pytest.raises(ValueError):
        Proof(amount=amount, keyset_id=KEYSET_ID, secret="secret", c=PUBKEY)


def test_bad_public_key_length():
    with pytest.raises(ValueError):
        BlindSignature(amount=1, keyset_id=KEYSET_ID, c=PUBKEY[:-1])


def test_bad_keyset_id_length():
    with pytest.raises(ValueError):
        Proof(amount=1, keyset_id=KEYSET_ID + b"\x00", secret="secret", c=PUBKEY)


def test_proof_is_frozen():
    proof = Proof(amount=2, keyset_id=KEYSET_ID, secret="secret", c=PUBKEY)
    with pytest.raises(dataclasses.FrozenInstanceError):
        proof.amount = 4  # type: ignore[misc]
    assert proof.amount == 2


def test_proof_equality_depends_on_secret():
    first = Proof(amount=2, keyset_id=KEYSET_ID, secret="secret", c=PUBKEY)
    same = Proof(amount=2, keyset_id=KEYSET_ID, secret="secret", c=PUBKEY)
    other = Proof(amount=2, keyset_id=KEYSET_ID, secret="token", c=PUBKEY)
    assert first == same
    assert hash(first) == hash(same)
    assert (first == other) is False