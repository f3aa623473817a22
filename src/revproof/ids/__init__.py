"""Canonical identifier codec.

Every identifier has exactly one accepted string form; anything else is
rejected with a specific ParseError subclass, never normalized.

    Hash       128 lowercase hex, no prefix      (SHA3-512)
    TxHash     0x + 64 lowercase hex
    PublicKey  0x + 130 lowercase hex            (uncompressed secp256k1)
    Signature  0x + 130 lowercase hex            (r || s || recovery_id + 27)
    Address    0x + 40 lowercase hex             (keccak256(pubkey)[-20:])
"""
from .address import Address, derive_address, keccak256
from .hash import Hash, combine
from .public_key import PublicKey
from .signature import Signature, sign_digest
from .tx_hash import TxHash

__all__ = [
    "Address",
    "Hash",
    "PublicKey",
    "Signature",
    "TxHash",
    "combine",
    "derive_address",
    "keccak256",
    "sign_digest",
]
