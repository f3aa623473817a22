"""Ledger address derivation.

address = last 20 bytes of keccak256(X || Y) for an uncompressed key.
Pure and deterministic: used when building a RevisionSignature and when a
verifier recomputes the signer from a recovered key.
"""
from dataclasses import dataclass

from Cryptodome.Hash import keccak

from revproof.core.constants import ADDRESS_SIZE

from .hexcodec import decode_fixed, encode_fixed, require_size
from .public_key import PublicKey


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (pre-standard SHA3 padding, as used by Ethereum)."""
    return keccak.new(digest_bits=256, data=data).digest()


@dataclass(frozen=True, order=True)
class Address:
    """20-byte ledger address. Canonical string: 0x + 40 lowercase hex."""

    raw: bytes

    def __post_init__(self):
        object.__setattr__(self, "raw", require_size(self.raw, ADDRESS_SIZE, "Address"))

    @classmethod
    def parse(cls, s: str) -> "Address":
        return cls(decode_fixed(s, ADDRESS_SIZE, prefixed=True, type_name="Address"))

    def format(self) -> str:
        return encode_fixed(self.raw, prefixed=True)

    def checksum(self) -> str:
        """EIP-55 mixed-case form, for display only."""
        text = self.raw.hex()
        digest = keccak256(text.encode("ascii")).hex()
        return "0x" + "".join(
            c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
            for i, c in enumerate(text)
        )

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Address({self.format()})"


def derive_address(public_key: PublicKey) -> Address:
    """Map a public key to its ledger address."""
    return Address(keccak256(public_key.point_bytes())[-ADDRESS_SIZE:])
