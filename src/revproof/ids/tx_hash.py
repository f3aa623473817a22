"""Ledger transaction hash.

Canonical string: 0x + 64 lowercase hex characters. Unlike Hash, the
prefix is required.
"""
from dataclasses import dataclass

from revproof.core.constants import HEX_PREFIX, TX_HASH_SIZE

from .hexcodec import decode_fixed, encode_fixed, require_size


@dataclass(frozen=True, order=True)
class TxHash:
    """32-byte transaction identifier."""

    raw: bytes

    def __post_init__(self):
        object.__setattr__(self, "raw", require_size(self.raw, TX_HASH_SIZE, "TxHash"))

    @classmethod
    def parse(cls, s: str) -> "TxHash":
        """Strict parse. A missing prefix is rejected with MissingPrefix."""
        return cls(decode_fixed(s, TX_HASH_SIZE, prefixed=True, type_name="TxHash"))

    @classmethod
    def parse_lenient(cls, s: str) -> "TxHash":
        """Parse, prepending 0x when absent.

        For hand-pasted input from block explorers only. Serialized data
        always goes through parse().
        """
        if isinstance(s, str) and not s.lower().startswith(HEX_PREFIX):
            s = HEX_PREFIX + s
        return cls.parse(s)

    def format(self) -> str:
        return encode_fixed(self.raw, prefixed=True)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"TxHash({self.format()})"
