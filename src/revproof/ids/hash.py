"""SHA3-512 content hash. The one digest used for content, chains and proofs.

Canonical string: 128 lowercase hex characters, no 0x prefix.
"""
import hashlib
from dataclasses import dataclass

from revproof.core.constants import HASH_SIZE

from .hexcodec import decode_fixed, encode_fixed, require_size


@dataclass(frozen=True, order=True)
class Hash:
    """64-byte SHA3-512 digest. Equality and ordering by raw bytes."""

    raw: bytes

    def __post_init__(self):
        object.__setattr__(self, "raw", require_size(self.raw, HASH_SIZE, "Hash"))

    @classmethod
    def digest(cls, data: bytes | str) -> "Hash":
        """Hash raw bytes (str is UTF-8 encoded first)."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(hashlib.sha3_512(data).digest())

    @classmethod
    def parse(cls, s: str) -> "Hash":
        return cls(decode_fixed(s, HASH_SIZE, prefixed=False, type_name="Hash"))

    def format(self) -> str:
        return encode_fixed(self.raw, prefixed=False)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Hash({self.format()[:16]}..)"


def combine(left: Hash, right: Hash) -> Hash:
    """H(left ++ right) over raw bytes. No reordering of the pair."""
    return Hash.digest(left.raw + right.raw)
