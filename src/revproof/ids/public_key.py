"""Uncompressed secp256k1 public key.

Canonical string: 0x + 130 lowercase hex characters (0x04 || X || Y).
Parsing validates that the point lies on the curve.
"""
from dataclasses import dataclass

from ecdsa import SECP256k1, VerifyingKey
from ecdsa.errors import MalformedPointError

from revproof.core.constants import PUBLIC_KEY_SIZE, UNCOMPRESSED_POINT_TAG
from revproof.core.errors import InvalidCurvePoint

from .hexcodec import decode_fixed, encode_fixed, require_size


def _load_point(raw: bytes) -> VerifyingKey:
    # ecdsa also accepts hybrid (0x06/0x07) encodings of the same length
    if raw[0] != UNCOMPRESSED_POINT_TAG:
        raise InvalidCurvePoint("PublicKey", raw.hex(), f"format byte 0x{raw[0]:02x}, expected 0x04")
    try:
        return VerifyingKey.from_string(raw, curve=SECP256k1)
    except MalformedPointError as e:
        raise InvalidCurvePoint("PublicKey", raw.hex(), str(e)) from e


@dataclass(frozen=True)
class PublicKey:
    """65-byte uncompressed secp256k1 point."""

    raw: bytes

    def __post_init__(self):
        raw = require_size(self.raw, PUBLIC_KEY_SIZE, "PublicKey")
        _load_point(raw)
        object.__setattr__(self, "raw", raw)

    @classmethod
    def parse(cls, s: str) -> "PublicKey":
        return cls(decode_fixed(s, PUBLIC_KEY_SIZE, prefixed=True, type_name="PublicKey"))

    @classmethod
    def from_verifying_key(cls, key: VerifyingKey) -> "PublicKey":
        return cls(key.to_string("uncompressed"))

    def verifying_key(self) -> VerifyingKey:
        return _load_point(self.raw)

    def point_bytes(self) -> bytes:
        """X || Y without the format byte."""
        return self.raw[1:]

    def format(self) -> str:
        return encode_fixed(self.raw, prefixed=True)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"PublicKey({self.format()[:18]}..)"
