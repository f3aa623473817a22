"""Fixed-size hex encoding shared by every identifier kind.

decode_fixed runs the canonical checks in order and stops at the first
failure: case, prefix, length, hex digits. Nothing is normalized; input
that is not already canonical is rejected.
"""
from revproof.core.constants import HEX_DIGITS, HEX_PREFIX
from revproof.core.errors import (
    InvalidHex,
    MissingPrefix,
    NotLowercase,
    UnexpectedPrefix,
    WrongLength,
)


def encode_fixed(raw: bytes, prefixed: bool) -> str:
    """Encode bytes as lowercase hex, optionally with the 0x prefix."""
    text = raw.hex()
    return HEX_PREFIX + text if prefixed else text


def decode_fixed(s: str, size: int, prefixed: bool, type_name: str) -> bytes:
    """Decode a canonical hex string into exactly `size` bytes.

    Args:
        s: Input string
        size: Expected byte length
        prefixed: True if the canonical form carries 0x, False if it must not
        type_name: Identifier kind, used in error messages

    Returns:
        Decoded bytes of length `size`

    Raises:
        NotLowercase, MissingPrefix, UnexpectedPrefix, WrongLength, InvalidHex
    """
    if not isinstance(s, str):
        raise InvalidHex(type_name, s, "expected a string")

    if s.lower() != s:
        raise NotLowercase(type_name, s)

    has_prefix = s.startswith(HEX_PREFIX)
    if prefixed and not has_prefix:
        raise MissingPrefix(type_name, s)
    if not prefixed and has_prefix:
        raise UnexpectedPrefix(type_name, s)

    payload = s[len(HEX_PREFIX):] if prefixed else s

    if len(payload) != size * 2:
        raise WrongLength(type_name, s, size * 2, len(payload))

    if not HEX_DIGITS.issuperset(payload):
        raise InvalidHex(type_name, s)

    return bytes.fromhex(payload)


def require_size(raw: bytes, size: int, type_name: str) -> bytes:
    """Check a raw byte value has the identifier's fixed size."""
    if not isinstance(raw, (bytes, bytearray)):
        raise TypeError(f"{type_name} requires bytes, got {type(raw).__name__}")
    if len(raw) != size:
        raise ValueError(f"{type_name} requires {size} bytes, got {len(raw)}")
    return bytes(raw)
