"""Recoverable secp256k1 ECDSA signature.

Wire layout, written field by field:

    r (32 bytes, big endian) || s (32 bytes, big endian) || recovery_id + 27

Canonical string: 0x + 130 lowercase hex characters.
"""
import hashlib
from dataclasses import dataclass

from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.errors import MalformedPointError
from ecdsa.numbertheory import SquareRootError
from ecdsa.util import sigdecode_string, sigencode_string

from revproof.core.constants import (
    RECOVERY_ID_MAX,
    RECOVERY_ID_OFFSET,
    SCALAR_SIZE,
    SECP256K1_ORDER,
    SIGNATURE_SIZE,
    SIGNING_DIGEST_SIZE,
)
from revproof.core.errors import (
    InvalidRecoveryId,
    InvalidSignatureEncoding,
    SignatureVerificationError,
)

from .hexcodec import decode_fixed, encode_fixed
from .public_key import PublicKey


def _check_digest(digest: bytes) -> bytes:
    if len(digest) != SIGNING_DIGEST_SIZE:
        raise ValueError(f"signing digest must be {SIGNING_DIGEST_SIZE} bytes, got {len(digest)}")
    return bytes(digest)


@dataclass(frozen=True)
class Signature:
    """ECDSA (r, s) plus curve recovery id in {0, 1, 2, 3}."""

    r: int
    s: int
    recovery_id: int

    def __post_init__(self):
        for name, value in (("r", self.r), ("s", self.s)):
            if not 1 <= value < SECP256K1_ORDER:
                raise InvalidSignatureEncoding("Signature", value, f"{name} out of range")
        if not 0 <= self.recovery_id <= RECOVERY_ID_MAX:
            raise InvalidRecoveryId("Signature", self.recovery_id)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        if len(raw) != SIGNATURE_SIZE:
            raise InvalidSignatureEncoding("Signature", raw.hex(), f"expected {SIGNATURE_SIZE} bytes")
        r = int.from_bytes(raw[:SCALAR_SIZE], "big")
        s = int.from_bytes(raw[SCALAR_SIZE:2 * SCALAR_SIZE], "big")
        for name, value in (("r", r), ("s", s)):
            if not 1 <= value < SECP256K1_ORDER:
                raise InvalidSignatureEncoding("Signature", raw.hex(), f"{name} out of range")

        wire_id = raw[2 * SCALAR_SIZE]
        if not RECOVERY_ID_OFFSET <= wire_id <= RECOVERY_ID_OFFSET + RECOVERY_ID_MAX:
            raise InvalidRecoveryId("Signature", raw.hex(), f"recovery byte {wire_id}")

        return cls(r, s, wire_id - RECOVERY_ID_OFFSET)

    def to_bytes(self) -> bytes:
        return (
            self.r.to_bytes(SCALAR_SIZE, "big")
            + self.s.to_bytes(SCALAR_SIZE, "big")
            + bytes([self.recovery_id + RECOVERY_ID_OFFSET])
        )

    @classmethod
    def parse(cls, s: str) -> "Signature":
        return cls.from_bytes(decode_fixed(s, SIGNATURE_SIZE, prefixed=True, type_name="Signature"))

    def format(self) -> str:
        return encode_fixed(self.to_bytes(), prefixed=True)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Signature({self.format()[:18]}..)"

    # ------------------------------------------------------------------
    # Curve operations
    # ------------------------------------------------------------------

    def rs_bytes(self) -> bytes:
        return self.to_bytes()[:2 * SCALAR_SIZE]

    def recover(self, digest: bytes) -> PublicKey:
        """Recover the signer's public key from a 32-byte digest.

        Raises:
            SignatureVerificationError: No key is recoverable for this id
        """
        digest = _check_digest(digest)
        if self.recovery_id > 1:
            # ids 2/3 mean R.x overflowed the group order; ecdsa only
            # yields the two candidates with R.x == r
            raise SignatureVerificationError(
                f"recovery id {self.recovery_id} is not supported for key recovery"
            )
        try:
            candidates = VerifyingKey.from_public_key_recovery_with_digest(
                self.rs_bytes(), digest, SECP256k1,
                hashfunc=hashlib.sha256, sigdecode=sigdecode_string,
            )
        except (SquareRootError, MalformedPointError) as e:
            # r is not the x coordinate of any curve point
            raise SignatureVerificationError(f"no public key recoverable: {e}") from e
        return PublicKey.from_verifying_key(candidates[self.recovery_id])

    def verify(self, digest: bytes, public_key: PublicKey) -> bool:
        """Check the (r, s) pair against a digest and public key."""
        digest = _check_digest(digest)
        try:
            return public_key.verifying_key().verify_digest(
                self.rs_bytes(), digest, sigdecode=sigdecode_string
            )
        except BadSignatureError:
            return False


def sign_digest(signing_key: SigningKey, digest: bytes) -> Signature:
    """Deterministic (RFC 6979) low-s signature with its recovery id."""
    digest = _check_digest(digest)
    rs = signing_key.sign_digest_deterministic(
        digest, hashfunc=hashlib.sha256, sigencode=sigencode_string
    )
    r, s = sigdecode_string(rs, SECP256K1_ORDER)
    if s > SECP256K1_ORDER // 2:
        s = SECP256K1_ORDER - s

    expected = PublicKey.from_verifying_key(signing_key.get_verifying_key())
    for recovery_id in (0, 1):
        candidate = Signature(r, s, recovery_id)
        if candidate.recover(digest) == expected:
            return candidate

    raise SignatureVerificationError("signer's key is not recoverable from the signature")
