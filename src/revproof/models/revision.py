"""Revision: one immutable, hash-identified version of a piece of content.

Hash derivation:

    metadata_hash     = H(domain_id ++ time_stamp ++ previous_verification_hash or "")
    verification_hash = H(content_hash ++ metadata_hash)

(hashes concatenated in canonical string form). The verification hash is
the revision's identity: it keys storage, links the chain and is the leaf
a witness anchors.

Signing:

    signature_hash = H(payload)
    signature      = ECDSA(keccak256(signature_hash.raw))

where the payload for a revision is its verification hash bytes.
"""
from dataclasses import dataclass, replace
from datetime import datetime

from ecdsa import SigningKey

from revproof.core.constants import TIMESTAMP_FORMAT, TIMESTAMP_LENGTH
from revproof.core.errors import (
    ChainLinkageError,
    ContentHashMismatch,
    InvalidField,
    SignatureVerificationError,
)
from revproof.ids import (
    Address,
    Hash,
    PublicKey,
    Signature,
    derive_address,
    keccak256,
    sign_digest,
)

from .content import FileContent, RevisionContent
from .fields import optional_field, parse_field, require
from .witness import RevisionWitness


def _check_timestamp(value: str) -> str:
    if len(value) != TIMESTAMP_LENGTH or not value.isdigit():
        raise InvalidField("RevisionMetadata", value, "time_stamp must be YYYYMMDDHHMMSS")
    try:
        datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise InvalidField("RevisionMetadata", value, str(e)) from e
    return value


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


# =============================================================================
# Metadata
# =============================================================================

@dataclass(frozen=True)
class RevisionMetadata:
    domain_id: str
    time_stamp: str
    previous_verification_hash: Hash | None
    metadata_hash: Hash
    verification_hash: Hash

    def __post_init__(self):
        _check_timestamp(self.time_stamp)

    @staticmethod
    def compute_metadata_hash(domain_id: str, time_stamp: str, previous: Hash | None) -> Hash:
        return Hash.digest(domain_id + time_stamp + (previous.format() if previous else ""))

    @staticmethod
    def compute_verification_hash(content_hash: Hash, metadata_hash: Hash) -> Hash:
        return Hash.digest(content_hash.format() + metadata_hash.format())

    @classmethod
    def create(
        cls,
        content: RevisionContent,
        domain_id: str,
        time_stamp: str,
        previous: Hash | None = None,
    ) -> "RevisionMetadata":
        _check_timestamp(time_stamp)
        metadata_hash = cls.compute_metadata_hash(domain_id, time_stamp, previous)
        return cls(
            domain_id=domain_id,
            time_stamp=time_stamp,
            previous_verification_hash=previous,
            metadata_hash=metadata_hash,
            verification_hash=cls.compute_verification_hash(content.content_hash, metadata_hash),
        )

    def verify(self, content: RevisionContent) -> None:
        expected = self.compute_metadata_hash(
            self.domain_id, self.time_stamp, self.previous_verification_hash
        )
        if expected != self.metadata_hash:
            raise ContentHashMismatch("metadata_hash does not match metadata fields")
        if self.compute_verification_hash(content.content_hash, self.metadata_hash) != self.verification_hash:
            raise ContentHashMismatch("verification_hash does not match content and metadata")

    def to_dict(self) -> dict:
        result = {
            "domain_id": self.domain_id,
            "time_stamp": self.time_stamp,
            "metadata_hash": self.metadata_hash.format(),
            "verification_hash": self.verification_hash.format(),
        }
        if self.previous_verification_hash is not None:
            result["previous_verification_hash"] = self.previous_verification_hash.format()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "RevisionMetadata":
        owner = "RevisionMetadata"
        return cls(
            domain_id=require(data, "domain_id", str, owner),
            time_stamp=require(data, "time_stamp", str, owner),
            previous_verification_hash=optional_field(data, "previous_verification_hash", Hash.parse, owner),
            metadata_hash=parse_field(data, "metadata_hash", Hash.parse, owner),
            verification_hash=parse_field(data, "verification_hash", Hash.parse, owner),
        )


# =============================================================================
# Signature
# =============================================================================

def signing_digest(signature_hash: Hash) -> bytes:
    """32-byte digest actually fed to ECDSA."""
    return keccak256(signature_hash.raw)


@dataclass(frozen=True)
class RevisionSignature:
    """Signature over signature_hash, with the signer's key and address."""

    signature: Signature
    public_key: PublicKey
    signature_hash: Hash
    wallet_address: Address

    @classmethod
    def create(cls, signing_key: SigningKey, payload: bytes) -> "RevisionSignature":
        signature_hash = Hash.digest(payload)
        public_key = PublicKey.from_verifying_key(signing_key.get_verifying_key())
        return cls(
            signature=sign_digest(signing_key, signing_digest(signature_hash)),
            public_key=public_key,
            signature_hash=signature_hash,
            wallet_address=derive_address(public_key),
        )

    def verify(self, payload: bytes | None = None) -> None:
        """Check address derivation, key recovery and the ECDSA equation.

        Args:
            payload: When given, signature_hash must also equal H(payload)

        Raises:
            SignatureVerificationError: Any check fails
        """
        if payload is not None and Hash.digest(payload) != self.signature_hash:
            raise SignatureVerificationError("signature_hash does not match the signed payload")

        if derive_address(self.public_key) != self.wallet_address:
            raise SignatureVerificationError("wallet_address is not derived from public_key")

        digest = signing_digest(self.signature_hash)
        if not self.signature.verify(digest, self.public_key):
            raise SignatureVerificationError("signature does not verify against signature_hash")

        if self.signature.recover(digest) != self.public_key:
            raise SignatureVerificationError("signature does not recover to public_key")

    def is_valid(self, payload: bytes | None = None) -> bool:
        try:
            self.verify(payload)
        except SignatureVerificationError:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "signature": self.signature.format(),
            "public_key": self.public_key.format(),
            "signature_hash": self.signature_hash.format(),
            "wallet_address": self.wallet_address.format(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RevisionSignature":
        owner = "RevisionSignature"
        return cls(
            signature=parse_field(data, "signature", Signature.parse, owner),
            public_key=parse_field(data, "public_key", PublicKey.parse, owner),
            signature_hash=parse_field(data, "signature_hash", Hash.parse, owner),
            wallet_address=parse_field(data, "wallet_address", Address.parse, owner),
        )


# =============================================================================
# Revision
# =============================================================================

@dataclass(frozen=True)
class Revision:
    content: RevisionContent
    metadata: RevisionMetadata
    signature: RevisionSignature | None = None
    witness: RevisionWitness | None = None

    @classmethod
    def create(
        cls,
        content: dict[str, str],
        domain_id: str,
        time_stamp: str,
        previous: "Revision | Hash | None" = None,
        file: FileContent | None = None,
    ) -> "Revision":
        """Hash content and metadata into a new unsigned, unwitnessed revision."""
        if isinstance(previous, Revision):
            previous = previous.hash
        revision_content = RevisionContent.create(content, file)
        return cls(
            content=revision_content,
            metadata=RevisionMetadata.create(revision_content, domain_id, time_stamp, previous),
        )

    @property
    def hash(self) -> Hash:
        return self.metadata.verification_hash

    @property
    def previous(self) -> Hash | None:
        return self.metadata.previous_verification_hash

    @property
    def is_genesis(self) -> bool:
        return self.metadata.previous_verification_hash is None

    def signing_payload(self) -> bytes:
        return self.hash.raw

    def sign(self, signing_key: SigningKey) -> "Revision":
        """Return a copy carrying a signature over this revision's hash."""
        return replace(self, signature=RevisionSignature.create(signing_key, self.signing_payload()))

    def with_witness(self, witness: RevisionWitness) -> "Revision":
        return replace(self, witness=witness)

    def follows(self, previous: "Revision") -> None:
        """Check this revision links to `previous`."""
        if self.previous != previous.hash:
            raise ChainLinkageError(
                f"revision {self.hash.format()[:16]}.. does not follow {previous.hash.format()[:16]}.."
            )

    def to_dict(self) -> dict:
        return {
            "content": self.content.to_dict(),
            "metadata": self.metadata.to_dict(),
            "signature": self.signature.to_dict() if self.signature else None,
            "witness": self.witness.to_dict() if self.witness else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Revision":
        signature = data.get("signature") if isinstance(data, dict) else None
        witness = data.get("witness") if isinstance(data, dict) else None
        return cls(
            content=RevisionContent.from_dict(require(data, "content", dict, "Revision")),
            metadata=RevisionMetadata.from_dict(require(data, "metadata", dict, "Revision")),
            signature=RevisionSignature.from_dict(signature) if signature is not None else None,
            witness=RevisionWitness.from_dict(witness) if witness is not None else None,
        )
