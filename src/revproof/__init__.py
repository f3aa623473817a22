"""
revproof - Revision provenance integrity core

Every edit is a Revision identified by its SHA3-512 hash. Revisions that
share a genesis form a Branch. A witnessed revision carries a Merkle
inclusion proof anchoring it to an external ledger.

Identifiers have exactly one canonical string form; anything else is
rejected, never normalized.
"""

__version__ = "0.1.0"

from revproof.core.errors import (
    NotFound,
    ParseError,
    RevproofError,
    StorageError,
    StopRule,
    VerificationError,
)
from revproof.ids import Address, Hash, PublicKey, Signature, TxHash, derive_address
from revproof.models import Branch, Revision, RevisionSignature, RevisionWitness, MerkleNode
from revproof.anchor import verify_merkle_proof, verify_revision, verify_witness

__all__ = [
    "Address",
    "Branch",
    "Hash",
    "MerkleNode",
    "NotFound",
    "ParseError",
    "PublicKey",
    "Revision",
    "RevisionSignature",
    "RevisionWitness",
    "RevproofError",
    "Signature",
    "StopRule",
    "StorageError",
    "TxHash",
    "VerificationError",
    "derive_address",
    "verify_merkle_proof",
    "verify_revision",
    "verify_witness",
    "__version__",
]
