"""Core subpackage for revproof primitives.

Exports the error hierarchy and receipt helpers.
"""
from .errors import (
    RevproofError,
    StopRule,
    ParseError,
    MissingPrefix,
    UnexpectedPrefix,
    NotLowercase,
    WrongLength,
    InvalidHex,
    InvalidCurvePoint,
    InvalidRecoveryId,
    InvalidSignatureEncoding,
    InvalidBase64,
    InvalidField,
    VerificationError,
    MerkleProofError,
    SignatureVerificationError,
    ContentHashMismatch,
    WitnessHashMismatch,
    ChainLinkageError,
    StorageError,
    NotFound,
    BranchConflict,
)
from .receipt import canonical_json, emit_receipt

__all__ = [
    # Errors
    "RevproofError",
    "StopRule",
    "ParseError",
    "MissingPrefix",
    "UnexpectedPrefix",
    "NotLowercase",
    "WrongLength",
    "InvalidHex",
    "InvalidCurvePoint",
    "InvalidRecoveryId",
    "InvalidSignatureEncoding",
    "InvalidBase64",
    "InvalidField",
    "VerificationError",
    "MerkleProofError",
    "SignatureVerificationError",
    "ContentHashMismatch",
    "WitnessHashMismatch",
    "ChainLinkageError",
    "StorageError",
    "NotFound",
    "BranchConflict",
    # Receipts
    "canonical_json",
    "emit_receipt",
]
