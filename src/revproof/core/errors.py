"""Exception hierarchy for revproof.

Three families, never collapsed into one another:

    ParseError         malformed input; deterministic, never retried
    VerificationError  well-formed input whose integrity claim is false
    StorageError       raised by storage backends; NotFound is the one
                       condition every backend must report distinctly

StopRule marks an unrecoverable condition. Never catch silently.
"""


class RevproofError(Exception):
    """Base class for every revproof error."""


class StopRule(RevproofError):
    """Raised when a stoprule triggers. Never catch silently."""


# =============================================================================
# Parse errors
# =============================================================================

class ParseError(RevproofError, ValueError):
    """Rejected string or field encoding.

    Attributes:
        kind: Stable identifier of the failed check
        value: The offending input (truncated for display)
        type_name: Identifier kind being parsed (Hash, TxHash, ...)
    """

    kind = "parse_error"

    def __init__(self, type_name: str, value: object, detail: str = ""):
        self.type_name = type_name
        self.value = value
        self.detail = detail
        shown = repr(value)
        if len(shown) > 80:
            shown = shown[:77] + "..."
        message = f"{type_name}: {self.kind} ({shown})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MissingPrefix(ParseError):
    kind = "missing_prefix"


class UnexpectedPrefix(ParseError):
    kind = "unexpected_prefix"


class NotLowercase(ParseError):
    kind = "not_lowercase"


class WrongLength(ParseError):
    """Hex payload is not exactly the expected number of characters."""

    kind = "wrong_length"

    def __init__(self, type_name: str, value: object, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(type_name, value, f"expected {expected} hex chars, got {actual}")


class InvalidHex(ParseError):
    kind = "invalid_hex"


class InvalidCurvePoint(ParseError):
    kind = "invalid_curve_point"


class InvalidRecoveryId(ParseError):
    kind = "invalid_recovery_id"


class InvalidSignatureEncoding(ParseError):
    kind = "invalid_signature_encoding"


class InvalidBase64(ParseError):
    kind = "invalid_base64"


class InvalidField(ParseError):
    """A model field is missing, mistyped or out of range."""

    kind = "invalid_field"


# =============================================================================
# Verification errors
# =============================================================================

class VerificationError(RevproofError):
    """An integrity claim is false. Treat as a trust failure, not a fault."""


class MerkleProofError(VerificationError):
    """Merkle proof replay did not reduce the leaf to the claimed root.

    Attributes:
        step: Index of the failing proof node, or None for the final root check
    """

    def __init__(self, message: str, step: int | None = None):
        self.step = step
        super().__init__(message if step is None else f"node {step}: {message}")


class SignatureVerificationError(VerificationError):
    pass


class ContentHashMismatch(VerificationError):
    pass


class WitnessHashMismatch(VerificationError):
    pass


class ChainLinkageError(VerificationError):
    pass


# =============================================================================
# Storage errors
# =============================================================================

class StorageError(RevproofError):
    """Backend-defined failure. Propagated unchanged by the core."""


class NotFound(StorageError):
    """The requested hash is unknown to the backend."""

    def __init__(self, hash_value: object):
        self.hash = hash_value
        super().__init__(f"not found: {hash_value}")


class BranchConflict(StorageError):
    """A write would fork or reorder an existing branch."""
