"""Witness and revision verification with verify receipts.

check_* functions raise the specific VerificationError.
verify_* functions run the same checks and emit a verify receipt whose
status is "valid" or "invalid"; an invalid outcome is a trust failure
and is also logged at WARNING.
"""
import logging

from revproof.core.errors import VerificationError, WitnessHashMismatch
from revproof.core.receipt import emit_receipt
from revproof.ids import Hash
from revproof.models.revision import Revision
from revproof.models.witness import (
    RevisionWitness,
    event_verification_hash,
    witness_hash,
)

from .merkle import check_merkle_proof

logger = logging.getLogger("revproof.anchor")


def check_witness(leaf: Hash, witness: RevisionWitness) -> None:
    """Verify witness hashes and replay its Merkle proof for leaf.

    Raises:
        WitnessHashMismatch: Derived witness hashes do not match
        MerkleProofError: Proof replay failed
    """
    expected_event = event_verification_hash(
        witness.domain_snapshot_genesis_hash, witness.merkle_root
    )
    if expected_event != witness.witness_event_verification_hash:
        raise WitnessHashMismatch("witness_event_verification_hash does not match genesis and root")

    expected_witness = witness_hash(
        witness.domain_snapshot_genesis_hash,
        witness.merkle_root,
        witness.witness_network,
        witness.witness_event_transaction_hash,
    )
    if expected_witness != witness.witness_hash:
        raise WitnessHashMismatch("witness_hash does not match witness fields")

    check_merkle_proof(leaf, list(witness.structured_merkle_proof), witness.merkle_root)


def check_revision(revision: Revision) -> list[str]:
    """Run every integrity check that applies to the revision.

    Returns:
        Names of the checks that ran, in order

    Raises:
        VerificationError: First failing check
    """
    checks = ["content", "metadata"]
    revision.content.verify()
    revision.metadata.verify(revision.content)

    if revision.signature is not None:
        revision.signature.verify(revision.signing_payload())
        checks.append("signature")

    if revision.witness is not None:
        check_witness(revision.hash, revision.witness)
        checks.append("witness")

    return checks


def _outcome(subject: Hash, kind: str, checks: list[str], error: VerificationError | None) -> dict:
    data = {
        "subject": kind,
        "revision_hash": subject.format(),
        "checks": checks,
        "proof_valid": error is None,
        "status": "valid" if error is None else "invalid",
    }
    if error is not None:
        data["reason"] = str(error)
        data["error_type"] = type(error).__name__
        logger.warning("%s verification failed for %s: %s", kind, subject.format()[:16], error)
    return emit_receipt("verify", data)


def verify_witness(leaf: Hash, witness: RevisionWitness) -> dict:
    """Verify a witness for leaf and emit a verify receipt."""
    try:
        check_witness(leaf, witness)
    except VerificationError as e:
        return _outcome(leaf, "witness", ["witness"], e)
    return _outcome(leaf, "witness", ["witness"], None)


def verify_revision(revision: Revision) -> dict:
    """Verify a whole revision and emit a verify receipt."""
    try:
        checks = check_revision(revision)
    except VerificationError as e:
        return _outcome(revision.hash, "revision", [], e)
    return _outcome(revision.hash, "revision", checks, None)
