"""Merkle anchoring: proof construction, replay and witness verification."""
from .merkle import (
    build_merkle_proof,
    build_tree,
    check_merkle_proof,
    merkle_root,
    replay_proof,
    verify_merkle_proof,
)
from .verify import check_revision, check_witness, verify_revision, verify_witness

__all__ = [
    "build_merkle_proof",
    "build_tree",
    "check_merkle_proof",
    "check_revision",
    "check_witness",
    "merkle_root",
    "replay_proof",
    "verify_merkle_proof",
    "verify_revision",
    "verify_witness",
]
