"""Revision, branch and witness models."""
from .branch import Branch
from .content import FileContent, RevisionContent, hash_content
from .page_data import HashChain
from .revision import (
    Revision,
    RevisionMetadata,
    RevisionSignature,
    format_timestamp,
    signing_digest,
)
from .witness import MerkleNode, RevisionWitness

__all__ = [
    "Branch",
    "FileContent",
    "HashChain",
    "MerkleNode",
    "Revision",
    "RevisionContent",
    "RevisionMetadata",
    "RevisionSignature",
    "RevisionWitness",
    "format_timestamp",
    "hash_content",
    "signing_digest",
]
