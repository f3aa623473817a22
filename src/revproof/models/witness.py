"""Ledger witness of a revision: Merkle proof plus the anchoring transaction."""
from dataclasses import dataclass

from revproof.ids import Hash, TxHash, combine

from .fields import parse_field, require


@dataclass(frozen=True)
class MerkleNode:
    """One proof step: successor = H(left_leaf ++ right_leaf)."""

    left_leaf: Hash
    right_leaf: Hash
    successor: Hash

    @classmethod
    def join(cls, left: Hash, right: Hash) -> "MerkleNode":
        return cls(left_leaf=left, right_leaf=right, successor=combine(left, right))

    def to_dict(self) -> dict:
        return {
            "left_leaf": self.left_leaf.format(),
            "right_leaf": self.right_leaf.format(),
            "successor": self.successor.format(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MerkleNode":
        return cls(
            left_leaf=parse_field(data, "left_leaf", Hash.parse, "MerkleNode"),
            right_leaf=parse_field(data, "right_leaf", Hash.parse, "MerkleNode"),
            successor=parse_field(data, "successor", Hash.parse, "MerkleNode"),
        )


def event_verification_hash(genesis: Hash, merkle_root: Hash) -> Hash:
    return Hash.digest(genesis.format() + merkle_root.format())


def witness_hash(genesis: Hash, merkle_root: Hash, network: str, tx_hash: TxHash) -> Hash:
    return Hash.digest(genesis.format() + merkle_root.format() + network + tx_hash.format())


@dataclass(frozen=True)
class RevisionWitness:
    """Information recorded on the external ledger for a revision batch."""

    domain_snapshot_genesis_hash: Hash
    merkle_root: Hash
    witness_network: str
    witness_event_transaction_hash: TxHash
    witness_event_verification_hash: Hash
    witness_hash: Hash
    structured_merkle_proof: tuple[MerkleNode, ...]

    def __post_init__(self):
        object.__setattr__(self, "structured_merkle_proof", tuple(self.structured_merkle_proof))

    @classmethod
    def create(
        cls,
        domain_snapshot_genesis_hash: Hash,
        merkle_root: Hash,
        witness_network: str,
        transaction_hash: TxHash,
        proof: list[MerkleNode],
    ) -> "RevisionWitness":
        """Build a witness, deriving the event verification and witness hashes."""
        return cls(
            domain_snapshot_genesis_hash=domain_snapshot_genesis_hash,
            merkle_root=merkle_root,
            witness_network=witness_network,
            witness_event_transaction_hash=transaction_hash,
            witness_event_verification_hash=event_verification_hash(
                domain_snapshot_genesis_hash, merkle_root
            ),
            witness_hash=witness_hash(
                domain_snapshot_genesis_hash, merkle_root, witness_network, transaction_hash
            ),
            structured_merkle_proof=tuple(proof),
        )

    def to_dict(self) -> dict:
        return {
            "domain_snapshot_genesis_hash": self.domain_snapshot_genesis_hash.format(),
            "merkle_root": self.merkle_root.format(),
            "witness_network": self.witness_network,
            "witness_event_transaction_hash": self.witness_event_transaction_hash.format(),
            "witness_event_verification_hash": self.witness_event_verification_hash.format(),
            "witness_hash": self.witness_hash.format(),
            "structured_merkle_proof": [node.to_dict() for node in self.structured_merkle_proof],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RevisionWitness":
        owner = "RevisionWitness"
        return cls(
            domain_snapshot_genesis_hash=parse_field(data, "domain_snapshot_genesis_hash", Hash.parse, owner),
            merkle_root=parse_field(data, "merkle_root", Hash.parse, owner),
            witness_network=require(data, "witness_network", str, owner),
            witness_event_transaction_hash=parse_field(
                data, "witness_event_transaction_hash", TxHash.parse, owner
            ),
            witness_event_verification_hash=parse_field(
                data, "witness_event_verification_hash", Hash.parse, owner
            ),
            witness_hash=parse_field(data, "witness_hash", Hash.parse, owner),
            structured_merkle_proof=tuple(
                MerkleNode.from_dict(node)
                for node in require(data, "structured_merkle_proof", list, owner)
            ),
        )
