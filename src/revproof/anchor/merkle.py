"""Merkle tree operations over revision hashes.

Tree construction pairs nodes left to right and duplicates the last node
of an odd-length level. Proofs are structured: each step records both
children and their successor, so replay needs no position flags.
"""
from revproof.core.errors import MerkleProofError
from revproof.ids import Hash, combine
from revproof.models.witness import MerkleNode


def build_tree(leaves: list[Hash]) -> dict:
    """Build full Merkle tree structure for proof generation.

    Args:
        leaves: Ordered leaf hashes (at least one)

    Returns:
        dict with root, levels, and leaves
    """
    if not leaves:
        raise ValueError("Merkle tree needs at least one leaf")

    levels = [list(leaves)]
    current = list(leaves)

    while len(current) > 1:
        # Duplicate last if odd
        if len(current) % 2 == 1:
            current.append(current[-1])

        current = [combine(current[i], current[i + 1]) for i in range(0, len(current), 2)]
        levels.append(current[:])

    return {
        "root": current[0],
        "levels": levels,
        "leaves": list(leaves),
    }


def merkle_root(leaves: list[Hash]) -> Hash:
    return build_tree(leaves)["root"]


def build_merkle_proof(leaves: list[Hash], index: int) -> list[MerkleNode]:
    """Generate the structured proof for leaves[index].

    Raises:
        IndexError: index outside the leaf list
    """
    tree = build_tree(leaves)
    if not 0 <= index < len(leaves):
        raise IndexError(f"leaf index {index} out of range for {len(leaves)} leaves")

    proof = []
    for level in tree["levels"][:-1]:  # All levels except root
        level_copy = level[:]
        if len(level_copy) % 2 == 1:
            level_copy.append(level_copy[-1])

        left_idx = index & ~1
        proof.append(MerkleNode.join(level_copy[left_idx], level_copy[left_idx + 1]))
        index //= 2

    return proof


def replay_proof(leaf: Hash, proof: list[MerkleNode]) -> Hash:
    """Walk the proof from the leaf, returning the hash it reduces to.

    Each node must contain the carried hash as one of its children and its
    successor must be H(left ++ right).

    Raises:
        MerkleProofError: At the first inconsistent node
    """
    current = leaf
    for step, node in enumerate(proof):
        if current != node.left_leaf and current != node.right_leaf:
            raise MerkleProofError("carried hash is neither left nor right leaf", step)
        if combine(node.left_leaf, node.right_leaf) != node.successor:
            raise MerkleProofError("successor is not H(left_leaf ++ right_leaf)", step)
        current = node.successor
    return current


def check_merkle_proof(leaf: Hash, proof: list[MerkleNode], root: Hash) -> None:
    """Replay the proof and require it to end at root.

    Raises:
        MerkleProofError: Any step fails or the result is not root
    """
    result = replay_proof(leaf, proof)
    if result != root:
        raise MerkleProofError("proof does not reduce to merkle_root")


def verify_merkle_proof(leaf: Hash, proof: list[MerkleNode], root: Hash) -> bool:
    """Boolean form of check_merkle_proof."""
    try:
        check_merkle_proof(leaf, proof, root)
    except MerkleProofError:
        return False
    return True
