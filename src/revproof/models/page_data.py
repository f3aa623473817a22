"""Page-level aggregate of one revision chain.

`revisions` is serialized as an array of [hash, revision] pairs rather
than an object keyed by hash. Order is insertion order; keys are unique.
"""
from dataclasses import dataclass, field

from revproof.core.errors import ChainLinkageError, InvalidField
from revproof.ids import Hash

from .branch import Branch
from .fields import require
from .revision import Revision


@dataclass
class HashChain:
    genesis_hash: str
    domain_id: str
    title: str
    namespace: int
    chain_height: int
    revisions: list[tuple[Hash, Revision]] = field(default_factory=list)

    def __post_init__(self):
        seen = set()
        for revision_hash, _ in self.revisions:
            if revision_hash in seen:
                raise InvalidField("HashChain", revision_hash.format(), "duplicate revision hash")
            seen.add(revision_hash)

    def get(self, revision_hash: Hash) -> Revision | None:
        for key, revision in self.revisions:
            if key == revision_hash:
                return revision
        return None

    def to_branch(self, metadata=None) -> Branch:
        return Branch(metadata=metadata, hashes=[h for h, _ in self.revisions])

    def verify_linkage(self) -> None:
        """Check keys, genesis, predecessor links and chain height.

        Raises:
            ChainLinkageError: First broken link found
        """
        if self.chain_height != len(self.revisions):
            raise ChainLinkageError(
                f"chain_height {self.chain_height} != {len(self.revisions)} revisions"
            )
        previous = None
        for index, (key, revision) in enumerate(self.revisions):
            if key != revision.hash:
                raise ChainLinkageError(f"entry {index} keyed by a hash that is not its own")
            if previous is None:
                if not revision.is_genesis:
                    raise ChainLinkageError("first revision has a predecessor")
                if key.format() != self.genesis_hash:
                    raise ChainLinkageError("genesis_hash does not match the first revision")
            else:
                revision.follows(previous)
            previous = revision

    def to_dict(self) -> dict:
        return {
            "genesis_hash": self.genesis_hash,
            "domain_id": self.domain_id,
            "title": self.title,
            "namespace": self.namespace,
            "chain_height": self.chain_height,
            "revisions": [[h.format(), revision.to_dict()] for h, revision in self.revisions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HashChain":
        owner = "HashChain"
        pairs = []
        for entry in require(data, "revisions", list, owner):
            if not isinstance(entry, list) or len(entry) != 2:
                raise InvalidField(owner, entry, "revisions entries must be [hash, revision] pairs")
            pairs.append((Hash.parse(entry[0]), Revision.from_dict(entry[1])))
        namespace = require(data, "namespace", int, owner)
        chain_height = require(data, "chain_height", int, owner)
        if namespace < 0 or chain_height < 0:
            raise InvalidField(owner, data, "namespace and chain_height are unsigned")
        return cls(
            genesis_hash=require(data, "genesis_hash", str, owner),
            domain_id=require(data, "domain_id", str, owner),
            title=require(data, "title", str, owner),
            namespace=namespace,
            chain_height=chain_height,
            revisions=pairs,
        )
