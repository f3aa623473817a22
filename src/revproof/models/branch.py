"""Branch: revisions sharing one genesis hash, in chronological order.

`metadata` is the storage backend's opaque per-branch context and is
never interpreted here. Appending at the tail is the only mutation.
"""
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from revproof.core.errors import InvalidField
from revproof.ids import Hash

from .fields import require

T = TypeVar("T")


@dataclass
class Branch(Generic[T]):
    metadata: T
    hashes: list[Hash] = field(default_factory=list)

    @property
    def genesis(self) -> Hash:
        if not self.hashes:
            raise IndexError("empty branch has no genesis")
        return self.hashes[0]

    @property
    def tail(self) -> Hash:
        if not self.hashes:
            raise IndexError("empty branch has no tail")
        return self.hashes[-1]

    def append(self, revision_hash: Hash) -> None:
        if not isinstance(revision_hash, Hash):
            raise TypeError(f"Branch.append requires Hash, got {type(revision_hash).__name__}")
        self.hashes.append(revision_hash)

    def __len__(self) -> int:
        return len(self.hashes)

    def __contains__(self, revision_hash: object) -> bool:
        return revision_hash in self.hashes

    def to_dict(self, encode_metadata: Callable[[T], object] = lambda m: m) -> dict:
        return {
            "metadata": encode_metadata(self.metadata),
            "hashes": [h.format() for h in self.hashes],
        }

    @classmethod
    def from_dict(
        cls, data: dict, decode_metadata: Callable[[object], T] = lambda m: m
    ) -> "Branch[T]":
        hashes = require(data, "hashes", list, "Branch")
        if "metadata" not in data:
            raise InvalidField("Branch", "metadata", "missing field")
        return cls(
            metadata=decode_metadata(data["metadata"]),
            hashes=[Hash.parse(h) for h in hashes],
        )
