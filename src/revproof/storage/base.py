"""Storage contract for revisions and branches.

Backends subclass Storage[Context] where Context is their opaque
per-branch metadata. Every method may run concurrently with every other;
the contract adds no locking. A backend must:

- serialize conflicting writes itself
- make a successful store() visible to every later read/get_branch/list
- raise NotFound (a StorageError) for unknown hashes in get_context,
  read and get_branch
- document the order list() returns

Backend errors are StorageError subclasses and are propagated unchanged.
"""
from abc import ABC, abstractmethod
from typing import Callable, Generic, NoReturn, TypeVar

from revproof.ids import Hash
from revproof.models.branch import Branch
from revproof.models.revision import Revision

Context = TypeVar("Context")

UpdateCallback = Callable[[Hash, str], None]


class Storage(ABC, Generic[Context]):
    """Asynchronous revision store."""

    @abstractmethod
    async def get_context(self, revision_hash: Hash) -> Context:
        """Resolve backend metadata for a known hash."""

    @abstractmethod
    async def store(self, revision: Revision, context: Context) -> None:
        """Persist a revision. Retrying the same revision is safe."""

    @abstractmethod
    async def read(self, revision_hash: Hash) -> Revision:
        """Return the stored revision."""

    @abstractmethod
    async def get_branch(self, revision_hash: Hash) -> Branch[Context]:
        """Return the full branch containing the hash."""

    @abstractmethod
    async def list(self) -> list[Hash]:
        """Enumerate known hashes in the backend's documented order."""

    @abstractmethod
    async def update_handler(self, callback: UpdateCallback) -> NoReturn:
        """Invoke callback(hash, description) for every future store.

        Never returns normally. Cancel the awaiting task to unsubscribe;
        an unrecoverable backend failure is raised.
        """
