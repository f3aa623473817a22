"""Append-only revision storage backed by a JSONL file.

One line per write:
    {"hash": ..., "branch": <genesis hash>, "action": "stored"|"upgraded", "revision": {...}}

The branch context is the genesis Hash. Writes take an exclusive fcntl
lock and re-read the file under it, so concurrent writers in any process
are serialized and every store is visible to the next read.

Re-storing a known hash never rewrites a line. An identical revision is
a no-op; one that only adds a signature or witness is appended as an
"upgraded" line that supersedes the earlier one for read(). list() and
get_branch() return each hash once, in first-store order.

update_handler() polls the file, so it sees stores made through any
instance or process sharing the path.
"""
import asyncio
import fcntl
import json
import logging
from pathlib import Path
from typing import NoReturn

from revproof.core.constants import UPDATE_POLL_INTERVAL
from revproof.core.errors import BranchConflict, NotFound, ParseError, StorageError
from revproof.core.receipt import emit_receipt
from revproof.ids import Hash
from revproof.models.branch import Branch
from revproof.models.revision import Revision

from .base import Storage, UpdateCallback

logger = logging.getLogger("revproof.storage")

ACTIONS = ("stored", "upgraded")
ATTESTATIONS = ("signature", "witness")


def _corrupt(path: Path, lineno: int, error: str) -> StorageError:
    emit_receipt("anomaly", {
        "anomaly_type": "corrupt_record",
        "path": str(path),
        "line": lineno,
        "error": error,
        "stage": "load",
    })
    return StorageError(f"{path}:{lineno}: corrupt record: {error}")


def _check_record(record) -> str | None:
    """Return what is wrong with a decoded line, or None."""
    if not isinstance(record, dict):
        return "record is not an object"
    for key in ("hash", "branch"):
        value = record.get(key)
        if not isinstance(value, str):
            return f"missing or non-string {key!r}"
        try:
            Hash.parse(value)
        except ParseError as e:
            return f"{key}: {e}"
    if not isinstance(record.get("revision"), dict):
        return "missing or non-object 'revision'"
    if record.get("action", "stored") not in ACTIONS:
        return f"unknown action {record['action']!r}"
    return None


def _parse_lines(lines: list[str], path: Path, first_line: int = 1) -> list[dict]:
    records = []
    for lineno, line in enumerate(lines, start=first_line):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise _corrupt(path, lineno, str(e)) from e
        problem = _check_record(record)
        if problem is not None:
            raise _corrupt(path, lineno, problem)
        records.append(record)
    return records


def _latest(records: list[dict]) -> dict[str, dict]:
    """Last record per hash; dict order is first-store order."""
    latest: dict[str, dict] = {}
    for record in records:
        latest[record["hash"]] = record
    return latest


def _merge(stored: dict, incoming: dict) -> dict:
    """Fold the attestations of incoming into stored.

    Raises:
        BranchConflict: Content or metadata differ, or an existing
            signature or witness would be replaced
    """
    for key in ("content", "metadata"):
        if stored.get(key) != incoming.get(key):
            raise BranchConflict(f"{key} differs from the stored revision")
    merged = dict(stored)
    for key in ATTESTATIONS:
        if incoming.get(key) is None:
            continue
        if stored.get(key) is not None and stored[key] != incoming[key]:
            raise BranchConflict(f"stored revision already carries a different {key}")
        merged[key] = incoming[key]
    return merged


def _describe(record: dict) -> str:
    return (
        f"{record.get('action', 'stored')} {record['hash'][:16]}.."
        f" in branch {record['branch'][:16]}.."
    )


class JsonlStorage(Storage[Hash]):
    """Append-only revision storage backed by JSONL file.

    Attributes:
        path: Path to the JSONL file
        poll_interval: Seconds between update_handler polls
    """

    def __init__(self, path: str | Path = "revisions.jsonl",
                 poll_interval: float = UPDATE_POLL_INTERVAL):
        self.path = Path(path)
        self.poll_interval = poll_interval
        # Ensure parent directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.touch()

    # ------------------------------------------------------------------
    # File access (blocking, run in worker threads)
    # ------------------------------------------------------------------

    def _read_records(self) -> list[dict]:
        with open(self.path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                lines = f.readlines()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return _parse_lines(lines, self.path)

    def _read_since(self, offset: int, lineno: int) -> tuple[list[dict], int, int]:
        """Complete lines written after offset, with the new offset and line count."""
        with open(self.path, "rb") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                f.seek(offset)
                chunk = f.read()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        end = chunk.rfind(b"\n") + 1
        lines = chunk[:end].decode("utf-8").splitlines()
        records = _parse_lines(lines, self.path, first_line=lineno + 1)
        return records, offset + end, lineno + len(lines)

    def _tail_position(self) -> tuple[int, int]:
        with open(self.path, "rb") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = f.read()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        end = data.rfind(b"\n") + 1
        return end, data.count(b"\n", 0, end)

    def _append_locked(self, revision: Revision, context: Hash) -> dict | None:
        """Check branch invariants and append under an exclusive lock.

        Returns:
            The written record, or None when nothing new was stored
        """
        revision_hash = revision.hash.format()
        branch = context.format()
        incoming = revision.to_dict()

        with open(self.path, "a+", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.seek(0)
                latest = _latest(_parse_lines(f.readlines(), self.path))

                existing = latest.get(revision_hash)
                if existing is not None:
                    if existing["branch"] != branch:
                        raise BranchConflict(
                            f"{revision_hash[:16]}.. already stored in branch {existing['branch'][:16]}.."
                        )
                    payload = _merge(existing["revision"], incoming)
                    if payload == existing["revision"]:
                        return None
                    action = "upgraded"
                else:
                    if revision.is_genesis:
                        if branch != revision_hash:
                            raise BranchConflict("genesis revision must be stored under its own hash")
                    else:
                        members = [h for h, r in latest.items() if r["branch"] == branch]
                        if not members:
                            raise NotFound(context)
                        if members[-1] != revision.previous.format():
                            raise BranchConflict(
                                f"revision does not extend branch tail {members[-1][:16]}.."
                            )
                    payload = incoming
                    action = "stored"

                record = {"hash": revision_hash, "branch": branch, "action": action, "revision": payload}
                f.seek(0, 2)
                f.write(json.dumps(record, sort_keys=True) + "\n")
                f.flush()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return record

    async def _latest_records(self) -> dict[str, dict]:
        return _latest(await asyncio.to_thread(self._read_records))

    async def _find(self, revision_hash: Hash) -> dict:
        record = (await self._latest_records()).get(revision_hash.format())
        if record is None:
            raise NotFound(revision_hash)
        return record

    # ------------------------------------------------------------------
    # Storage contract
    # ------------------------------------------------------------------

    def genesis_context(self, revision: Revision) -> Hash:
        """Context under which a genesis revision starts a new branch."""
        if not revision.is_genesis:
            raise BranchConflict("only a genesis revision starts a branch")
        return revision.hash

    async def get_context(self, revision_hash: Hash) -> Hash:
        record = await self._find(revision_hash)
        return Hash.parse(record["branch"])

    async def store(self, revision: Revision, context: Hash) -> None:
        record = await asyncio.to_thread(self._append_locked, revision, context)
        if record is None:
            logger.debug("revision %s already stored", revision.hash.format()[:16])
            return

        logger.info(_describe(record))
        emit_receipt("store", {
            "revision_hash": record["hash"],
            "branch": record["branch"],
            "action": record["action"],
            "signed": record["revision"].get("signature") is not None,
            "witnessed": record["revision"].get("witness") is not None,
        })

    async def read(self, revision_hash: Hash) -> Revision:
        record = await self._find(revision_hash)
        try:
            return Revision.from_dict(record["revision"])
        except ParseError as e:
            emit_receipt("anomaly", {
                "anomaly_type": "corrupt_revision",
                "revision_hash": revision_hash.format(),
                "error": str(e),
                "stage": "read",
            })
            raise StorageError(f"corrupt revision {revision_hash.format()[:16]}..: {e}") from e

    async def get_branch(self, revision_hash: Hash) -> Branch[Hash]:
        latest = await self._latest_records()
        found = latest.get(revision_hash.format())
        if found is None:
            raise NotFound(revision_hash)
        result = Branch(metadata=Hash.parse(found["branch"]))
        for h, record in latest.items():
            if record["branch"] == found["branch"]:
                result.append(Hash.parse(h))
        return result

    async def list(self) -> list[Hash]:
        return [Hash.parse(h) for h in await self._latest_records()]

    async def update_handler(self, callback: UpdateCallback) -> NoReturn:
        # Taken before the first await; every later store is delivered.
        offset, lineno = self._tail_position()
        while True:
            records, offset, lineno = await asyncio.to_thread(self._read_since, offset, lineno)
            for record in records:
                callback(Hash.parse(record["hash"]), _describe(record))
            await asyncio.sleep(self.poll_interval)
