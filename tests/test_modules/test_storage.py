"""Unit tests for the JSONL storage backend.

Operations tested: get_context, store, read, get_branch, list, update_handler
SLO: a successful store is visible to every later read
SLO: update_handler sees stores made through any instance sharing the file
"""
import asyncio
import json
from dataclasses import replace

import pytest

from revproof.core.errors import BranchConflict, NotFound, StorageError
from revproof.ids import Hash
from revproof.models import Revision
from revproof.storage import JsonlStorage, Storage


async def _store_chain(storage: JsonlStorage, chain: list[Revision]) -> Hash:
    context = storage.genesis_context(chain[0])
    for revision in chain:
        await storage.store(revision, context)
    return context


async def _wait_for(condition, timeout: float = 2.0) -> None:
    """Poll until condition() is true; fail after timeout seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


class TestStorageContract:
    """Tests for the abstract contract."""

    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            Storage()

    def test_jsonl_is_storage(self, storage):
        assert isinstance(storage, Storage)

    def test_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "revs.jsonl"
        JsonlStorage(path)

        assert path.exists()


class TestJsonlStore:
    """Tests for store and read."""

    def test_store_then_read(self, storage, chain):
        async def run():
            await _store_chain(storage, chain)
            return [await storage.read(revision.hash) for revision in chain]

        assert asyncio.run(run()) == chain

    def test_read_preserves_signature_and_witness(self, storage, witnessed, signing_key):
        revision = witnessed.sign(signing_key)

        async def run():
            await storage.store(revision, storage.genesis_context(revision))
            return await storage.read(revision.hash)

        restored = asyncio.run(run())

        assert restored == revision
        restored.signature.verify(restored.signing_payload())

    def test_read_unknown_raises_not_found(self, storage):
        missing = Hash.digest(b"missing")

        with pytest.raises(NotFound) as excinfo:
            asyncio.run(storage.read(missing))

        assert excinfo.value.hash == missing

    def test_store_is_idempotent(self, storage, genesis):
        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis, context)
            await storage.store(genesis, context)
            return await storage.list()

        assert asyncio.run(run()) == [genesis.hash]

    def test_store_emits_receipt(self, storage, genesis, capsys):
        asyncio.run(storage.store(genesis, storage.genesis_context(genesis)))

        receipt = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert receipt["receipt_type"] == "store"
        assert receipt["revision_hash"] == genesis.hash.format()
        assert receipt["tenant_id"] == "test"

    def test_visible_to_new_instance(self, storage, chain):
        asyncio.run(_store_chain(storage, chain))

        reopened = JsonlStorage(storage.path)

        assert asyncio.run(reopened.list()) == [revision.hash for revision in chain]

    def test_non_genesis_cannot_start_branch(self, storage, chain):
        with pytest.raises(BranchConflict):
            storage.genesis_context(chain[1])

    def test_genesis_under_foreign_context(self, storage, genesis):
        with pytest.raises(BranchConflict):
            asyncio.run(storage.store(genesis, Hash.digest(b"elsewhere")))

    def test_unknown_branch_raises_not_found(self, storage, chain):
        with pytest.raises(NotFound):
            asyncio.run(storage.store(chain[1], chain[0].hash))

    def test_fork_rejected(self, storage, chain):
        """A second child of genesis does not extend the tail."""
        fork = Revision.create({"main": "fork"}, "wiki.example", "20240103000000", previous=chain[0])

        async def run():
            context = await _store_chain(storage, chain)
            await storage.store(fork, context)

        with pytest.raises(BranchConflict):
            asyncio.run(run())

    def test_corrupt_record_raises_storage_error(self, storage, genesis):
        asyncio.run(storage.store(genesis, storage.genesis_context(genesis)))
        record = json.loads(storage.path.read_text().splitlines()[0])
        record["revision"]["metadata"]["metadata_hash"] = "0x" + record["revision"]["metadata"]["metadata_hash"]
        storage.path.write_text(json.dumps(record) + "\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.read(genesis.hash))

    def test_garbage_line_raises_storage_error(self, storage):
        storage.path.write_text("{not json\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.list())


class TestJsonlUpgrades:
    """Tests for re-storing a known hash with more attestations."""

    def test_witness_added_on_restore(self, storage, genesis, witnessed):
        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis, context)
            await storage.store(witnessed, context)
            return await storage.read(genesis.hash), await storage.list()

        restored, hashes = asyncio.run(run())

        assert restored == witnessed
        assert hashes == [genesis.hash]

    def test_signature_added_on_restore(self, storage, genesis, signing_key):
        signed = genesis.sign(signing_key)

        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis, context)
            await storage.store(signed, context)
            return await storage.read(genesis.hash)

        assert asyncio.run(run()) == signed

    def test_unattested_restore_keeps_attestations(self, storage, genesis, witnessed):
        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(witnessed, context)
            await storage.store(genesis, context)
            return await storage.read(genesis.hash)

        assert asyncio.run(run()) == witnessed
        assert len(storage.path.read_text().splitlines()) == 1

    def test_upgrade_appends_record(self, storage, genesis, witnessed, capsys):
        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis, context)
            await storage.store(witnessed, context)

        asyncio.run(run())

        records = [json.loads(line) for line in storage.path.read_text().splitlines()]
        assert [r["action"] for r in records] == ["stored", "upgraded"]
        receipt = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert receipt["action"] == "upgraded"
        assert receipt["witnessed"] is True

    def test_different_witness_conflicts(self, storage, witnessed):
        other = witnessed.with_witness(replace(witnessed.witness, witness_network="mainnet"))

        async def run():
            context = storage.genesis_context(witnessed)
            await storage.store(witnessed, context)
            await storage.store(other, context)

        with pytest.raises(BranchConflict):
            asyncio.run(run())
        assert asyncio.run(storage.read(witnessed.hash)) == witnessed

    def test_different_signer_conflicts(self, storage, genesis, signing_key, other_key):
        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis.sign(signing_key), context)
            await storage.store(genesis.sign(other_key), context)

        with pytest.raises(BranchConflict):
            asyncio.run(run())

    def test_different_content_map_conflicts(self, storage, genesis):
        altered = genesis.to_dict()
        altered["content"]["content"]["main"] = "edited after hashing"

        async def run():
            context = storage.genesis_context(genesis)
            await storage.store(genesis, context)
            await storage.store(Revision.from_dict(altered), context)

        with pytest.raises(BranchConflict):
            asyncio.run(run())


class TestJsonlRecordShape:
    """Tests for records that decode as JSON but are not revision records."""

    @pytest.mark.parametrize("line", [
        '{"branch": "x"}',
        '[1, 2, 3]',
        '"just a string"',
        '{"hash": 7, "branch": "x", "revision": {}}',
    ])
    def test_wrong_shape_raises_storage_error(self, storage, line):
        storage.path.write_text(line + "\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.list())

    def test_bad_hash_text_raises_storage_error(self, storage, genesis):
        asyncio.run(storage.store(genesis, storage.genesis_context(genesis)))
        record = json.loads(storage.path.read_text())
        record["hash"] = record["hash"].upper()
        storage.path.write_text(json.dumps(record) + "\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.get_branch(genesis.hash))
        with pytest.raises(StorageError):
            asyncio.run(storage.list())

    def test_missing_revision_raises_storage_error(self, storage, genesis):
        h = genesis.hash.format()
        storage.path.write_text(json.dumps({"hash": h, "branch": h}) + "\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.read(genesis.hash))

    def test_unknown_action_raises_storage_error(self, storage, genesis):
        asyncio.run(storage.store(genesis, storage.genesis_context(genesis)))
        record = json.loads(storage.path.read_text())
        record["action"] = "deleted"
        storage.path.write_text(json.dumps(record) + "\n")

        with pytest.raises(StorageError):
            asyncio.run(storage.list())

    def test_corrupt_record_emits_anomaly(self, storage, capsys):
        storage.path.write_text('{"branch": "x"}\n')

        with pytest.raises(StorageError):
            asyncio.run(storage.list())

        receipt = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert receipt["receipt_type"] == "anomaly"
        assert receipt["anomaly_type"] == "corrupt_record"
        assert receipt["line"] == 1


class TestJsonlBranches:
    """Tests for get_context, get_branch and list."""

    def test_context_is_genesis(self, storage, chain):
        asyncio.run(_store_chain(storage, chain))

        for revision in chain:
            assert asyncio.run(storage.get_context(revision.hash)) == chain[0].hash

    def test_get_context_unknown(self, storage):
        with pytest.raises(NotFound):
            asyncio.run(storage.get_context(Hash.digest(b"missing")))

    def test_get_branch(self, storage, chain):
        asyncio.run(_store_chain(storage, chain))

        branch = asyncio.run(storage.get_branch(chain[1].hash))

        assert branch.metadata == chain[0].hash
        assert branch.hashes == [revision.hash for revision in chain]
        assert branch.genesis == chain[0].hash

    def test_get_branch_unknown(self, storage):
        with pytest.raises(NotFound):
            asyncio.run(storage.get_branch(Hash.digest(b"missing")))

    def test_branches_kept_apart(self, storage, chain):
        other = Revision.create({"main": "other page"}, "wiki.example", "20240105000000")

        async def run():
            await _store_chain(storage, chain)
            await storage.store(other, storage.genesis_context(other))
            return await storage.get_branch(other.hash), await storage.list()

        branch, hashes = asyncio.run(run())

        assert branch.hashes == [other.hash]
        assert hashes == [revision.hash for revision in chain] + [other.hash]

    def test_list_empty(self, storage):
        assert asyncio.run(storage.list()) == []


class TestJsonlUpdates:
    """Tests for update_handler subscriptions."""

    def test_callback_receives_stores(self, storage, chain):
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append((h, d))))
            await asyncio.sleep(0)
            await _store_chain(storage, chain)
            await _wait_for(lambda: len(seen) == len(chain))
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        assert [h for h, _ in seen] == [revision.hash for revision in chain]
        assert all(d.startswith("stored") for _, d in seen)

    def test_sees_stores_from_other_instance(self, storage, genesis):
        """Two instances sharing one file, as two processes would."""
        writer = JsonlStorage(storage.path, poll_interval=storage.poll_interval)
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append(h)))
            await asyncio.sleep(0)
            await writer.store(genesis, writer.genesis_context(genesis))
            await _wait_for(lambda: seen)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        assert seen == [genesis.hash]

    def test_existing_records_not_replayed(self, storage, chain):
        asyncio.run(_store_chain(storage, chain[:2]))
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append(h)))
            await asyncio.sleep(0)
            await storage.store(chain[2], chain[0].hash)
            await _wait_for(lambda: seen)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        assert seen == [chain[2].hash]

    def test_upgrade_is_delivered(self, storage, genesis, witnessed):
        asyncio.run(storage.store(genesis, storage.genesis_context(genesis)))
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append((h, d))))
            await asyncio.sleep(0)
            await storage.store(witnessed, storage.genesis_context(genesis))
            await _wait_for(lambda: seen)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        assert seen[0][0] == genesis.hash
        assert seen[0][1].startswith("upgraded")

    def test_partial_line_waits_for_newline(self, storage, genesis):
        h = genesis.hash.format()
        line = json.dumps({"hash": h, "branch": h, "revision": genesis.to_dict()})
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append(h)))
            await asyncio.sleep(0)
            with open(storage.path, "a", encoding="utf-8") as f:
                f.write(line[:40])
            await asyncio.sleep(storage.poll_interval * 3)
            assert seen == []
            with open(storage.path, "a", encoding="utf-8") as f:
                f.write(line[40:] + "\n")
            await _wait_for(lambda: seen)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())

        assert seen == [genesis.hash]

    def test_cancel_unsubscribes(self, storage, genesis):
        seen = []

        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: seen.append(h)))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            await storage.store(genesis, storage.genesis_context(genesis))
            await asyncio.sleep(storage.poll_interval * 3)

        asyncio.run(run())

        assert seen == []

    def test_corrupt_append_raises_from_handler(self, storage):
        async def run():
            task = asyncio.create_task(storage.update_handler(lambda h, d: None))
            await asyncio.sleep(0)
            with open(storage.path, "a", encoding="utf-8") as f:
                f.write("{not json\n")
            await asyncio.wait_for(task, timeout=2.0)

        with pytest.raises(StorageError):
            asyncio.run(run())

    def test_concurrent_stores_serialized(self, storage, chain):
        """Racing stores of one revision leave a single record."""
        async def run():
            context = storage.genesis_context(chain[0])
            await asyncio.gather(*(storage.store(chain[0], context) for _ in range(5)))
            return await storage.list()

        assert asyncio.run(run()) == [chain[0].hash]
        assert len(storage.path.read_text().splitlines()) == 1
