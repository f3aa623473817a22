"""Test configuration and fixtures.

Keys: deterministic secp256k1 signing keys
Revisions: a small signed, witnessed chain
Storage: JSONL backend in a temp directory
"""
from ecdsa import SECP256k1, SigningKey

import pytest

from revproof.anchor import build_merkle_proof, merkle_root
from revproof.config import Settings, configure
from revproof.ids import Hash, TxHash
from revproof.models import FileContent, Revision, RevisionWitness
from revproof.storage import JsonlStorage

from tests.vectors import GOLDEN_TX_HASH, TIME_STAMP


@pytest.fixture(autouse=True)
def test_settings(tmp_path):
    """Fresh settings per test; receipts on so emission paths run."""
    configure(Settings(storage_path=str(tmp_path / "revisions.jsonl"), tenant_id="test"))
    yield
    configure(None)


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey.from_secret_exponent(0xC0FFEE, curve=SECP256k1)


@pytest.fixture
def other_key() -> SigningKey:
    return SigningKey.from_secret_exponent(0xBADC0DE, curve=SECP256k1)


@pytest.fixture
def genesis() -> Revision:
    return Revision.create(
        {"main": "first draft"},
        domain_id="wiki.example",
        time_stamp=TIME_STAMP,
        file=FileContent.create(b"hello world", "hello.txt", "greeting"),
    )


@pytest.fixture
def chain(genesis, signing_key) -> list[Revision]:
    """Genesis plus two revisions; the second is signed."""
    second = Revision.create({"main": "second draft"}, "wiki.example", "20240101120500", previous=genesis)
    third = Revision.create({"main": "final"}, "wiki.example", "20240102090000", previous=second)
    return [genesis, second.sign(signing_key), third]


@pytest.fixture
def leaves(genesis) -> list[Hash]:
    """Four-leaf batch with the genesis revision at index 2."""
    return [Hash.digest(b"a"), Hash.digest(b"b"), genesis.hash, Hash.digest(b"d")]


@pytest.fixture
def witnessed(genesis, leaves) -> Revision:
    witness = RevisionWitness.create(
        domain_snapshot_genesis_hash=Hash.digest(b"snapshot"),
        merkle_root=merkle_root(leaves),
        witness_network="sepolia",
        transaction_hash=TxHash.parse(GOLDEN_TX_HASH),
        proof=build_merkle_proof(leaves, 2),
    )
    return genesis.with_witness(witness)


@pytest.fixture
def storage(tmp_path) -> JsonlStorage:
    return JsonlStorage(tmp_path / "store" / "revisions.jsonl", poll_interval=0.01)
