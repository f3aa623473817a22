"""Revision commands: verify a revision, a chain, or a witness."""
import json
import sys

import click

from revproof.anchor import verify_revision, verify_witness
from revproof.core.errors import ParseError, VerificationError
from revproof.ids import Hash
from revproof.models import HashChain, Revision, RevisionWitness

from .output import error_box, success_box


def _load_json(path: str) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        error_box("Load: FAILED", f"Invalid JSON: {e}")
        sys.exit(2)


def _report(title: str, receipt: dict, next_cmd: str | None = None) -> None:
    if receipt["status"] == "valid":
        success_box(f"{title}: VALID", [
            ("Revision", receipt["revision_hash"]),
            ("Checks", ", ".join(receipt["checks"])),
        ], next_cmd)
        sys.exit(0)
    error_box(f"{title}: INVALID", receipt["reason"])
    sys.exit(1)


@click.group()
def revision():
    """Revision integrity checks."""
    pass


@revision.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def verify(file: str):
    """Verify content, metadata, signature and witness of a revision JSON file."""
    try:
        rev = Revision.from_dict(_load_json(file))
    except ParseError as e:
        error_box("Revision Verify: MALFORMED", str(e))
        sys.exit(1)

    _report("Revision Verify", verify_revision(rev), "revproof store list")


@revision.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def chain(file: str):
    """Verify linkage and every revision of a hash chain JSON file."""
    try:
        hash_chain = HashChain.from_dict(_load_json(file))
        hash_chain.verify_linkage()
    except ParseError as e:
        error_box("Chain Verify: MALFORMED", str(e))
        sys.exit(1)
    except VerificationError as e:
        error_box("Chain Verify: INVALID", str(e))
        sys.exit(1)

    for _, rev in hash_chain.revisions:
        receipt = verify_revision(rev)
        if receipt["status"] != "valid":
            error_box("Chain Verify: INVALID", receipt["reason"])
            sys.exit(1)

    success_box("Chain Verify: VALID", [
        ("Title", hash_chain.title),
        ("Genesis", hash_chain.genesis_hash),
        ("Height", str(hash_chain.chain_height)),
    ])
    sys.exit(0)


@click.group()
def witness():
    """Ledger witness checks."""
    pass


@witness.command(name="verify")
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--leaf', required=True, help='Witnessed revision hash')
def verify_witness_cmd(file: str, leaf: str):
    """Replay the Merkle proof of a witness JSON file for LEAF."""
    try:
        leaf_hash = Hash.parse(leaf)
        rev_witness = RevisionWitness.from_dict(_load_json(file))
    except ParseError as e:
        error_box("Witness Verify: MALFORMED", str(e))
        sys.exit(1)

    receipt = verify_witness(leaf_hash, rev_witness)
    if receipt["status"] == "valid":
        success_box("Witness Verify: VALID", [
            ("Leaf", leaf),
            ("Root", rev_witness.merkle_root.format()),
            ("Network", rev_witness.witness_network),
            ("Tx", rev_witness.witness_event_transaction_hash.format()),
            ("Proof depth", str(len(rev_witness.structured_merkle_proof))),
        ])
        sys.exit(0)
    error_box("Witness Verify: INVALID", receipt["reason"])
    sys.exit(1)
