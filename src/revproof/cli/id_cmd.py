"""Identifier commands: parse, digest, address."""
import sys

import click

from revproof.core.errors import ParseError
from revproof.ids import Address, Hash, PublicKey, Signature, TxHash, derive_address

from .output import error_box, success_box

PARSERS = {
    "hash": Hash.parse,
    "tx": TxHash.parse,
    "pubkey": PublicKey.parse,
    "sig": Signature.parse,
    "address": Address.parse,
}


@click.group(name="id")
def id_group():
    """Canonical identifier operations."""
    pass


@id_group.command()
@click.argument('kind', type=click.Choice(sorted(PARSERS)))
@click.argument('value')
@click.option('--lenient', is_flag=True, help='Accept a tx hash without its 0x prefix')
def parse(kind: str, value: str, lenient: bool):
    """Validate VALUE as a canonical identifier of KIND."""
    parser = TxHash.parse_lenient if (kind == "tx" and lenient) else PARSERS[kind]
    try:
        parsed = parser(value)
    except ParseError as e:
        error_box(f"Parse {kind}: REJECTED", f"{e.kind}: {e.detail or e.type_name}")
        sys.exit(1)

    rows = [("Kind", type(parsed).__name__), ("Canonical", parsed.format())]
    if isinstance(parsed, Signature):
        rows.append(("Recovery id", str(parsed.recovery_id)))
    if isinstance(parsed, PublicKey):
        rows.append(("Address", derive_address(parsed).format()))
    success_box(f"Parse {kind}: OK", rows)
    sys.exit(0)


@id_group.command()
@click.argument('data', required=False)
@click.option('--file', 'path', type=click.Path(exists=True, dir_okay=False), help='Hash file contents')
def digest(data: str | None, path: str | None):
    """Compute the SHA3-512 Hash of DATA or a file."""
    if path:
        with open(path, "rb") as f:
            payload = f.read()
    elif data is not None:
        payload = data.encode("utf-8")
    else:
        error_box("Digest: NO DATA", "Provide DATA or --file")
        sys.exit(2)

    click.echo(Hash.digest(payload).format())
    sys.exit(0)


@id_group.command()
@click.argument('public_key')
def address(public_key: str):
    """Derive the ledger address of PUBLIC_KEY."""
    try:
        derived = derive_address(PublicKey.parse(public_key))
    except ParseError as e:
        error_box("Address: REJECTED", f"{e.kind}: {e.detail or e.type_name}")
        sys.exit(1)

    success_box("Address", [
        ("Address", derived.format()),
        ("Checksum", derived.checksum()),
    ])
    sys.exit(0)
