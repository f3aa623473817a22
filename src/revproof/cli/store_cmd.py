"""Store commands: import, list, read, branch."""
import asyncio
import json
import sys

import click

from revproof.config import get_settings
from revproof.core.errors import NotFound, ParseError, StorageError
from revproof.ids import Hash
from revproof.models import Revision
from revproof.storage import JsonlStorage

from .output import error_box, print_json, success_box, table


def _storage(path: str | None) -> JsonlStorage:
    return JsonlStorage(path or get_settings().storage_path)


@click.group()
@click.option('--path', default=None, help='JSONL storage file (default: REVPROOF_STORAGE_PATH)')
@click.pass_context
def store(ctx, path: str | None):
    """Revision storage operations."""
    ctx.obj = _storage(path)


@store.command(name="import")
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def import_revision(storage: JsonlStorage, file: str):
    """Store a revision JSON file, starting or extending its branch."""
    try:
        with open(file, encoding="utf-8") as f:
            rev = Revision.from_dict(json.load(f))

        async def run():
            if rev.is_genesis:
                context = storage.genesis_context(rev)
            else:
                context = await storage.get_context(rev.previous)
            await storage.store(rev, context)
            return context

        context = asyncio.run(run())
    except (ParseError, json.JSONDecodeError) as e:
        error_box("Store Import: MALFORMED", str(e))
        sys.exit(1)
    except StorageError as e:
        error_box("Store Import: FAILED", str(e))
        sys.exit(2)

    success_box("Store Import: SUCCESS", [
        ("Revision", rev.hash.format()),
        ("Branch", context.format()),
    ], "revproof store list")
    sys.exit(0)


@store.command(name="list")
@click.pass_obj
def list_hashes(storage: JsonlStorage):
    """List stored revision hashes in store order."""
    try:
        hashes = asyncio.run(storage.list())
    except StorageError as e:
        error_box("Store List: FAILED", str(e))
        sys.exit(2)

    table(["#", "Hash"], [[str(i), h.format()[:48]] for i, h in enumerate(hashes)])
    sys.exit(0)


@store.command()
@click.argument('revision_hash')
@click.pass_obj
def read(storage: JsonlStorage, revision_hash: str):
    """Print a stored revision as JSON."""
    try:
        rev = asyncio.run(storage.read(Hash.parse(revision_hash)))
    except ParseError as e:
        error_box("Store Read: MALFORMED", str(e))
        sys.exit(1)
    except NotFound:
        error_box("Store Read: NOT FOUND", revision_hash)
        sys.exit(1)
    except StorageError as e:
        error_box("Store Read: FAILED", str(e))
        sys.exit(2)

    print_json(rev.to_dict())
    sys.exit(0)


@store.command()
@click.argument('revision_hash')
@click.pass_obj
def branch(storage: JsonlStorage, revision_hash: str):
    """Print the branch containing a revision."""
    try:
        result = asyncio.run(storage.get_branch(Hash.parse(revision_hash)))
    except ParseError as e:
        error_box("Store Branch: MALFORMED", str(e))
        sys.exit(1)
    except NotFound:
        error_box("Store Branch: NOT FOUND", revision_hash)
        sys.exit(1)
    except StorageError as e:
        error_box("Store Branch: FAILED", str(e))
        sys.exit(2)

    print_json(result.to_dict(lambda genesis: genesis.format()))
    sys.exit(0)
