"""revproof CLI entry point - assembles all command groups."""
import logging

import click

from revproof import __version__

from .id_cmd import id_group
from .revision_cmd import revision, witness
from .store_cmd import store


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log diagnostics to stderr')
def cli(verbose: bool):
    """revproof: canonical identifiers, revision chains and witness proofs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


cli.add_command(id_group)
cli.add_command(revision)
cli.add_command(witness)
cli.add_command(store)


if __name__ == "__main__":
    cli()
