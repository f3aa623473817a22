"""
Entry point for running revproof as a module.

Usage:
    python -m revproof [command] [options]

Example:
    python -m revproof id parse hash <128 hex chars>
    python -m revproof revision verify revision.json
    python -m revproof store --path revisions.jsonl list
"""

from revproof.cli.main import cli

if __name__ == "__main__":
    cli()
