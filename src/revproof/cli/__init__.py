"""Command line interface for revproof."""
from .main import cli

__all__ = ["cli"]
