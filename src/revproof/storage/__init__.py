"""Storage contract and the JSONL reference backend."""
from .base import Storage, UpdateCallback
from .jsonl import JsonlStorage

__all__ = ["JsonlStorage", "Storage", "UpdateCallback"]
