"""User-visible revision content.

The content map is hashed in canonical JSON form (sorted keys, compact
separators) so callers hashing the same logical content always agree.
When a file is attached, its SHA3-512 hash is carried in the map under
FILE_HASH_KEY and so is covered by content_hash.
"""
import base64
import binascii
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from revproof.core.constants import FILE_HASH_KEY
from revproof.core.errors import ContentHashMismatch, InvalidBase64, InvalidField
from revproof.core.receipt import canonical_json
from revproof.ids import Hash

from .fields import parse_field, require


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Standard alphabet with padding. Whitespace is not tolerated."""
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidBase64("FileContent", text, str(e)) from e


@dataclass(frozen=True)
class FileContent:
    """An attached file. `size` must equal len(data)."""

    data: bytes
    filename: str
    size: int
    comment: str = ""

    def __post_init__(self):
        if self.size != len(self.data):
            raise InvalidField("FileContent", self.size, f"size does not match payload length {len(self.data)}")
        if not 0 <= self.size <= 0xFFFFFFFF:
            raise InvalidField("FileContent", self.size, "size exceeds uint32")

    @classmethod
    def create(cls, data: bytes, filename: str, comment: str = "") -> "FileContent":
        return cls(data=bytes(data), filename=filename, size=len(data), comment=comment)

    def file_hash(self) -> Hash:
        return Hash.digest(self.data)

    def to_dict(self) -> dict:
        return {
            "data": encode_base64(self.data),
            "filename": self.filename,
            "size": self.size,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileContent":
        return cls(
            data=decode_base64(require(data, "data", str, "FileContent")),
            filename=require(data, "filename", str, "FileContent"),
            size=require(data, "size", int, "FileContent"),
            comment=require(data, "comment", str, "FileContent"),
        )


def hash_content(content: Mapping[str, str]) -> Hash:
    """SHA3-512 over the canonical JSON form of a content map."""
    return Hash.digest(canonical_json(dict(content)))


@dataclass(frozen=True)
class RevisionContent:
    """Optional file, content map and the content hash binding them."""

    content: Mapping[str, str]
    content_hash: Hash
    file: FileContent | None = None

    def __post_init__(self):
        object.__setattr__(self, "content", MappingProxyType(dict(self.content)))

    @classmethod
    def create(cls, content: Mapping[str, str], file: FileContent | None = None) -> "RevisionContent":
        """Build content, adding the file hash entry and hashing the map."""
        entries = dict(content)
        if file is not None:
            entries[FILE_HASH_KEY] = file.file_hash().format()
        for key, value in entries.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidField("RevisionContent", key, "content entries must be str -> str")
        return cls(content=entries, content_hash=hash_content(entries), file=file)

    def verify(self) -> None:
        """Recompute the content and file hashes.

        Raises:
            ContentHashMismatch: Stored hash differs from the recomputed one
        """
        if self.file is not None:
            stored = self.content.get(FILE_HASH_KEY)
            if stored != self.file.file_hash().format():
                raise ContentHashMismatch(f"{FILE_HASH_KEY} does not match attached file")

        computed = hash_content(self.content)
        if computed != self.content_hash:
            raise ContentHashMismatch(
                f"content_hash {self.content_hash.format()[:16]}.. != computed {computed.format()[:16]}.."
            )

    def to_dict(self) -> dict:
        result = {
            "content": dict(self.content),
            "content_hash": self.content_hash.format(),
        }
        if self.file is not None:
            result["file"] = self.file.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "RevisionContent":
        content = require(data, "content", dict, "RevisionContent")
        for key, value in content.items():
            if not isinstance(value, str):
                raise InvalidField("RevisionContent", key, "content values must be strings")
        file = data.get("file")
        return cls(
            content=content,
            content_hash=parse_field(data, "content_hash", Hash.parse, "RevisionContent"),
            file=FileContent.from_dict(file) if file is not None else None,
        )
