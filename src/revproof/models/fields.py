"""Field extraction for from_dict decoders."""
from typing import Callable, TypeVar

from revproof.core.errors import InvalidField

T = TypeVar("T")


def require(data: dict, key: str, expected: type | tuple, owner: str):
    """Return data[key], checking presence and type."""
    if not isinstance(data, dict):
        raise InvalidField(owner, data, "expected an object")
    if key not in data:
        raise InvalidField(owner, key, "missing field")
    value = data[key]
    # bool is an int subclass; never accept it for numeric fields
    if isinstance(value, bool) and expected is not bool:
        raise InvalidField(owner, key, "unexpected boolean")
    if not isinstance(value, expected):
        raise InvalidField(owner, key, f"expected {getattr(expected, '__name__', expected)}")
    return value


def parse_field(data: dict, key: str, parser: Callable[[str], T], owner: str) -> T:
    """Return parser(data[key]); the parser's own ParseError propagates."""
    return parser(require(data, key, str, owner))


def optional_field(data: dict, key: str, parser: Callable[[str], T], owner: str) -> T | None:
    if data.get(key) is None:
        return None
    return parse_field(data, key, parser, owner)
