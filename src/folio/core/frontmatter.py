"""Minimal front matter parser.

Parses the ``---`` delimited metadata block at the top of a content file.
Supports flat ``key: value`` pairs only: strings, numbers, booleans and
single-line ``[a, b, c]`` sequences. Malformed input never raises, it
degrades to "no front matter".
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

DELIMITER = "---"

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class Text:
    """String value."""

    value: str


@dataclass(frozen=True)
class Number:
    """Integer or floating-point value."""

    value: int | float


@dataclass(frozen=True)
class Flag:
    """Boolean value."""

    value: bool


@dataclass(frozen=True)
class Items:
    """Ordered sequence of strings."""

    value: tuple[str, ...]


MetaValue = Text | Number | Flag | Items


@dataclass(frozen=True)
class FrontMatterBlock:
    """Parsed content file: metadata plus the unparsed markdown body."""

    meta: Mapping[str, MetaValue] = field(default_factory=lambda: MappingProxyType({}))
    body: str = ""

    def get_text(self, key: str, default: str = "") -> str:
        """Return a metadata value rendered as a string.

        Numbers and booleans are formatted, sequences are joined with ", ".
        """
        value = self.meta.get(key)
        match value:
            case None:
                return default
            case Text(text):
                return text
            case Flag(flag):
                return "true" if flag else "false"
            case Number(number):
                return str(number)
            case Items(items):
                return ", ".join(items)

    def get_items(self, key: str) -> tuple[str, ...]:
        """Return a sequence value; a scalar becomes a one-element sequence."""
        value = self.meta.get(key)
        match value:
            case None:
                return ()
            case Items(items):
                return items
            case Text(""):
                return ()
            case _:
                return (self.get_text(key),)

    def to_dict(self) -> dict[str, str | int | float | bool | list[str]]:
        """Convert metadata to plain Python values for JSON serialization."""
        result: dict[str, str | int | float | bool | list[str]] = {}
        for key, value in self.meta.items():
            if isinstance(value, Items):
                result[key] = list(value.value)
            else:
                result[key] = value.value
        return result


def parse_front_matter(content: str) -> FrontMatterBlock:
    """Split content into front matter metadata and markdown body.

    Args:
        content: Raw content file text

    Returns:
        FrontMatterBlock with parsed metadata. When the content has no
        front matter, or the block is never closed, metadata is empty and
        the body is the unchanged input.
    """
    if not content.startswith(DELIMITER):
        return FrontMatterBlock(body=content)

    lines = content.split("\n")
    close = _find_closing_delimiter(lines)
    if close is None:
        return FrontMatterBlock(body=content)

    meta: dict[str, MetaValue] = {}
    for line in lines[1:close]:
        key, sep, raw_value = line.partition(":")
        if not sep:
            continue
        # Last occurrence of a key wins
        meta[key.strip()] = _coerce(raw_value.strip())

    body = "\n".join(lines[close + 1 :])
    return FrontMatterBlock(meta=MappingProxyType(meta), body=body)


def _find_closing_delimiter(lines: list[str]) -> int | None:
    for idx in range(1, len(lines)):
        if lines[idx].strip() == DELIMITER:
            return idx
    return None


def _coerce(raw: str) -> MetaValue:
    """Convert a trimmed raw value to its typed representation."""
    if raw.startswith("[") and raw.endswith("]"):
        return Items(_parse_sequence(raw[1:-1]))

    if raw == "true":
        return Flag(True)
    if raw == "false":
        return Flag(False)

    if raw and _NUMBER_RE.fullmatch(raw):
        number = _to_number(raw)
        if number is not None:
            return Number(number)

    return Text(_unquote(raw))


def _to_number(raw: str) -> int | float | None:
    """Convert a numeric literal, or None if it has no finite value.

    Integers beyond the interpreter's digit limit and exponents that
    overflow to infinity stay text.
    """
    try:
        if _INTEGER_RE.fullmatch(raw):
            return int(raw)
        number = float(raw)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_sequence(inner: str) -> tuple[str, ...]:
    if not inner.strip():
        return ()
    return tuple(_unquote(item.strip()) for item in inner.split(","))


def _unquote(value: str) -> str:
    """Strip one matching pair of surrounding single or double quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
