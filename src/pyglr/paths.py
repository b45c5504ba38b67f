"""Path key grammar.

A path key is a list of segment names joined by separators::

    "config.permissions!byPage"

A segment followed by ``.`` (or ending the key) may be created when missing.
A segment followed by ``!`` must already exist: if it doesn't, the entry is
skipped instead of creating it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from pyglr.exceptions import InvalidPathError

MAY_CREATE_SEPARATOR = "."
MUST_EXIST_SEPARATOR = "!"

_SEPARATORS = frozenset({MAY_CREATE_SEPARATOR, MUST_EXIST_SEPARATOR})


class PathSegment(NamedTuple):
    name: str
    must_exist: bool = False


def parse_path(key: str) -> list[PathSegment]:
    """Split *key* into segments in a single left-to-right scan.

    Raises :class:`InvalidPathError` for an empty key or an empty segment
    (``"a..b"``, ``".a"``, ``"a!"``). The root key ``"."`` is not a path and
    must be handled by the caller.
    """
    if not key:
        raise InvalidPathError("Path key must be non-empty", key=key)

    segments: list[PathSegment] = []
    start = 0
    for index, char in enumerate(key):
        if char not in _SEPARATORS:
            continue
        if index == start:
            raise InvalidPathError(f"Empty segment at position {index} in path {key!r}", key=key)
        segments.append(PathSegment(key[start:index], char == MUST_EXIST_SEPARATOR))
        start = index + 1

    if start == len(key):
        raise InvalidPathError(f"Path {key!r} ends with a separator", key=key)
    segments.append(PathSegment(key[start:], False))
    return segments


def format_path(segments: Sequence[PathSegment], stop: int | None = None) -> str:
    """Rebuild the key text for ``segments[:stop]``."""
    selected = segments[:stop]
    parts: list[str] = []
    for index, segment in enumerate(selected):
        parts.append(segment.name)
        if index < len(selected) - 1:
            parts.append(MUST_EXIST_SEPARATOR if segment.must_exist else MAY_CREATE_SEPARATOR)
    return "".join(parts)
