"""Copy-on-write patch application.

Given a path like ``"a.b.c"``, :func:`apply_patch` does the shallow
equivalent of::

    {**state, "a": {**state["a"], "b": {**state["a"]["b"], "c": value}}}

Only containers on a modified path are recreated; every other subtree of the
previous state is reused by reference. Within one call a container is cloned
at most once, however many entries pass through it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pyglr._hooks import ErrorHandler, raise_error
from pyglr._redact import redact_for_log
from pyglr.actions import PatchAction, PatchEntry
from pyglr.exceptions import InvalidPathError, PathConflictError
from pyglr.paths import PathSegment, format_path, parse_path
from pyglr.values import DELETE

_logger = logging.getLogger(__name__)


class CloneRegistry:
    """Containers cloned or created during a single :func:`apply_patch` call.

    Membership is by identity. Registered nodes are kept referenced so their
    ids cannot be reused while the registry lives.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, Any] = {}

    def add(self, node: Any) -> None:
        self._nodes[id(node)] = node

    def __contains__(self, node: object) -> bool:
        return id(node) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


def _list_index(name: str) -> int | None:
    if name.isascii() and name.isdigit():
        return int(name)
    return None


def _get_child(node: Mapping[str, Any] | list[Any], name: str) -> Any:
    """Child at *name*, or ``None`` when absent."""
    if isinstance(node, Mapping):
        return node.get(name)
    index = _list_index(name)
    if index is None or index >= len(node):
        return None
    return node[index]


def _replace_child(node: dict[str, Any] | list[Any], name: str, child: Any) -> None:
    if isinstance(node, dict):
        node[name] = child
    else:
        node[int(name)] = child


def _assign(node: dict[str, Any] | list[Any], name: str, value: Any) -> bool:
    """Set or delete the final segment. Returns False if *node* can't take it."""
    if isinstance(node, dict):
        if value is DELETE:
            node.pop(name, None)
        else:
            node[name] = value
        return True

    index = _list_index(name)
    if index is None or index > len(node):
        return False
    if value is DELETE:
        if index < len(node):
            del node[index]
    elif index == len(node):
        node.append(value)
    else:
        node[index] = value
    return True


def _find_missing(node: Mapping[str, Any] | list[Any] | None, segments: list[PathSegment]) -> int | None:
    """Index of the first must-exist segment with nothing behind it, or ``None``.

    Read-only walk over the existing tree, so a skipped entry changes nothing.
    ``node`` becomes ``None`` below a segment that would be created. Opaque
    values stop the walk; the write pass reports those as conflicts.
    """
    for index, segment in enumerate(segments[:-1]):
        child = None if node is None else _get_child(node, segment.name)
        if child is None:
            if segment.must_exist:
                return index
            if node is not None and not isinstance(node, Mapping):
                return None
        elif not isinstance(child, (list, Mapping)):
            return None
        node = child
    return None


def _deep_set(
    target: dict[str, Any] | list[Any],
    segments: list[PathSegment],
    value: Any,
    registry: CloneRegistry,
) -> tuple[int, Any] | None:
    """Walk *segments* from *target*, cloning containers on the way, and set *value*.

    Returns ``(path_index, node)`` when the walk hits something it can't
    traverse, ``None`` when the value was set. Must-exist misses are ruled out
    beforehand by :func:`_find_missing`.
    """
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if index == last:
            if _assign(target, segment.name, value):
                return None
            return index, target

        child = _get_child(target, segment.name)
        if isinstance(child, list):
            if child not in registry:
                child = child[:]
                _replace_child(target, segment.name, child)
                registry.add(child)
        elif isinstance(child, Mapping):
            if child not in registry:
                child = dict(child)
                _replace_child(target, segment.name, child)
                registry.add(child)
        elif child is None and isinstance(target, dict) and not segment.must_exist:
            # Create plain dicts along the way if none exist yet.
            child = {}
            target[segment.name] = child
            registry.add(child)
        else:
            # None inside a list, or an opaque object. Can't clone it.
            return index, target

        target = child

    return None


def _coerce_entry(entry: PatchEntry | tuple[str, Any]) -> PatchEntry:
    if isinstance(entry, PatchEntry):
        return entry
    path_key, value = entry
    return PatchEntry(path_key=path_key, value=value)


def apply_patch(
    state: Mapping[str, Any] | None,
    entries: Iterable[PatchEntry | tuple[str, Any]],
    *,
    on_error: ErrorHandler | None = None,
    trace: bool = False,
    log_max_string: int = 80,
) -> dict[str, Any]:
    """Apply *entries* to *state* and return the new state.

    Entries are :class:`PatchEntry` objects or ``(path_key, value)`` pairs,
    applied in order; later entries win.

    *state* is never mutated. ``None`` starts from an empty dict; setting up
    the real initial state (see :func:`pyglr.reset`) is up to the caller.
    Raises :class:`PathConflictError` when a path runs into an opaque value.
    """
    root: dict[str, Any] = {} if state is None else dict(state)
    registry = CloneRegistry()

    for item in entries:
        entry = _coerce_entry(item)
        if entry.is_root:
            if not isinstance(entry.value, Mapping):
                raise_error(
                    PathConflictError(
                        f"Root replace needs a mapping, got {type(entry.value).__name__}",
                        path=[],
                        path_index=0,
                        node=root,
                        value=entry.value,
                    ),
                    on_error,
                )
            root.update(entry.value)
            if trace:
                _logger.debug("Merged %d keys into the root", len(entry.value))
            continue

        try:
            segments = parse_path(entry.path_key)
        except InvalidPathError as exc:
            raise_error(exc, on_error)

        missing = _find_missing(root, segments)
        if missing is not None:
            _logger.debug(
                "Skipping %s: %s does not exist",
                entry.path_key,
                format_path(segments, missing + 1),
            )
            continue

        failure = _deep_set(root, segments, entry.value, registry)
        if failure is not None:
            path_index, node = failure
            path = [segment.name for segment in segments]
            raise_error(
                PathConflictError(
                    f"Couldn't update state at path {format_path(segments)!r}. "
                    f"Search has ended at path {format_path(segments, path_index)!r}. "
                    "This is likely due to not using wrap() or a corrupted state.",
                    path=path,
                    path_index=path_index,
                    reached=format_path(segments, path_index),
                    node=node,
                    value=entry.value,
                ),
                on_error,
            )
        if trace:
            _logger.debug("Applied %r", redact_for_log({entry.path_key: entry.value}, max_string=log_max_string))

    return root


def apply_action(
    state: Mapping[str, Any] | None,
    action: PatchAction | Mapping[str, Any],
    *,
    on_error: ErrorHandler | None = None,
    trace: bool = False,
    log_max_string: int = 80,
) -> dict[str, Any]:
    """Apply a :class:`PatchAction` or a redux-style action mapping."""
    if not isinstance(action, PatchAction):
        action = PatchAction.from_dict(action)
    _logger.debug("Applying %r (%d entries)", action.type, len(action.entries))
    return apply_patch(state, action.entries, on_error=on_error, trace=trace, log_max_string=log_max_string)
