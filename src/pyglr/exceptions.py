"""Custom exception hierarchy for pyglr."""

from __future__ import annotations

from typing import Any


class GlrError(Exception):
    """Base exception for all pyglr errors.

    ``info`` holds the structured diagnostics handed to error handlers.
    """

    def __init__(self, message: str, *, info: dict[str, Any] | None = None) -> None:
        self.info: dict[str, Any] = info if info is not None else {}
        super().__init__(message)


class GlrConfigError(GlrError):
    """Invalid or missing configuration."""


class InvalidPathError(GlrError, ValueError):
    """A path key does not follow the ``a.b!c`` grammar, or is reserved."""

    def __init__(self, message: str, *, key: str) -> None:
        self.key = key
        super().__init__(message, info={"key": key})


class KeyFieldMissingError(GlrError, KeyError):
    """An item passed to ``patch_list`` has no value for the key field."""

    def __init__(self, message: str, *, key_field: str, index: int, item: Any) -> None:
        self.key_field = key_field
        self.index = index
        self.item = item
        super().__init__(message, info={"key_field": key_field, "index": index, "item": item})

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class UnwrappedValueError(GlrError, TypeError):
    """Flattening reached a leaf that was not wrapped with ``wrap()``.

    Carries the dotted ``path`` reached, the commit ``message`` and the full
    original ``payload``.
    """

    def __init__(self, message: str, *, path: str, commit_message: str, payload: Any) -> None:
        self.path = path
        self.commit_message = commit_message
        self.payload = payload
        super().__init__(
            message,
            info={"path": path, "message": commit_message, "payload": payload},
        )


class PathConflictError(GlrError):
    """Traversal hit a value that can neither be cloned nor descended into.

    ``path`` is the full requested path split into segment names,
    ``path_index`` the index of the segment where the search ended, ``reached``
    the key text traversed before it (separators kept), ``node`` the container
    holding the offending child and ``value`` the value that could not be set.
    """

    def __init__(
        self,
        message: str,
        *,
        path: list[str],
        path_index: int,
        reached: str | None = None,
        node: Any,
        value: Any,
    ) -> None:
        self.path = path
        self.path_index = path_index
        self.reached = reached if reached is not None else ".".join(path[:path_index])
        self.node = node
        self.value = value
        super().__init__(
            message,
            info={
                "path": path,
                "path_index": path_index,
                "reached": self.reached,
                "target": node,
                "value": value,
            },
        )
