"""Value wrappers for commit payloads.

Every leaf of a commit payload must be wrapped to say what it means:

* :func:`wrap` marks a terminal value to set (``wrap(DELETE)`` removes the key);
* :data:`IGNORE` skips the key, handy in conditional expressions;
* :func:`partial` keeps flattening into a nested object, but nothing below it
  may create missing intermediate objects in the state.

Example::

    commit("Switch to dark theme", {"user": {"profile": {"theme": wrap("dark")}}})
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from pyglr._hooks import ErrorHandler, raise_error
from pyglr.exceptions import KeyFieldMissingError


class _Delete(enum.Enum):
    DELETE = "DELETE"

    def __repr__(self) -> str:
        return "DELETE"


DELETE = _Delete.DELETE
"""Wrap this to remove a key from the state instead of setting it."""


@dataclasses.dataclass(frozen=True)
class Wrapped:
    """Base for the three wrapper cases."""

    ignore: ClassVar[bool] = False
    partial: ClassVar[bool] = False

    value: Any = None


@dataclasses.dataclass(frozen=True)
class SetValue(Wrapped):
    """Terminal value to set at the key's path."""


@dataclasses.dataclass(frozen=True)
class IgnoreValue(Wrapped):
    """Skip the key entirely."""

    ignore: ClassVar[bool] = True


@dataclasses.dataclass(frozen=True)
class PartialValue(Wrapped):
    """Flatten into ``value`` with must-exist semantics from here down."""

    partial: ClassVar[bool] = True


IGNORE = IgnoreValue()


def is_wrapped(value: Any) -> bool:
    return isinstance(value, Wrapped)


def wrap(value: Any) -> Wrapped:
    """Mark *value* as a terminal value to set. Already wrapped values pass through."""
    if isinstance(value, Wrapped):
        return value
    return SetValue(value)


def partial(patch: Mapping[str, Any]) -> PartialValue:
    """Apply *patch* only where its target objects already exist.

    If an object along the way is missing from the state, the affected entries
    are skipped silently instead of creating it.
    """
    return PartialValue(patch)


def _item_key(item: Any, key_field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(key_field)
    return getattr(item, key_field, None)


def patch_list(
    items: Iterable[Any],
    key_field: str = "id",
    *,
    stringify: bool = True,
    on_error: ErrorHandler | None = None,
) -> dict[Any, SetValue]:
    """Turn a list of items into an upsert-by-key patch.

    Example::

        patch_list([{"id": 1, "name": "Jack"}, {"id": 2, "name": "Jill"}])
        # {"1": wrap({"id": 1, "name": "Jack"}), "2": wrap({"id": 2, "name": "Jill"})}

    Items may be mappings or objects exposing *key_field* as an attribute.
    """
    patch: dict[Any, SetValue] = {}
    for index, item in enumerate(items):
        key = _item_key(item, key_field)
        if key is None:
            raise_error(
                KeyFieldMissingError(
                    f"Item #{index} has no {key_field!r} field to key the patch by",
                    key_field=key_field,
                    index=index,
                    item=item,
                ),
                on_error,
            )
        patch[str(key) if stringify else key] = SetValue(item)
    return patch


def patch_map(patch: Mapping[Any, Any]) -> dict[Any, Wrapped]:
    """Wrap every value of *patch*, one level deep.

    Example::

        patch_map({"id": 5, "name": "John"})
        # {"id": wrap(5), "name": wrap("John")}
    """
    return {key: wrap(value) for key, value in patch.items()}
