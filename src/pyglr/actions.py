"""Patch actions.

A :class:`PatchAction` is what the reducer consumes: a commit message plus
flat ``(path_key, value)`` entries. :meth:`PatchAction.to_dict` produces the
redux-style shape ``{"type": message, "a.b": value, ...}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyglr.exceptions import InvalidPathError

ROOT_KEY = "."
"""Path key whose value's top-level keys are merged into the state root."""

TYPE_KEY = "type"


class PatchEntry(BaseModel):
    """One flat ``(path_key, value)`` pair.

    ``value`` is kept by reference; :data:`DELETE` removes the key.
    """

    model_config = ConfigDict(frozen=True)

    path_key: str
    value: Any = None

    @field_validator("path_key")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("path_key must be non-empty")
        return value

    @property
    def is_root(self) -> bool:
        return self.path_key == ROOT_KEY


class PatchAction(BaseModel):
    """A commit message and the entries to apply, in order."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Commit message")
    entries: tuple[PatchEntry, ...] = ()
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("type")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("type must be non-empty")
        return value

    def to_dict(self) -> dict[str, Any]:
        """Redux-style action mapping. Later entries win on duplicate keys.

        An entry for a top-level ``"type"`` state key has no place in that shape
        and raises :class:`InvalidPathError`; apply the action itself instead.
        """
        result: dict[str, Any] = {TYPE_KEY: self.type}
        for entry in self.entries:
            if entry.path_key == TYPE_KEY:
                raise InvalidPathError(
                    f"Entry {TYPE_KEY!r} collides with the message key of the action mapping",
                    key=TYPE_KEY,
                )
            result[entry.path_key] = entry.value
        return result

    @classmethod
    def from_dict(cls, action: Mapping[str, Any]) -> PatchAction:
        """Parse a redux-style action mapping; every key but ``type`` is a path key."""
        entries = tuple(
            PatchEntry(path_key=str(key), value=value) for key, value in action.items() if key != TYPE_KEY
        )
        return cls(type=action.get(TYPE_KEY, ""), entries=entries)
