"""Commit payload flattening.

Turns an ergonomic nested payload into flat patch entries::

    commit("Switch to dark theme", {"user": {"profile": {"theme": wrap("dark")}}})
    # PatchAction(type="Switch to dark theme",
    #             entries=(PatchEntry(path_key="user.profile.theme", value="dark"),))

Only wrapped leaves are emitted. Plain mappings are descended into; anything
else is a mistake and raises :class:`UnwrappedValueError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pyglr._hooks import ErrorHandler, raise_error
from pyglr._redact import redact_for_log
from pyglr.actions import ROOT_KEY, TYPE_KEY, PatchAction, PatchEntry
from pyglr.exceptions import InvalidPathError, UnwrappedValueError
from pyglr.paths import MAY_CREATE_SEPARATOR, MUST_EXIST_SEPARATOR
from pyglr.values import Wrapped

_logger = logging.getLogger(__name__)


def flatten(
    payload: Any,
    message: str,
    *,
    on_error: ErrorHandler | None = None,
    log_max_string: int = 80,
) -> list[PatchEntry]:
    """Flatten a commit *payload* into patch entries.

    A wrapped payload short-circuits into a single root-replace entry. ``None``
    values inside the payload are holes and produce nothing. On an unwrapped
    leaf the whole call fails; no partial list is returned.
    """
    if isinstance(payload, Wrapped):
        if payload.ignore:
            return []
        return [PatchEntry(path_key=ROOT_KEY, value=payload.value)]

    if not payload:
        return []

    if not isinstance(payload, Mapping):
        raise_error(_unwrapped("", message, payload, log_max_string), on_error)

    entries: list[PatchEntry] = []

    def dig_in(node: Mapping[Any, Any], prefix: str, must_exist: bool) -> None:
        separator = MUST_EXIST_SEPARATOR if must_exist else MAY_CREATE_SEPARATOR
        for raw_key, value in node.items():
            key = prefix + str(raw_key)
            if value is None:
                continue
            if isinstance(value, Wrapped):
                if value.ignore:
                    continue
                if value.partial:
                    if value.value is None:
                        continue
                    if not isinstance(value.value, Mapping):
                        raise_error(_unwrapped(key, message, payload, log_max_string), on_error)
                    dig_in(value.value, key + MUST_EXIST_SEPARATOR, True)
                    continue
                # This is where we stop
                entries.append(PatchEntry(path_key=key, value=value.value))
            elif isinstance(value, Mapping):
                dig_in(value, key + separator, must_exist)
            else:
                raise_error(_unwrapped(key, message, payload, log_max_string), on_error)

    dig_in(payload, "", False)
    _logger.debug("Flattened commit %r into %d entries", message, len(entries))
    return entries


def _unwrapped(path: str, message: str, payload: Any, max_string: int) -> UnwrappedValueError:
    return UnwrappedValueError(
        f"You cannot commit value at {path or '<root>'!r} without wrapping it into wrap() "
        f"(commit {message!r}, payload {redact_for_log(payload, max_string=max_string)!r})",
        path=path,
        commit_message=message,
        payload=payload,
    )


def commit(
    message: str,
    payload: Any,
    patch: Mapping[str, Any] | None = None,
    *,
    on_error: ErrorHandler | None = None,
    log_max_string: int = 80,
) -> PatchAction:
    """Build an action from a nested, wrapped *payload*.

    *patch* holds extra path keys passed through verbatim (no wrapping), and
    applied before the flattened payload. A ``"type"`` key is rejected: in the
    redux-style action shape it would be read as the commit message.
    """
    if patch and TYPE_KEY in patch:
        raise_error(
            InvalidPathError(
                f"Commit patch cannot contain the reserved {TYPE_KEY!r} key (commit {message!r})",
                key=TYPE_KEY,
            ),
            on_error,
        )
    entries = [PatchEntry(path_key=str(key), value=value) for key, value in (patch or {}).items()]
    entries.extend(flatten(payload, message, on_error=on_error, log_max_string=log_max_string))
    return PatchAction(type=message, entries=tuple(entries))


def reset(message: str, state: Mapping[str, Any]) -> PatchAction:
    """Build an action that merges *state*'s top-level keys into the root.

    Suitable for store initialization; *state* doesn't need wrapping.
    """
    return PatchAction(type=message, entries=(PatchEntry(path_key=ROOT_KEY, value=state),))
