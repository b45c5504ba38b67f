"""Reducer context.

:class:`PatchReducer` bundles configuration and the error handler so call
sites don't rely on process-wide state. It is a plain ``(state, action)``
callable and can be dropped into any dispatch loop::

    reducer = PatchReducer()
    state = reducer(None, reducer.reset("Initial state", {"users": {}}))
    state = reducer(state, reducer.commit("Add users", {"users": reducer.patch_list(users)}))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pyglr._hooks import ErrorHandler
from pyglr._redact import redact_for_log
from pyglr.actions import TYPE_KEY, PatchAction, PatchEntry
from pyglr.config import GlrConfig
from pyglr.flatten import commit, flatten, reset
from pyglr.state.apply import apply_action, apply_patch
from pyglr.values import SetValue, patch_list

_logger = logging.getLogger(__name__)


class PatchReducer:
    """Applies patch actions with a fixed configuration and error handler."""

    def __init__(self, config: GlrConfig | None = None, *, on_error: ErrorHandler | None = None) -> None:
        self._config = config if config is not None else GlrConfig()
        self._on_error = on_error

    @property
    def config(self) -> GlrConfig:
        return self._config

    @property
    def error_handler(self) -> ErrorHandler | None:
        return self._on_error

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        """Set the function notified before any error is raised. ``None`` clears it."""
        self._on_error = handler

    def __call__(self, state: Mapping[str, Any] | None, action: PatchAction | Mapping[str, Any]) -> dict[str, Any]:
        if self._config.trace_enabled:
            if isinstance(action, PatchAction):
                message, shown = action.type, {entry.path_key: entry.value for entry in action.entries}
            else:
                message, shown = action.get(TYPE_KEY), {k: v for k, v in action.items() if k != TYPE_KEY}
            _logger.debug("Reducing %r: %r", message, redact_for_log(shown, max_string=self._config.log_max_string))
        return apply_action(
            state,
            action,
            on_error=self._on_error,
            trace=self._config.trace_enabled,
            log_max_string=self._config.log_max_string,
        )

    def apply(
        self,
        state: Mapping[str, Any] | None,
        entries: Iterable[PatchEntry | tuple[str, Any]],
    ) -> dict[str, Any]:
        return apply_patch(
            state,
            entries,
            on_error=self._on_error,
            trace=self._config.trace_enabled,
            log_max_string=self._config.log_max_string,
        )

    def flatten(self, payload: Any, message: str) -> list[PatchEntry]:
        return flatten(payload, message, on_error=self._on_error, log_max_string=self._config.log_max_string)

    def commit(self, message: str, payload: Any, patch: Mapping[str, Any] | None = None) -> PatchAction:
        return commit(message, payload, patch, on_error=self._on_error, log_max_string=self._config.log_max_string)

    def reset(self, message: str, state: Mapping[str, Any]) -> PatchAction:
        return reset(message, state)

    def patch_list(self, items: Iterable[Any], key_field: str | None = None) -> dict[Any, SetValue]:
        """Like :func:`pyglr.patch_list`, defaulting to the configured key field."""
        return patch_list(
            items,
            key_field if key_field is not None else self._config.key_field,
            stringify=self._config.stringify_keys,
            on_error=self._on_error,
        )
