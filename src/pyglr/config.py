"""Configuration for pyglr."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyglr.exceptions import GlrConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise GlrConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GlrConfig:
    """Reducer configuration.

    Parameters
    ----------
    key_field : str
        Item field used by ``patch_list`` to key upserts. Defaults to ``"id"``.
    stringify_keys : bool
        Coerce ``patch_list`` keys to ``str``. Path keys are always strings,
        so turning this off only matters for callers that post-process the
        patch mapping themselves.
    trace_enabled : bool
        Log every applied patch entry at DEBUG level.
    log_max_string : int
        Strings longer than this are truncated in log records and error
        messages.
    """

    key_field: str = "id"
    stringify_keys: bool = True
    trace_enabled: bool = False
    log_max_string: int = 512

    def __post_init__(self) -> None:
        if not self.key_field:
            raise GlrConfigError("key_field must be non-empty")
        if self.log_max_string <= 0:
            raise GlrConfigError("log_max_string must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> GlrConfig:
        """Create configuration from ``GLR_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        key_field = env.get("GLR_KEY_FIELD")
        if key_field is not None:
            config_kwargs["key_field"] = key_field.strip()

        config_kwargs["stringify_keys"] = _env_bool(env.get("GLR_STRINGIFY_KEYS"), True)
        config_kwargs["trace_enabled"] = _env_bool(env.get("GLR_TRACE_ENABLED"), False)

        max_string_env = env.get("GLR_LOG_MAX_STRING")
        if max_string_env is not None and "log_max_string" not in overrides:
            config_kwargs["log_max_string"] = _env_int("GLR_LOG_MAX_STRING", max_string_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
