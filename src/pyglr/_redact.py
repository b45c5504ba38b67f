"""Helpers for safe debug logging.

State trees and patch payloads routinely carry user data (credentials, tokens,
large blobs). This module renders such values compactly, with sensitive
fields hidden, before they reach a log record or an error message.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pyglr.values import DELETE, Wrapped

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
    }
)


def _normalize_key(key: Any) -> str:
    # Path keys like "session.token" are judged by their last segment.
    last = re.split(r"[.!]", str(key))[-1]
    return last.lower().replace("_", "").replace("-", "")


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 50, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if value is DELETE:
        return "<delete>"

    if isinstance(value, Wrapped):
        if value.ignore:
            return "<ignore>"
        inner = redact_for_log(value.value, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return {f"<{type(value).__name__}>": inner}

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for index, (k, v) in enumerate(value.items()):
            if index >= max_items:
                redacted["…"] = f"<{len(value) - max_items} more>"
                break
            key = str(k)
            if _normalize_key(key) in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return redacted

    if isinstance(value, (list, tuple)):
        items = [
            redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for v in value[:max_items]
        ]
        if len(value) > max_items:
            items.append(f"<{len(value) - max_items} more>")
        return items

    # Opaque objects: show the type only, never their internals.
    return f"<{type(value).__name__}>"
