"""Error handler hook.

Handlers are notification-only: they see every error before it is raised,
but cannot stop the raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, NoReturn

from pyglr.exceptions import GlrError

_logger = logging.getLogger(__name__)

ErrorHandler = Callable[[str, dict[str, Any]], None]


def raise_error(error: GlrError, handler: ErrorHandler | None = None) -> NoReturn:
    """Notify *handler* about *error*, then raise it."""
    if handler is not None:
        try:
            handler(str(error), error.info)
        except Exception:
            _logger.warning("Error handler failed while reporting %s", type(error).__name__, exc_info=True)
    raise error
