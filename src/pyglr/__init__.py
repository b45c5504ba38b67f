"""pyglr - Git-like patch reducer for immutable state trees."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyglr")
except PackageNotFoundError:
    __version__ = "0+local"
from pyglr._hooks import ErrorHandler
from pyglr.actions import ROOT_KEY, PatchAction, PatchEntry
from pyglr.config import GlrConfig
from pyglr.exceptions import (
    GlrConfigError,
    GlrError,
    InvalidPathError,
    KeyFieldMissingError,
    PathConflictError,
    UnwrappedValueError,
)
from pyglr.flatten import commit, flatten, reset
from pyglr.paths import PathSegment, format_path, parse_path
from pyglr.state.apply import CloneRegistry, apply_action, apply_patch
from pyglr.state.reducer import PatchReducer
from pyglr.values import (
    DELETE,
    IGNORE,
    IgnoreValue,
    PartialValue,
    SetValue,
    Wrapped,
    is_wrapped,
    partial,
    patch_list,
    patch_map,
    wrap,
)

__all__ = [
    "__version__",
    "DELETE",
    "IGNORE",
    "ROOT_KEY",
    "CloneRegistry",
    "ErrorHandler",
    "GlrConfig",
    "GlrConfigError",
    "GlrError",
    "IgnoreValue",
    "InvalidPathError",
    "KeyFieldMissingError",
    "PartialValue",
    "PatchAction",
    "PatchEntry",
    "PatchReducer",
    "PathConflictError",
    "PathSegment",
    "SetValue",
    "UnwrappedValueError",
    "Wrapped",
    "apply_action",
    "apply_patch",
    "commit",
    "flatten",
    "format_path",
    "is_wrapped",
    "parse_path",
    "partial",
    "patch_list",
    "patch_map",
    "reset",
    "wrap",
]
