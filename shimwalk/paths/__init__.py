"""Pure, flavor-independent path helpers (no filesystem access)."""

from .algebra import relative_path, relative_resolve, resolve_path
from .classifier import is_absolute, is_node_modules, is_path, is_relative
from .coercion import path_like_to_string
from .normalizer import normalize_path, split_path, trim_leading_dot_slash

__all__ = [
    "is_absolute",
    "is_node_modules",
    "is_path",
    "is_relative",
    "normalize_path",
    "path_like_to_string",
    "relative_path",
    "relative_resolve",
    "resolve_path",
    "split_path",
    "trim_leading_dot_slash",
]
