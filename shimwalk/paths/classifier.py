"""Flavor-independent classification of path-like values."""

from __future__ import annotations

import re

from .coercion import path_like_to_string
from .flavor import use_win32

_NODE_MODULES_RE = re.compile(r"(?:^|[/\\])node_modules(?:[/\\]|$)")
_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:[/\\]")


def is_absolute(path_like: object, *, win32: bool | None = None) -> bool:
    """Return whether a path is rooted.

    A leading ``/`` or ``\\`` is absolute on every flavor, so a drive-relative
    ``\\Windows`` classifies the same way on POSIX and Windows hosts. Drive
    letter roots such as ``C:\\`` or ``C:/`` only count in Windows mode.
    """

    filepath = path_like_to_string(path_like, win32=win32)
    if not filepath:
        return False
    if filepath[0] in {"/", "\\"}:
        return True
    return use_win32(win32) and bool(_DRIVE_ROOT_RE.match(filepath))


def is_relative(path_like: object, *, win32: bool | None = None) -> bool:
    """Return whether a path is not absolute; the empty path is relative."""

    filepath = path_like_to_string(path_like, win32=win32)
    if not filepath:
        return True
    return not is_absolute(filepath, win32=win32)


def is_path(path_like: object, *, win32: bool | None = None) -> bool:
    """Return whether a value names a file path rather than a package.

    ``lodash`` and ``@scope/name`` are package names. ``.``, ``..``, absolute
    paths, ``@scope/name/sub`` and anything containing ``\\`` are paths.
    """

    filepath = path_like_to_string(path_like, win32=win32)
    if not filepath:
        return False
    if filepath in {".", ".."}:
        return True
    if is_absolute(filepath, win32=win32):
        return True
    if "/" not in filepath and "\\" not in filepath:
        return False
    if (
        filepath.startswith("@")
        and not filepath.startswith("@/")
        and "\\" not in filepath
        and len(filepath.split("/")) == 2
    ):
        return False
    return True


def is_node_modules(path_like: object) -> bool:
    """Return whether any segment of the path is ``node_modules``."""

    return bool(_NODE_MODULES_RE.search(path_like_to_string(path_like)))
