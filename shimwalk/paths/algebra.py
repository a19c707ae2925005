"""``resolve`` and ``relative`` computed on normalized strings.

Neither function consults ``os.path``; only the working directory is read
from the host, and callers may pass it explicitly.
"""

from __future__ import annotations

import os
import re

from .classifier import is_absolute
from .coercion import path_like_to_string
from .flavor import use_win32
from .normalizer import normalize_path

_DRIVE_PREFIX_RE = re.compile(r"^[A-Za-z]:")


def resolve_path(
    *segments: object,
    cwd: str | None = None,
    win32: bool | None = None,
) -> str:
    """Resolve segments right to left into a normalized absolute path.

    Joining stops at the first absolute segment found from the right; when
    none is absolute, the working directory is prepended.

    Examples:
        ``resolve_path("/foo", "bar", "baz")`` -> ``/foo/bar/baz``
        ``resolve_path("foo", "/bar", "baz")`` -> ``/bar/baz``
    """

    resolved = ""
    resolved_absolute = False
    for raw_segment in reversed(segments):
        segment = path_like_to_string(raw_segment, win32=win32)
        if not segment:
            continue
        resolved = segment if not resolved else f"{segment}/{resolved}"
        if is_absolute(segment, win32=win32):
            resolved_absolute = True
            break

    if not resolved_absolute:
        base = cwd if cwd is not None else _current_directory()
        resolved = base if not resolved else f"{base}/{resolved}"

    return normalize_path(resolved)


def relative_path(
    from_path: object,
    to_path: object,
    *,
    cwd: str | None = None,
    win32: bool | None = None,
) -> str:
    """Return the shortest relative path leading from ``from_path`` to ``to_path``.

    Both sides are resolved first. The shared prefix only counts up to a
    directory boundary, so ``/a/bc`` and ``/a/b`` share ``/a`` and not
    ``/a/b``. In Windows mode comparison is case-insensitive. Paths under
    different roots (drives, or UNC shares against each other or a plain
    ``/``) yield the absolute destination.

    Examples:
        ``relative_path("/foo/bar", "/foo/baz")`` -> ``../baz``
        ``relative_path("/foo/bar/baz", "/foo")`` -> ``../..``
        ``relative_path("/foo", "/foo/bar")`` -> ``bar``
    """

    win32_mode = use_win32(win32)
    raw_from = path_like_to_string(from_path, win32=win32_mode)
    raw_to = path_like_to_string(to_path, win32=win32_mode)
    if raw_from == raw_to:
        return ""

    source = resolve_path(raw_from, cwd=cwd, win32=win32_mode)
    target = resolve_path(raw_to, cwd=cwd, win32=win32_mode)
    if source == target:
        return ""

    source_cmp = source.lower() if win32_mode else source
    target_cmp = target.lower() if win32_mode else target
    if source_cmp == target_cmp:
        return ""
    if _root_of(source_cmp, win32_mode) != _root_of(target_cmp, win32_mode):
        # No relative path crosses drives or UNC shares.
        return target

    # Index 0 is the root character and never part of the comparison.
    source_len = len(source) - 1
    target_len = len(target) - 1
    length = min(source_len, target_len)
    last_common_sep = -1
    index = 0
    while index < length:
        char = source_cmp[1 + index]
        if char != target_cmp[1 + index]:
            break
        if char == "/":
            last_common_sep = index
        index += 1

    if index == length:
        if target_len > length:
            if target[1 + index] == "/":
                # `source` is an ancestor of `target`.
                return target[1 + index + 1 :]
            if index == 0:
                # `source` is the root.
                return target[1 + index :]
        elif source_len > length:
            if source[1 + index] == "/":
                # `target` is an ancestor of `source`.
                last_common_sep = index
            elif index == 0:
                # `target` is the root.
                last_common_sep = 0

    ups: list[str] = []
    for position in range(1 + last_common_sep + 1, len(source) + 1):
        if position == len(source) or source[position] == "/":
            ups.append("..")
    return "/".join(ups) + target[1 + last_common_sep :]


def relative_resolve(from_path: object, to_path: object, **options: object) -> str:
    """Return :func:`relative_path` normalized; identical paths stay ``""``."""

    relative = relative_path(from_path, to_path, **options)
    if not relative:
        return ""
    return normalize_path(relative)


def _current_directory() -> str:
    # A deleted working directory makes getcwd fail; fall back to the root.
    try:
        return os.getcwd()
    except OSError:
        return "/"


def _root_of(path: str, win32: bool) -> str:
    """Return the UNC server/share or (in Windows mode) drive a path is rooted at."""

    if path.startswith("//"):
        return "//" + "/".join(path[2:].split("/")[:2])
    if win32:
        return _drive_of(path)
    return ""


def _drive_of(path: str) -> str:
    match = _DRIVE_PREFIX_RE.match(path)
    return match.group(0) if match else ""
