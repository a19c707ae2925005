"""Canonical string form for paths of either flavor.

The normalized form uses forward slashes only, keeps a genuine UNC or device
namespace prefix as ``//``, drops ``.`` and empty segments, and collapses
``..`` without ever letting it climb above an absolute root. Leading ``..``
segments of relative paths are kept.
"""

from __future__ import annotations

import re

from .coercion import path_like_to_string

_SEPARATORS = frozenset({"/", "\\"})
_SEPARATOR_RE = re.compile(r"[/\\]")
_DRIVE_SEGMENT_RE = re.compile(r"^[A-Za-z]:$")


def normalize_path(path_like: object) -> str:
    """Normalize slashes and collapse ``.``/``..`` segments.

    Examples:
        >>> normalize_path("//server/share/a/../b")
        '//server/share/b'
        >>> normalize_path("a/../../b")
        '../b'
    """

    filepath = path_like_to_string(path_like)
    length = len(filepath)
    if length == 0:
        return "."
    if length < 2:
        return "/" if filepath == "\\" else filepath

    prefix, start = _split_prefix(filepath)
    collapsed: list[str] = []
    for segment in _SEPARATOR_RE.split(filepath[start:]):
        if not segment or segment == ".":
            continue
        if segment != "..":
            collapsed.append(segment)
            continue
        if len(collapsed) > _root_segment_count(collapsed, prefix) and collapsed[-1] != "..":
            collapsed.pop()
        elif not prefix and (not collapsed or collapsed[-1] == ".."):
            collapsed.append(segment)

    if not collapsed:
        return "/" if prefix else "."
    if prefix == "//" and len(collapsed) < 2:
        # A server without its share (or a bare device) is not a UNC root.
        prefix = "/"
    return prefix + "/".join(collapsed)


def split_path(path_like: object) -> list[str]:
    """Split a path on either separator; an empty path has no segments."""

    filepath = path_like_to_string(path_like)
    if not filepath:
        return []
    return _SEPARATOR_RE.split(filepath)


def trim_leading_dot_slash(path_like: object) -> str:
    """Remove a leading ``./`` or ``.\\`` (but never ``../``)."""

    filepath = path_like_to_string(path_like)
    if filepath.startswith(("./", ".\\")):
        return filepath[2:]
    return filepath


def _root_segment_count(collapsed: list[str], prefix: str) -> int:
    """Return how many leading kept segments ``..`` may not pop.

    A ``//`` prefix is rooted at its server and share (or namespace and
    device); a bare ``X:`` first segment is a drive root.
    """

    if prefix == "//":
        return 2
    if not prefix and collapsed and _DRIVE_SEGMENT_RE.match(collapsed[0]):
        return 1
    return 0


def _split_prefix(filepath: str) -> tuple[str, int]:
    """Detect the root prefix and return it with the index where segments begin."""

    length = len(filepath)

    # Win32 namespaces: \\?\ and \\.\
    if (
        length > 4
        and filepath[0] == "\\"
        and filepath[1] == "\\"
        and filepath[2] in {"?", "."}
        and filepath[3] == "\\"
    ):
        return "//", 2

    # UNC paths start with exactly two slashes of the same kind.
    if length > 2 and (
        (filepath[0] == "\\" and filepath[1] == "\\" and filepath[2] != "\\")
        or (filepath[0] == "/" and filepath[1] == "/" and filepath[2] != "/")
    ):
        if _has_server_and_share(filepath):
            return "//", 2

    start = 0
    while start < length and filepath[start] in _SEPARATORS:
        start += 1
    return ("/" if start else ""), start


def _has_server_and_share(filepath: str) -> bool:
    """Return whether a double-slash path names both a server and a share."""

    length = len(filepath)
    index = 2
    while index < length and filepath[index] in _SEPARATORS:
        index += 1
    server_end = -1
    while index < length:
        if filepath[index] in _SEPARATORS:
            server_end = index
            break
        index += 1
    if server_end <= 2:
        return False

    index = server_end
    while index < length and filepath[index] in _SEPARATORS:
        index += 1
    return index < length
