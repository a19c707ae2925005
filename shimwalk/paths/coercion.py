"""Coercion of path-like values into plain strings.

Responsibilities:
- Accept text, byte buffers, ``os.PathLike`` objects and parsed ``file:`` URLs.
- Convert ``file:`` URLs for the active flavor, with a lenient fallback for
  Windows URLs that lack a drive letter.
- Never raise: unsupported input degrades to ``""`` or ``str(value)``.
"""

from __future__ import annotations

import os
import re
from typing import Union
from urllib.parse import ParseResult, SplitResult, unquote

from .flavor import use_win32

ParsedUrl = Union[ParseResult, SplitResult]
PathLike = Union[str, bytes, bytearray, memoryview, "os.PathLike[str]", "os.PathLike[bytes]", ParsedUrl, None]

_DRIVE_LETTER_RE = re.compile(r"^/[A-Za-z]:")
_POSIX_ENCODED_SEPARATOR_RE = re.compile(r"%2f", re.IGNORECASE)
_WIN32_ENCODED_SEPARATOR_RE = re.compile(r"%(?:2f|5c)", re.IGNORECASE)


class _InvalidFileUrl(ValueError):
    """Raised internally when strict file URL conversion is impossible."""


def path_like_to_string(path_like: object, *, win32: bool | None = None) -> str:
    """Convert a path-like value to a string.

    Args:
        path_like: Text, bytes-like buffer, ``os.PathLike`` or parsed URL.
        win32: Optional flavor override used for ``file:`` URL conversion.

    Returns:
        The string form of the path. ``None`` and non-``file:`` URLs yield
        ``""``; unsupported objects yield ``str(value)``.
    """

    if path_like is None:
        return ""
    if isinstance(path_like, str):
        return path_like
    if isinstance(path_like, (bytes, bytearray, memoryview)):
        return bytes(path_like).decode("utf-8", errors="replace")
    if isinstance(path_like, (ParseResult, SplitResult)):
        return _url_to_string(path_like, use_win32(win32))
    if isinstance(path_like, os.PathLike):
        value = os.fspath(path_like)
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return value
    return str(path_like)


def _url_to_string(url: ParsedUrl, win32: bool) -> str:
    """Convert a parsed URL, falling back to its decoded pathname."""

    if url.scheme.lower() != "file":
        return ""
    try:
        return _file_url_to_path(url, win32)
    except _InvalidFileUrl:
        pass

    decoded = unquote(url.path)
    if win32 and decoded.startswith("/") and not _DRIVE_LETTER_RE.match(decoded):
        # `/path` from `file:///path` is a Windows path missing its drive.
        return decoded[1:]
    return decoded


def _file_url_to_path(url: ParsedUrl, win32: bool) -> str:
    """Strictly convert a ``file:`` URL the way the target platform would."""

    pathname = url.path
    if win32:
        if _WIN32_ENCODED_SEPARATOR_RE.search(pathname):
            raise _InvalidFileUrl("File URL path must not include encoded separators.")
        hostname = (url.hostname or "").lower()
        decoded = unquote(pathname).replace("/", "\\")
        if hostname and hostname != "localhost":
            return f"\\\\{hostname}{decoded}"
        if not _DRIVE_LETTER_RE.match(pathname):
            raise _InvalidFileUrl("File URL path must be absolute.")
        return decoded[1:]

    if url.netloc not in ("", "localhost"):
        raise _InvalidFileUrl("File URL host must be empty or `localhost`.")
    if _POSIX_ENCODED_SEPARATOR_RE.search(pathname):
        raise _InvalidFileUrl("File URL path must not include encoded `/`.")
    return unquote(pathname)
