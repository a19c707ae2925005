"""Host capability bundle injected into the resolver and locator.

Responsibilities:
- Collect every filesystem, PATH and environment operation the resolution
  layer performs behind one frozen value.
- Provide the OS-backed default via `HostCapabilities.from_os`.

Tests replace individual callables with `dataclasses.replace` instead of
patching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import shutil
from typing import Callable, Mapping

from ..paths.flavor import use_win32


def _which(name: str, search_path: str | None = None) -> str | None:
    """Return the first PATH match for an executable name."""

    return shutil.which(name, path=search_path)


def _which_all(name: str, search_path: str | None = None) -> list[str]:
    """Return every PATH match for an executable name, in PATH order."""

    raw_path = search_path if search_path is not None else os.environ.get("PATH", os.defpath)
    matches: list[str] = []
    for directory in raw_path.split(os.pathsep):
        if not directory:
            continue
        found = shutil.which(name, path=directory)
        if found is not None and found not in matches:
            matches.append(found)
    return matches


def _realpath(path: str) -> str:
    """Resolve symlinks, raising `OSError` when the path does not exist."""

    return os.path.realpath(path, strict=True)


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


@dataclass(frozen=True, slots=True)
class HostCapabilities:
    """Filesystem and environment operations available to resolution.

    Attributes:
        win32: Whether Windows launcher rules apply.
        env: Read-only environment mapping (`HOME`, `APPDATA`, ...).
        exists: Existence check for any filesystem entry.
        is_file: Regular-file check.
        read_text: UTF-8 text read; may raise `OSError` or `ValueError`.
        realpath: Strict symlink resolution; raises `OSError` when missing.
        which: First PATH match for a name, or `None`.
        which_all: All PATH matches for a name.
        cwd: Current working directory provider.
    """

    win32: bool
    env: Mapping[str, str]
    exists: Callable[[str], bool] = os.path.exists
    is_file: Callable[[str], bool] = os.path.isfile
    read_text: Callable[[str], str] = _read_text
    realpath: Callable[[str], str] = _realpath
    which: Callable[..., str | None] = _which
    which_all: Callable[..., list[str]] = _which_all
    cwd: Callable[[], str] = os.getcwd

    @classmethod
    def from_os(cls, win32: bool | None = None) -> HostCapabilities:
        """Build capabilities backed by the running process and filesystem."""

        return cls(win32=use_win32(win32), env=os.environ)
