"""Shared pytest fixtures for the full shimwalk test suite."""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Callable

import pytest

from shimwalk.paths import normalize_path
from shimwalk.resolution.host import HostCapabilities


@pytest.fixture(autouse=True)
def _clear_shimwalk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer `SHIMWALK_*` settings out of every test."""

    for key in ("SHIMWALK_PLATFORM", "SHIMWALK_MAX_SHIM_DEPTH", "SHIMWALK_TRACE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def posix_host() -> HostCapabilities:
    """Provide filesystem-backed capabilities with POSIX launcher rules and no PATH hits."""

    return replace(
        HostCapabilities.from_os(win32=False),
        env={},
        which=lambda *_: None,
        which_all=lambda *_: [],
    )


@pytest.fixture
def win32_host() -> HostCapabilities:
    """Provide filesystem-backed capabilities with Windows launcher rules and no PATH hits."""

    return replace(
        HostCapabilities.from_os(win32=True),
        env={},
        which=lambda *_: None,
        which_all=lambda *_: [],
    )


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Provide a helper that writes text files, creating parent directories."""

    def _write(path: Path, content: str = "") -> Path:
        """Write `content` to `path` and return the path."""

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8", newline="")
        return path

    return _write


@pytest.fixture
def real_path_of() -> Callable[[Path | str], str]:
    """Provide the normalized realpath helper used for expected resolver output."""

    def _real(path: Path | str) -> str:
        return normalize_path(os.path.realpath(path))

    return _real
