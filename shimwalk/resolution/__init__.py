"""Filesystem-backed binary resolution.

The module-level functions build a fresh `BinaryLocator` over the OS host for
each call; long-lived callers should construct one locator and reuse it.
"""

from __future__ import annotations

from .host import HostCapabilities
from .locator import BinaryLocator, is_shadow_bin_path
from .shims import DEFAULT_MAX_SHIM_DEPTH, ShimResolver, resolve_real_binary_path


def which_bin(
    bin_name: str,
    *,
    all: bool = False,
    nothrow: bool = True,
    search_path: str | None = None,
) -> str | list[str] | None:
    """Find and resolve ``bin_name`` on ``PATH``."""

    return BinaryLocator().which_bin(bin_name, all=all, nothrow=nothrow, search_path=search_path)


async def which_bin_async(
    bin_name: str,
    *,
    all: bool = False,
    nothrow: bool = True,
    search_path: str | None = None,
) -> str | list[str] | None:
    """Find and resolve ``bin_name`` on ``PATH`` without blocking the loop."""

    return await BinaryLocator().which_bin_async(
        bin_name, all=all, nothrow=nothrow, search_path=search_path
    )


def find_binary(name: str, *, all: bool = False) -> str | list[str] | None:
    """Return the real file behind a binary name or path."""

    return BinaryLocator().find_binary(name, all=all)


def find_real_bin(bin_name: str, common_paths: list[str] | None = None) -> str | None:
    """Return a non-shadowed location for ``bin_name``."""

    return BinaryLocator().find_real_bin(bin_name, common_paths)


def find_real_npm() -> str:
    return BinaryLocator().find_real_npm()


def find_real_pnpm() -> str:
    return BinaryLocator().find_real_pnpm()


def find_real_yarn() -> str:
    return BinaryLocator().find_real_yarn()


__all__ = [
    "DEFAULT_MAX_SHIM_DEPTH",
    "BinaryLocator",
    "HostCapabilities",
    "ShimResolver",
    "find_binary",
    "find_real_bin",
    "find_real_npm",
    "find_real_pnpm",
    "find_real_yarn",
    "is_shadow_bin_path",
    "resolve_real_binary_path",
    "which_bin",
    "which_bin_async",
]
