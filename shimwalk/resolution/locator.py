"""PATH search and shadow-bin aware binary discovery.

Responsibilities:
- Find executables on ``PATH`` and hand every hit to `ShimResolver`, so
  callers never see an unresolved shim.
- Skip ``node_modules/.bin`` entries that shadow a globally installed tool.
- Probe the usual install locations of npm, pnpm and yarn.

Key types:
- `BinaryLocator`: lookup operations bound to one resolver and host.
"""

from __future__ import annotations

import asyncio
import re

from ..errors import BinaryNotFoundError
from ..paths.classifier import is_path
from ..paths.normalizer import normalize_path
from ..telemetry.logger import ResolutionLogger
from .host import HostCapabilities
from .shims import ShimResolver, split_basename

_SHADOW_BIN_MARKER = "node_modules/.bin"


def is_shadow_bin_path(dir_path: str | None) -> bool:
    """Return whether a directory lies inside a ``node_modules/.bin`` folder."""

    if not dir_path:
        return False
    return _SHADOW_BIN_MARKER in dir_path.replace("\\", "/")


class BinaryLocator:
    """Locate binaries on ``PATH`` and resolve them through their shims."""

    def __init__(
        self,
        resolver: ShimResolver | None = None,
        *,
        trace: ResolutionLogger | None = None,
    ) -> None:
        """Bind the locator to a resolver (and its host capabilities)."""

        self._resolver = resolver if resolver is not None else ShimResolver(trace=trace)
        self._host = self._resolver.host
        self._trace = trace

    @property
    def resolver(self) -> ShimResolver:
        return self._resolver

    def which_bin(
        self,
        bin_name: str,
        *,
        all: bool = False,
        nothrow: bool = True,
        search_path: str | None = None,
    ) -> str | list[str] | None:
        """Find ``bin_name`` on ``PATH`` and resolve each hit.

        Args:
            bin_name: Executable name (or path) to look up.
            all: Return every match as a list instead of the first one.
            nothrow: Return `None` on a miss instead of raising.
            search_path: Explicit ``PATH`` string; defaults to the environment.

        Raises:
            BinaryNotFoundError: When nothing matches and ``nothrow`` is false.
        """

        if all:
            matches = self._which_all(bin_name, search_path)
            if matches:
                return [self._resolver.resolve(match) for match in matches]
        else:
            match = self._which(bin_name, search_path)
            if match:
                return self._resolver.resolve(match)

        if self._trace is not None:
            self._trace.log_not_found(bin_name)
        if not nothrow:
            raise BinaryNotFoundError(bin_name)
        return None

    async def which_bin_async(
        self,
        bin_name: str,
        *,
        all: bool = False,
        nothrow: bool = True,
        search_path: str | None = None,
    ) -> str | list[str] | None:
        """Async variant of `which_bin`; the lookup runs in a worker thread."""

        return await asyncio.to_thread(
            self.which_bin,
            bin_name,
            all=all,
            nothrow=nothrow,
            search_path=search_path,
        )

    def find_binary(self, name: str, *, all: bool = False) -> str | list[str] | None:
        """Return the real file for a binary name or path, or `None` if absent.

        Path-like names are resolved in place; bare names are searched on
        ``PATH``.
        """

        if is_path(name, win32=self._host.win32):
            resolved = self._resolver.resolve(name)
            return [resolved] if all else resolved
        return self.which_bin(name, all=all)

    def find_real_bin(self, bin_name: str, common_paths: list[str] | None = None) -> str | None:
        """Return the first existing common path, else a non-shadow ``PATH`` hit."""

        for candidate in common_paths or []:
            if candidate and self._exists(candidate):
                return candidate

        first = self._which(bin_name, None)
        if not first:
            return None
        directory, _, _ = split_basename(normalize_path(first))
        if is_shadow_bin_path(directory):
            for alternative in self._which_all(bin_name, None):
                alternative_dir, _, _ = split_basename(normalize_path(alternative))
                if not is_shadow_bin_path(alternative_dir):
                    return alternative
        return first

    def find_real_npm(self) -> str:
        """Return the npm installed beside ``node``, or the best other match."""

        node_path = self._which("node", None)
        if node_path:
            node_dir, _, _ = split_basename(normalize_path(node_path))
            sibling = f"{node_dir}/npm"
            if self._exists(sibling):
                return sibling

        found = self.find_real_bin("npm", ["/usr/local/bin/npm", "/usr/bin/npm"])
        if found and self._exists(found):
            return found

        resolved = self.which_bin("npm")
        if isinstance(resolved, str) and self._exists(resolved):
            return resolved
        return "npm"

    def find_real_pnpm(self) -> str:
        """Return the real pnpm executable path, or ``""`` when not installed."""

        env = self._host.env
        if self._host.win32:
            appdata = env.get("APPDATA")
            local_appdata = env.get("LOCALAPPDATA")
            common_paths = [
                f"{appdata}/npm/pnpm.cmd" if appdata else "",
                f"{appdata}/npm/pnpm" if appdata else "",
                f"{local_appdata}/pnpm/pnpm.cmd" if local_appdata else "",
                f"{local_appdata}/pnpm/pnpm" if local_appdata else "",
                "C:/Program Files/nodejs/pnpm.cmd",
                "C:/Program Files/nodejs/pnpm",
            ]
        else:
            home = env.get("HOME", "")
            data_home = env.get("XDG_DATA_HOME") or f"{home}/.local/share"
            common_paths = [
                "/usr/local/bin/pnpm",
                "/usr/bin/pnpm",
                f"{data_home}/pnpm/pnpm",
                f"{home}/.pnpm/pnpm" if home else "",
            ]
        return self.find_real_bin("pnpm", [normalize_path(p) for p in common_paths if p]) or ""

    def find_real_yarn(self) -> str:
        """Return the real yarn executable path, or ``""`` when not installed."""

        home = self._host.env.get("HOME", "")
        common_paths = ["/usr/local/bin/yarn", "/usr/bin/yarn"]
        if home:
            common_paths.extend(
                [
                    f"{home}/.yarn/bin/yarn",
                    f"{home}/.config/yarn/global/node_modules/.bin/yarn",
                ]
            )
        return self.find_real_bin("yarn", common_paths) or ""

    def _which(self, name: str, search_path: str | None) -> str | None:
        try:
            return self._host.which(name, search_path)
        except (OSError, ValueError):
            return None

    def _which_all(self, name: str, search_path: str | None) -> list[str]:
        try:
            return list(self._host.which_all(name, search_path))
        except (OSError, ValueError):
            return []

    def _exists(self, path: str) -> bool:
        try:
            return self._host.exists(path)
        except (OSError, ValueError):
            return False
