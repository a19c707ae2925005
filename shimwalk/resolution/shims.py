"""Shim and launcher resolution.

Responsibilities:
- Follow Volta shims, generated launcher scripts and symlinks from a binary
  path to the real file that runs.
- Degrade to the best normalized path found so far on any filesystem error.

Key types:
- `ShimResolver`: the resolution state machine bound to a `HostCapabilities`.

Each pass over a path tries, in order, the Volta step and the launcher step.
A step that rewrites the path sends resolution back to the first step; when
no step applies, the path goes through a strict realpath and resolution ends.
"""

from __future__ import annotations

from ..paths.algebra import resolve_path
from ..paths.classifier import is_absolute
from ..paths.coercion import path_like_to_string
from ..paths.normalizer import normalize_path
from ..telemetry.logger import ResolutionLogger
from .host import HostCapabilities
from .launchers import (
    FAMILY_GENERIC,
    FAMILY_NPM,
    FAMILY_NPX,
    FAMILY_PNPM_YARN,
    FLAVOR_POSIX,
    FLAVOR_WIN32,
    extract_target,
    launcher_family,
    repair_setup_pnpm_target,
    strategies_for,
)
from .volta import resolve_volta_target

DEFAULT_MAX_SHIM_DEPTH = 10

_WIN32_LAUNCHER_EXTENSIONS = frozenset({"", ".cmd", ".exe", ".ps1"})
_SETUP_PNPM_NESTED = "/.bin/pnpm/bin/"
_SETUP_PNPM_SCRIPT = "/.bin/pnpm"


def split_basename(path: str) -> tuple[str, str, str]:
    """Split a normalized path into directory, stem and extension.

    The extension follows ``path.extname`` rules: a leading dot does not
    start an extension, so ``.bin`` has none.
    """

    separator = path.rfind("/")
    if separator == -1:
        directory, name = "", path
    else:
        directory, name = (path[:separator] or "/"), path[separator + 1 :]
    dot = name.rfind(".")
    if dot <= 0:
        return directory, name, ""
    return directory, name[:dot], name[dot:]


class ShimResolver:
    """Resolve binary paths through shims to the real executable file."""

    def __init__(
        self,
        host: HostCapabilities | None = None,
        *,
        max_depth: int = DEFAULT_MAX_SHIM_DEPTH,
        trace: ResolutionLogger | None = None,
    ) -> None:
        """Bind the resolver to host capabilities and an indirection cap."""

        if max_depth <= 0:
            raise ValueError("`max_depth` must be a positive integer.")
        self._host = host if host is not None else HostCapabilities.from_os()
        self._max_depth = max_depth
        self._trace = trace

    @property
    def host(self) -> HostCapabilities:
        return self._host

    def resolve(self, bin_path: object) -> str:
        """Return the real file behind ``bin_path``; never raises.

        Non-absolute names are looked up on ``PATH`` first. A path that does
        not exist comes back normalized but otherwise unchanged.
        """

        win32 = self._host.win32
        current = path_like_to_string(bin_path, win32=win32)
        if not is_absolute(current, win32=win32):
            found = self._lookup_on_path(current)
            if found:
                current = found

        current = normalize_path(current)
        if current == ".":
            return current
        if self._trace is not None:
            self._trace.log_start(current)

        visited = {current}
        for depth in range(1, self._max_depth + 1):
            rewritten = self._next_path(current)
            if rewritten is None:
                break
            if rewritten in visited:
                self._log_cap(rewritten, depth)
                break
            visited.add(rewritten)
            current = rewritten
        else:
            self._log_cap(current, self._max_depth)

        return self._realpath(current)

    def _next_path(self, path: str) -> str | None:
        """Apply the first indirection step that rewrites ``path``."""

        directory, stem, extension = split_basename(path)
        basename = stem.lower() if self._host.win32 else stem

        volta_target = resolve_volta_target(self._host, path, basename)
        if volta_target is not None and volta_target != path:
            self._log_rewrite("volta", path, volta_target)
            return volta_target

        if self._host.win32:
            target = self._win32_launcher_target(path, directory, basename, extension)
        else:
            target = self._posix_launcher_target(path, directory, basename, extension)
        if target is not None and target != path:
            return target

        if self._trace is not None:
            self._trace.log_miss("launcher", path)
        return None

    def _win32_launcher_target(
        self, path: str, directory: str, basename: str, extension: str
    ) -> str | None:
        """Resolve npm quick paths and Windows `.cmd`/`.ps1`/extensionless launchers."""

        extension = extension.lower()
        if extension not in _WIN32_LAUNCHER_EXTENSIONS:
            return None

        family = launcher_family(basename)
        if family in {FAMILY_NPM, FAMILY_NPX}:
            # Typical layout: C:\Program Files\nodejs\npm.cmd
            quick_path = normalize_path(f"{directory}/node_modules/npm/bin/{basename}-cli.js")
            if self._exists(quick_path):
                self._log_rewrite("npm-quick", path, quick_path)
                return quick_path

        if extension == ".exe" or not self._is_file(path):
            return None
        return self._parse_launcher(path, directory, basename, FLAVOR_WIN32, family, extension)

    def _posix_launcher_target(
        self, path: str, directory: str, basename: str, extension: str
    ) -> str | None:
        """Resolve extensionless npm/npx/pnpm/yarn shell launchers."""

        family = launcher_family(basename)
        if family == FAMILY_GENERIC:
            return None

        if family == FAMILY_PNPM_YARN and _SETUP_PNPM_NESTED in path:
            # setup-pnpm can leave `.../.bin/pnpm/bin/pnpm.cjs` behind.
            script = path[: path.index(_SETUP_PNPM_SCRIPT) + len(_SETUP_PNPM_SCRIPT)]
            if self._is_file(script):
                self._log_rewrite("setup-pnpm", path, script)
                return script

        if extension or not self._is_file(path):
            return None
        return self._parse_launcher(path, directory, basename, FLAVOR_POSIX, family, extension)

    def _parse_launcher(
        self,
        path: str,
        directory: str,
        basename: str,
        flavor: str,
        family: str,
        extension: str,
    ) -> str | None:
        """Read a launcher script and resolve its embedded relative target."""

        strategies = strategies_for(flavor, family, extension)
        if not strategies:
            return None
        try:
            source = self._host.read_text(path)
        except (OSError, ValueError):
            return None

        found = extract_target(source, strategies)
        if found is None:
            return None
        strategy, relative = found
        if family == FAMILY_PNPM_YARN:
            relative = repair_setup_pnpm_target(basename, relative)
        target = resolve_path(directory, relative, cwd=self._safe_cwd(), win32=self._host.win32)
        self._log_rewrite("launcher", path, target, strategy=strategy.name)
        return target

    def _realpath(self, path: str) -> str:
        try:
            real = normalize_path(self._host.realpath(path))
        except (OSError, ValueError):
            if self._trace is not None:
                self._trace.log_done(path, realpath=False)
            return path
        if self._trace is not None:
            self._trace.log_done(real, realpath=True)
        return real

    def _lookup_on_path(self, name: str) -> str | None:
        if not name:
            return None
        try:
            return self._host.which(name)
        except (OSError, ValueError):
            return None

    def _exists(self, path: str) -> bool:
        try:
            return self._host.exists(path)
        except (OSError, ValueError):
            return False

    def _is_file(self, path: str) -> bool:
        try:
            return self._host.is_file(path)
        except (OSError, ValueError):
            return False

    def _safe_cwd(self) -> str:
        try:
            return self._host.cwd()
        except OSError:
            return "/"

    def _log_rewrite(self, step: str, source: str, target: str, **context: object) -> None:
        if self._trace is not None:
            self._trace.log_rewrite(step, source, target, **context)

    def _log_cap(self, path: str, depth: int) -> None:
        if self._trace is not None:
            self._trace.log_cap(path, depth)


def resolve_real_binary_path(
    bin_path: object,
    *,
    host: HostCapabilities | None = None,
    max_depth: int = DEFAULT_MAX_SHIM_DEPTH,
    trace: ResolutionLogger | None = None,
) -> str:
    """Resolve ``bin_path`` through all shim layers with a one-off resolver."""

    return ShimResolver(host, max_depth=max_depth, trace=trace).resolve(bin_path)
