"""Unit tests for shim resolution through launchers, symlinks and loops."""

from __future__ import annotations

from dataclasses import replace
import io
import os
from pathlib import Path
from typing import Callable

import pytest

from shimwalk.resolution.host import HostCapabilities
from shimwalk.resolution.shims import ShimResolver, resolve_real_binary_path, split_basename
from shimwalk.telemetry import ResolutionLogger

WriteFile = Callable[[Path, str], Path]
RealPathOf = Callable[[Path | str], str]


def test_split_basename_follows_extname_rules() -> None:
    """A leading dot should not start an extension."""

    assert split_basename("/a/b/npm.cmd") == ("/a/b", "npm", ".cmd")
    assert split_basename("/a/.bin") == ("/a", ".bin", "")
    assert split_basename("/pnpm") == ("/", "pnpm", "")
    assert split_basename("tool") == ("", "tool", "")


def test_shim_resolver_rejects_non_positive_depth(posix_host: HostCapabilities) -> None:
    """The indirection cap must be a positive integer."""

    with pytest.raises(ValueError, match="max_depth"):
        ShimResolver(posix_host, max_depth=0)


def test_resolve_follows_posix_pnpm_launcher_to_script(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """A pnpm shell launcher should resolve to the `pnpm.cjs` it executes."""

    launcher = write_file(
        tmp_path / "node_modules" / ".bin" / "pnpm",
        "#!/bin/sh\n"
        'basedir=$(dirname "$0")\n'
        'exec node  "$basedir/../pnpm/bin/pnpm.cjs" "$@"\n',
    )
    script = write_file(tmp_path / "node_modules" / "pnpm" / "bin" / "pnpm.cjs", "")

    resolver = ShimResolver(posix_host)

    assert resolver.resolve(str(launcher)) == real_path_of(script)


def test_resolve_follows_npm_shell_launcher(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """npm's own shell launcher should resolve to `npm-cli.js`."""

    launcher = write_file(
        tmp_path / "bin" / "npm",
        'CLI_BASEDIR="$(dirname "$0")"\n'
        'NPM_CLI_JS="$CLI_BASEDIR/../lib/node_modules/npm/bin/npm-cli.js"\n',
    )
    script = write_file(tmp_path / "lib" / "node_modules" / "npm" / "bin" / "npm-cli.js", "")

    assert ShimResolver(posix_host).resolve(str(launcher)) == real_path_of(script)


def test_resolve_follows_symlinks_after_launchers(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """The final path should pass through realpath so symlinks are followed."""

    target = write_file(tmp_path / "real" / "tool.js", "")
    link_dir = tmp_path / "links"
    link_dir.mkdir()
    link = link_dir / "tool"
    os.symlink(target, link)

    assert ShimResolver(posix_host).resolve(str(link)) == real_path_of(target)


def test_resolve_ignores_generic_launchers_on_posix(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """cmd-shim style launchers for other tools are not parsed on POSIX."""

    launcher = write_file(
        tmp_path / ".bin" / "tsc",
        'exec node  "$basedir/../typescript/bin/tsc" "$@"\n',
    )
    write_file(tmp_path / "typescript" / "bin" / "tsc", "")

    assert ShimResolver(posix_host).resolve(str(launcher)) == real_path_of(launcher)


def test_resolve_repairs_setup_pnpm_nested_layout(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """A nested `.bin/pnpm/bin/...` path should restart from the `.bin/pnpm` launcher."""

    bin_dir = tmp_path / "setup-pnpm" / "node_modules" / ".bin"
    write_file(bin_dir / "pnpm", 'exec node "$basedir/pnpm/bin/pnpm.cjs" "$@"\n')
    script = write_file(
        tmp_path / "setup-pnpm" / "node_modules" / "pnpm" / "bin" / "pnpm.cjs",
        "",
    )

    nested = f"{bin_dir}/pnpm/bin/pnpm"

    assert ShimResolver(posix_host).resolve(nested) == real_path_of(script)


def test_resolve_stops_on_launcher_cycle(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """Launchers pointing at each other should terminate at the last new path."""

    first = write_file(tmp_path / "a" / "pnpm", 'exec node "$basedir/../b/pnpm" "$@"\n')
    second = write_file(tmp_path / "b" / "pnpm", 'exec node "$basedir/../a/pnpm" "$@"\n')
    sink = io.StringIO()

    resolved = ShimResolver(posix_host, trace=ResolutionLogger(sink=sink)).resolve(str(first))

    assert resolved == real_path_of(second)
    assert "step=loop event=cap" in sink.getvalue()


def test_resolve_honors_max_depth(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """Resolution should stop after `max_depth` rewrites."""

    first = write_file(tmp_path / "a" / "pnpm", 'exec node "$basedir/../b/pnpm" "$@"\n')
    second = write_file(tmp_path / "b" / "pnpm", 'exec node "$basedir/../c/pnpm.cjs" "$@"\n')
    write_file(tmp_path / "c" / "pnpm.cjs", "")

    resolved = ShimResolver(posix_host, max_depth=1).resolve(str(first))

    assert resolved == real_path_of(second)


def test_resolve_degrades_to_normalized_input_when_missing(posix_host: HostCapabilities) -> None:
    """A path that does not exist should come back normalized and otherwise unchanged."""

    resolver = ShimResolver(posix_host)

    assert resolver.resolve("/definitely/missing/../bin/tool") == "/definitely/bin/tool"
    assert resolver.resolve("") == "."


def test_resolve_degrades_when_launcher_read_fails(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """Read errors on a launcher should leave the launcher itself as the result."""

    launcher = write_file(tmp_path / "bin" / "yarn", "")

    def _failing_read(path: str) -> str:
        """Simulate a permission error while reading the launcher."""

        raise PermissionError(path)

    host = replace(posix_host, read_text=_failing_read)

    assert ShimResolver(host).resolve(str(launcher)) == real_path_of(launcher)


def test_resolve_looks_up_bare_names_on_path(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """Non-absolute names should go through PATH lookup before resolution."""

    launcher = write_file(tmp_path / "bin" / "yarn", 'exec node "$basedir/../lib/yarn.js" "$@"\n')
    script = write_file(tmp_path / "lib" / "yarn.js", "")
    host = replace(posix_host, which=lambda name, search_path=None: str(launcher))

    assert ShimResolver(host).resolve("yarn") == real_path_of(script)


def test_resolve_follows_win32_cmd_shim(
    tmp_path: Path,
    win32_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """A cmd-shim `.cmd` launcher should resolve to the package script it runs."""

    launcher = write_file(
        tmp_path / "nodejs" / "tsc.cmd",
        "@ECHO off\r\n"
        ":find_dp0\r\n"
        "SET dp0=%~dp0\r\n"
        '"%_prog%"  "%dp0%\\..\\typescript\\bin\\tsc" %*\r\n',
    )
    script = write_file(tmp_path / "typescript" / "bin" / "tsc", "")

    assert ShimResolver(win32_host).resolve(str(launcher)) == real_path_of(script)


def test_resolve_prefers_win32_npm_quick_path(
    tmp_path: Path,
    win32_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """`npm.cmd` beside `node_modules/npm` should resolve without reading the launcher."""

    launcher = tmp_path / "nodejs" / "NPM.cmd"
    script = write_file(tmp_path / "nodejs" / "node_modules" / "npm" / "bin" / "npm-cli.js", "")

    assert ShimResolver(win32_host).resolve(str(launcher)) == real_path_of(script)


def test_resolve_follows_win32_pnpm_cmd_launcher(
    tmp_path: Path,
    win32_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """A pnpm `.cmd` launcher invoking `node` should resolve to `pnpm.cjs`."""

    launcher = write_file(
        tmp_path / "npm" / "pnpm.cmd",
        '@ECHO off\r\nnode "%~dp0\\..\\pnpm\\bin\\pnpm.cjs" %*\r\n',
    )
    script = write_file(tmp_path / "pnpm" / "bin" / "pnpm.cjs", "")

    assert ShimResolver(win32_host).resolve(str(launcher)) == real_path_of(script)


def test_resolve_skips_win32_exe_files(
    tmp_path: Path,
    win32_host: HostCapabilities,
    write_file: WriteFile,
    real_path_of: RealPathOf,
) -> None:
    """Native executables are never parsed as launchers."""

    binary = write_file(tmp_path / "bin" / "yarn.exe", 'node "%~dp0\\..\\x.js" %*\r\n')

    assert ShimResolver(win32_host).resolve(str(binary)) == real_path_of(binary)


def test_resolve_traces_each_rewrite(
    tmp_path: Path,
    posix_host: HostCapabilities,
    write_file: WriteFile,
) -> None:
    """Tracing should record the start, each rewrite and the realpath outcome."""

    launcher = write_file(tmp_path / "bin" / "pnpm", 'exec node "$basedir/../lib/pnpm.cjs" "$@"\n')
    write_file(tmp_path / "lib" / "pnpm.cjs", "")
    sink = io.StringIO()

    resolve_real_binary_path(str(launcher), host=posix_host, trace=ResolutionLogger(sink=sink))

    lines = sink.getvalue().splitlines()
    assert lines[0].startswith("[shim] level=DEBUG step=start event=begin")
    assert any("step=launcher event=rewrite" in line and "strategy=basedir-sh" in line for line in lines)
    assert lines[-1].startswith("[shim] level=DEBUG step=realpath event=done")
