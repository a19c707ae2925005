"""Named extraction strategies for generated launcher scripts.

Each launcher template (npm's own `npm`/`npm.cmd`/`npm.ps1`, `cmd-shim`
output, pnpm/yarn installers) is described by a `LauncherStrategy`: a name
and a pure ``script_text -> relative path | None`` extractor. Strategies are
grouped into ordered tuples keyed by ``(flavor, family, extension)`` and the
first match wins.

Templates referenced:
- npm: https://github.com/npm/cli/blob/v11.4.2/bin/
- cmd-shim: https://github.com/npm/cmd-shim/blob/v7.0.0/lib/index.js
"""

from __future__ import annotations

from dataclasses import dataclass
import re

FLAVOR_POSIX = "posix"
FLAVOR_WIN32 = "win32"

FAMILY_NPM = "npm"
FAMILY_NPX = "npx"
FAMILY_PNPM_YARN = "pnpm-yarn"
FAMILY_GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class LauncherStrategy:
    """One launcher template matcher.

    Attributes:
        name: Stable identifier used in trace logs and tests.
        pattern: Compiled expression whose first group is the relative target.
    """

    name: str
    pattern: re.Pattern[str]

    def extract(self, source: str) -> str | None:
        """Return the relative target path embedded in a script, if any."""

        match = self.pattern.search(source)
        if match is None:
            return None
        return match.group(1) or None


def _strategy(name: str, pattern: str) -> LauncherStrategy:
    return LauncherStrategy(name=name, pattern=re.compile(pattern))


# npm/npx ship their own launchers that point at `<name>-cli.js`.
NPM_CMD = _strategy("npm-cmd", r'"NPM_CLI_JS=%~dp0\\([^\r\n]*)"')
NPX_CMD = _strategy("npx-cmd", r'"NPX_CLI_JS=%~dp0\\([^\r\n]*)"')
NPM_SH = _strategy("npm-sh", r'NPM_CLI_JS="\$CLI_BASEDIR/([^\r\n]*)"')
NPX_SH = _strategy("npx-sh", r'NPX_CLI_JS="\$CLI_BASEDIR/([^\r\n]*)"')
NPM_PS1 = _strategy("npm-ps1", r'\$NPM_CLI_JS="\$PSScriptRoot/([^\r\n]*)"')
NPX_PS1 = _strategy("npx-ps1", r'\$NPX_CLI_JS="\$PSScriptRoot/([^\r\n]*)"')

# node "%~dp0\..\pnpm\bin\pnpm.cjs" %*
NODE_CMD = _strategy("node-cmd", r'node\s+"%~dp0\\([^"]+)"\s+%\*')
# "%~dp0\node.exe" "%~dp0\..\pkg\bin\tool.js" %*
NODE_EXE_CMD = _strategy(
    "node-exe-cmd",
    r'"%~dp0\\[^"]*node[^"]*"\s+"%~dp0\\([^"]+)"\s+%\*',
)
# "%_prog%"  "%dp0%\..\pkg\bin\tool.js" %*
CMD_SHIM_CMD = _strategy("cmd-shim-cmd", r'"%dp0%\\([^\r\n"]*)" %\*\r?\n')
# exec node  "$basedir/../pkg/bin/tool.js" "$@"
CMD_SHIM_SH = _strategy("cmd-shim-sh", r'"\$basedir/([^\r\n"]*)" "\$@"\r?\n')
# & "node$exe"  "$basedir/../pkg/bin/tool.js" $args
CMD_SHIM_PS1 = _strategy("cmd-shim-ps1", r'"\$basedir/([^\r\n"]*)" \$args\r?\n')

# Standalone pnpm installs: exec "$basedir/node" "$basedir/.tools/pnpm/<v>/..." "$@"
PNPM_TOOLS_SH = _strategy("pnpm-tools-sh", r'"\$basedir/(\.tools/pnpm/[^"]+)"\s+"\$@"')
TOOLS_SH = _strategy("tools-sh", r'"\$basedir/(\.tools/[^"]+)"\s+"\$@"')
BASEDIR_SH = _strategy("basedir-sh", r'"\$basedir/([^"]+)"\s+"\$@"')
# setup-pnpm writes `exec node $basedir/pnpm/bin/pnpm.cjs "$@"`, sometimes unquoted.
EXEC_NODE_SH = _strategy("exec-node-sh", r'exec\s+node\s+"?\$basedir/([^"\s]+)"?\s+"\$@"')


_STRATEGIES: dict[tuple[str, str, str], tuple[LauncherStrategy, ...]] = {
    (FLAVOR_WIN32, FAMILY_NPM, ".cmd"): (NPM_CMD,),
    (FLAVOR_WIN32, FAMILY_NPX, ".cmd"): (NPX_CMD,),
    (FLAVOR_WIN32, FAMILY_NPM, ""): (NPM_SH,),
    (FLAVOR_WIN32, FAMILY_NPX, ""): (NPX_SH,),
    (FLAVOR_WIN32, FAMILY_NPM, ".ps1"): (NPM_PS1,),
    (FLAVOR_WIN32, FAMILY_NPX, ".ps1"): (NPX_PS1,),
    (FLAVOR_WIN32, FAMILY_PNPM_YARN, ".cmd"): (NODE_CMD, NODE_EXE_CMD, CMD_SHIM_CMD),
    (FLAVOR_WIN32, FAMILY_PNPM_YARN, ""): (PNPM_TOOLS_SH, CMD_SHIM_SH),
    (FLAVOR_WIN32, FAMILY_PNPM_YARN, ".ps1"): (CMD_SHIM_PS1,),
    (FLAVOR_WIN32, FAMILY_GENERIC, ".cmd"): (CMD_SHIM_CMD,),
    (FLAVOR_WIN32, FAMILY_GENERIC, ""): (CMD_SHIM_SH,),
    (FLAVOR_WIN32, FAMILY_GENERIC, ".ps1"): (CMD_SHIM_PS1,),
    (FLAVOR_POSIX, FAMILY_NPM, ""): (NPM_SH,),
    (FLAVOR_POSIX, FAMILY_NPX, ""): (NPX_SH,),
    (FLAVOR_POSIX, FAMILY_PNPM_YARN, ""): (TOOLS_SH, BASEDIR_SH, EXEC_NODE_SH),
}


def launcher_family(basename: str) -> str:
    """Map a launcher basename (without extension) to its template family."""

    if basename == "npm":
        return FAMILY_NPM
    if basename == "npx":
        return FAMILY_NPX
    if basename in {"pnpm", "yarn"}:
        return FAMILY_PNPM_YARN
    return FAMILY_GENERIC


def strategies_for(flavor: str, family: str, extension: str) -> tuple[LauncherStrategy, ...]:
    """Return the ordered strategies for a launcher, or ``()`` when none apply."""

    return _STRATEGIES.get((flavor, family, extension.lower()), ())


def extract_target(
    source: str,
    strategies: tuple[LauncherStrategy, ...],
) -> tuple[LauncherStrategy, str] | None:
    """Run strategies in order and return the first hit with its strategy."""

    for strategy in strategies:
        relative = strategy.extract(source)
        if relative:
            return strategy, relative
    return None


def repair_setup_pnpm_target(basename: str, relative: str) -> str:
    """Fix a setup-pnpm launcher target that lost its leading ``../``."""

    if basename == "pnpm" and relative.startswith("pnpm/"):
        return f"../{relative}"
    return relative
