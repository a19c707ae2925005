"""Command-line interface for shimwalk.

Responsibilities:
- Expose path normalization, classification and algebra as commands.
- Expose PATH lookup and shim resolution with optional step tracing.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from .cli_rendering import echo_classification, echo_paths, exit_with_command_error
from .config import ConfigLoader, ShimwalkConfig
from .errors import ShimwalkError
from .parsing import parse_platform
from .paths import (
    is_absolute,
    is_node_modules,
    is_path,
    is_relative,
    normalize_path,
    relative_path,
    resolve_path,
)
from .resolution.locator import BinaryLocator
from .telemetry.logger import ResolutionLogger

app = typer.Typer(
    name="shimwalk",
    no_args_is_help=True,
    help="Resolve paths and follow package-manager shims to real binaries.",
)

_FIND_REAL_TOOLS = ("npm", "pnpm", "yarn")

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with defaults."),
]
PlatformOption = Annotated[
    str | None,
    typer.Option("--platform", help="Path flavor: `auto`, `posix` or `win32`."),
]
TraceOption = Annotated[
    bool | None,
    typer.Option("--trace/--no-trace", help="Log every resolution step."),
]


def _load_config(config_path: Path | None, platform: str | None) -> ShimwalkConfig:
    """Load effective config and map failures to stage errors."""

    try:
        config = ConfigLoader.load(config_path)
    except FileNotFoundError as exc:
        raise ShimwalkError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ShimwalkError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config file or `SHIMWALK_*` values and rerun.",
        ) from exc

    if platform is not None:
        try:
            config.platform = parse_platform(platform, "--platform")
        except ValueError as exc:
            raise ShimwalkError(stage="config", detail=str(exc)) from exc
    return config


def _build_locator(config: ShimwalkConfig, trace: bool | None) -> BinaryLocator:
    """Build a locator, tracing to stderr when enabled so stdout stays parseable."""

    enabled = trace if trace is not None else config.trace
    return config.build_locator(trace=ResolutionLogger(sink=sys.stderr) if enabled else None)


@app.command("normalize")
def normalize_command(
    paths: Annotated[list[str], typer.Argument(help="Paths to normalize.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
) -> None:
    """Print the canonical forward-slash form of each path."""

    # Normalization is flavor-independent; only the shared options are checked.
    try:
        _load_config(config_file, platform)
    except Exception as exc:
        exit_with_command_error("normalize", exc)

    for path in paths:
        typer.echo(normalize_path(path))


@app.command("classify")
def classify_command(
    path: Annotated[str, typer.Argument(help="Path or package name to classify.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
) -> None:
    """Report whether a value is absolute, relative, a path, or under node_modules."""

    try:
        config = _load_config(config_file, platform)
    except Exception as exc:
        exit_with_command_error("classify", exc)

    win32 = config.is_win32()
    echo_classification(
        path,
        {
            "absolute": is_absolute(path, win32=win32),
            "relative": is_relative(path, win32=win32),
            "path": is_path(path, win32=win32),
            "node_modules": is_node_modules(path),
        },
    )


@app.command("resolve")
def resolve_command(
    segments: Annotated[list[str], typer.Argument(help="Segments resolved right to left.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
) -> None:
    """Resolve segments into an absolute normalized path."""

    try:
        config = _load_config(config_file, platform)
    except Exception as exc:
        exit_with_command_error("resolve", exc)

    typer.echo(resolve_path(*segments, win32=config.is_win32()))


@app.command("relative")
def relative_command(
    from_path: Annotated[str, typer.Argument(help="Starting path.")],
    to_path: Annotated[str, typer.Argument(help="Destination path.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
) -> None:
    """Print the relative path from one location to another."""

    try:
        config = _load_config(config_file, platform)
    except Exception as exc:
        exit_with_command_error("relative", exc)

    relative = relative_path(from_path, to_path, win32=config.is_win32())
    typer.echo(relative or ".")


@app.command("real-path")
def real_path_command(
    path: Annotated[str, typer.Argument(help="Binary path or name to resolve.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
    trace: TraceOption = None,
) -> None:
    """Follow symlinks, Volta shims and launcher scripts to the real file."""

    try:
        config = _load_config(config_file, platform)
        locator = _build_locator(config, trace)
        resolved = locator.resolver.resolve(path)
    except Exception as exc:
        exit_with_command_error("real-path", exc)

    typer.echo(resolved)


@app.command("which")
def which_command(
    name: Annotated[str, typer.Argument(help="Executable name to search on PATH.")],
    all_matches: Annotated[
        bool,
        typer.Option("--all", help="Print every PATH match, each resolved."),
    ] = False,
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
    trace: TraceOption = None,
) -> None:
    """Find an executable on PATH and print its real location."""

    try:
        config = _load_config(config_file, platform)
        locator = _build_locator(config, trace)
        found = locator.which_bin(name, all=all_matches, nothrow=False)
    except Exception as exc:
        exit_with_command_error("which", exc)

    echo_paths(found)


@app.command("find-real")
def find_real_command(
    tool: Annotated[str, typer.Argument(help="Tool to locate: `npm`, `pnpm` or `yarn`.")],
    config_file: ConfigOption = None,
    platform: PlatformOption = None,
) -> None:
    """Locate the real npm/pnpm/yarn install, bypassing node_modules/.bin shadows."""

    try:
        if tool not in _FIND_REAL_TOOLS:
            raise ShimwalkError(
                stage="find-real",
                detail=f"Unsupported tool `{tool}`.",
                hint=f"Use one of: {', '.join(_FIND_REAL_TOOLS)}.",
            )
        config = _load_config(config_file, platform)
        locator = _build_locator(config, trace=False)
        configured = config.common_paths_for(tool)
        found = locator.find_real_bin(tool, configured) if configured else None
        if not found:
            finders = {
                "npm": locator.find_real_npm,
                "pnpm": locator.find_real_pnpm,
                "yarn": locator.find_real_yarn,
            }
            found = finders[tool]()
        if not found:
            raise ShimwalkError(
                stage="find-real",
                detail=f"No installation of `{tool}` was found.",
                hint="Install the tool or list its location under `common_paths` in the config.",
            )
    except Exception as exc:
        exit_with_command_error("find-real", exc)

    typer.echo(found)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
