"""CLI error-handling tests for concise stage-aware diagnostics."""

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from shimwalk.cli import app


def test_which_command_reports_missing_binary_with_hint(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """which should fail with exit code 1 and a PATH hint when nothing matches."""

    empty_dir = tmp_path / "empty"
    empty_dir.mkdir()
    monkeypatch.setenv("PATH", str(empty_dir))
    runner = CliRunner()

    result = runner.invoke(app, ["which", "definitely-not-installed", "--platform", "posix"])

    assert result.exit_code == 1
    assert "which failed at stage `which`: Binary not found: `definitely-not-installed`." in result.output
    assert "Hint: Check that the tool is installed and its directory is on PATH." in result.output


def test_command_reports_missing_config_file(tmp_path: Path) -> None:
    """A missing `--config` path should be reported as a config stage failure."""

    runner = CliRunner()

    result = runner.invoke(
        app,
        ["classify", "lodash", "--config", str(tmp_path / "missing.yml")],
    )

    assert result.exit_code == 1
    assert "classify failed at stage `config`: Config file not found" in result.output
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in result.output


def test_command_reports_invalid_yaml_config(tmp_path: Path) -> None:
    """Invalid config values should be reported with the validation message."""

    config_path = tmp_path / "shimwalk.yml"
    config_path.write_text("max_shim_depth: -2\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["resolve", "/a", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "resolve failed at stage `config`: Invalid configuration:" in result.output
    assert "`max_shim_depth` must be a positive integer." in result.output


def test_command_reports_invalid_environment_value(monkeypatch: MonkeyPatch) -> None:
    """Invalid `SHIMWALK_*` values should fail before any resolution work."""

    monkeypatch.setenv("SHIMWALK_TRACE", "sometimes")
    runner = CliRunner()

    result = runner.invoke(app, ["real-path", "/usr/bin/env"])

    assert result.exit_code == 1
    assert "real-path failed at stage `config`" in result.output
    assert "SHIMWALK_TRACE" in result.output


def test_command_reports_unknown_platform() -> None:
    """Unknown `--platform` values should be reported without a traceback."""

    runner = CliRunner()

    result = runner.invoke(app, ["relative", "/a", "/b", "--platform", "beos"])

    assert result.exit_code == 1
    assert "relative failed at stage `config`: `--platform` must be one of" in result.output


def test_find_real_command_rejects_unsupported_tool() -> None:
    """find-real should only accept npm, pnpm and yarn."""

    runner = CliRunner()

    result = runner.invoke(app, ["find-real", "bun"])

    assert result.exit_code == 1
    assert "find-real failed at stage `find-real`: Unsupported tool `bun`." in result.output
    assert "Hint: Use one of: npm, pnpm, yarn." in result.output
