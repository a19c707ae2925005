"""Structured resolution trace logging.

Responsibilities:
- Emit concise, deterministic one-line events for each resolver transition.
- Route events through `loguru` into an explicit sink (stdout by default).
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/", "@"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class ResolutionLogger:
    """Emit deterministic trace lines for shim resolution and PATH lookups."""

    def __init__(self, sink: TextIO | None = None, level: str = "DEBUG") -> None:
        """Initialize the sink and configure deterministic formatting."""

        self._sink = sink or sys.stdout
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, step: str, event: str, **context: object) -> None:
        """Emit one structured trace line."""

        line = f"[shim] level={level} step={step} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_start(self, path: str) -> None:
        """Emit the initial input path of a resolution."""

        self._emit("DEBUG", "start", "begin", path=path)

    def log_rewrite(self, step: str, source: str, target: str, **context: object) -> None:
        """Emit a path rewrite produced by one indirection step."""

        self._emit("DEBUG", step, "rewrite", source=source, target=target, **context)

    def log_miss(self, step: str, path: str) -> None:
        """Emit a step that was attempted and did not apply."""

        self._emit("DEBUG", step, "miss", path=path)

    def log_done(self, path: str, realpath: bool) -> None:
        """Emit the final path, noting whether realpath succeeded."""

        self._emit("DEBUG", "realpath", "done" if realpath else "fallback", path=path)

    def log_cap(self, path: str, depth: int) -> None:
        """Emit a warning when the indirection cap or a cycle stops resolution."""

        self._emit("WARNING", "loop", "cap", path=path, depth=depth)

    def log_not_found(self, name: str) -> None:
        """Emit a PATH lookup miss."""

        self._emit("INFO", "which", "not_found", name=name)
