"""Configuration model and loaders for shimwalk.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.
- Build resolver/locator instances bound to the configured platform flavor.

Key types:
- `ShimwalkConfig`: normalized runtime settings.
- `ConfigLoader`: static construction helpers for `ShimwalkConfig`.

Precedence for every field is: explicit caller override > YAML file >
environment > field default.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_platform,
    parse_positive_int,
)
from .paths.flavor import use_win32
from .resolution.host import HostCapabilities
from .resolution.locator import BinaryLocator
from .resolution.shims import DEFAULT_MAX_SHIM_DEPTH, ShimResolver
from .telemetry.logger import ResolutionLogger


@dataclass(slots=True)
class ShimwalkConfig:
    """Runtime configuration for resolution commands.

    Attributes:
        platform: Path flavor, `auto` (host), `posix` or `win32`.
        max_shim_depth: Maximum number of indirections followed per path.
        trace: Whether resolution steps are logged.
        common_paths: Extra install locations probed per tool before `PATH`.
    """

    platform: str = "auto"
    max_shim_depth: int = DEFAULT_MAX_SHIM_DEPTH
    trace: bool = False
    common_paths: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate configuration values before use."""

        self.platform = parse_platform(self.platform, "platform")
        self.max_shim_depth = parse_positive_int(self.max_shim_depth, "max_shim_depth")

    def is_win32(self) -> bool:
        """Return whether Windows path and launcher rules apply."""

        if self.platform == "auto":
            return use_win32(None)
        return self.platform == "win32"

    def build_host(self) -> HostCapabilities:
        """Build OS-backed host capabilities for the configured flavor."""

        return HostCapabilities.from_os(win32=self.is_win32())

    def build_locator(self, trace: ResolutionLogger | None = None) -> BinaryLocator:
        """Build a locator and resolver honoring depth and flavor settings."""

        resolver = ShimResolver(self.build_host(), max_depth=self.max_shim_depth, trace=trace)
        return BinaryLocator(resolver, trace=trace)

    def common_paths_for(self, tool: str) -> list[str]:
        """Return configured extra locations for one tool name."""

        return list(self.common_paths.get(tool, ()))


class ConfigLoader:
    """Factory methods for creating `ShimwalkConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset({"platform", "max_shim_depth", "trace", "common_paths"})

    @staticmethod
    def load(
        config_path: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ShimwalkConfig:
        """Load environment settings, then overlay an optional YAML file."""

        config = ConfigLoader.from_env(env)
        if config_path is None:
            return config
        return ConfigLoader.from_yaml(config_path, base=config)

    @staticmethod
    def from_yaml(path: Path, base: ShimwalkConfig | None = None) -> ShimwalkConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(
            payload,
            source_label=f"YAML `{path}`",
            base=base if base is not None else ShimwalkConfig(),
        )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ShimwalkConfig:
        """Create a validated config from `SHIMWALK_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        platform = normalize_optional_string(env_map.get("SHIMWALK_PLATFORM")) or "auto"
        raw_depth = normalize_optional_string(env_map.get("SHIMWALK_MAX_SHIM_DEPTH"))
        raw_trace = normalize_optional_string(env_map.get("SHIMWALK_TRACE"))
        trace = False
        if raw_trace is not None:
            parsed_trace = parse_permissive_boolean(raw_trace)
            if parsed_trace is None:
                raise ValueError(
                    "Environment variable `SHIMWALK_TRACE` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            trace = parsed_trace

        config = ShimwalkConfig(
            platform=platform,
            max_shim_depth=(
                parse_positive_int(raw_depth, "SHIMWALK_MAX_SHIM_DEPTH")
                if raw_depth is not None
                else DEFAULT_MAX_SHIM_DEPTH
            ),
            trace=trace,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any],
        source_label: str,
        base: ShimwalkConfig,
    ) -> ShimwalkConfig:
        """Overlay a mapping payload on top of a base config."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        config = replace(base, common_paths=dict(base.common_paths))
        if "platform" in payload:
            config.platform = parse_platform(payload["platform"], "platform")
        if "max_shim_depth" in payload:
            config.max_shim_depth = parse_positive_int(payload["max_shim_depth"], "max_shim_depth")
        if "trace" in payload:
            parsed = parse_permissive_boolean(payload["trace"])
            if parsed is None:
                raise ValueError(
                    f"{source_label} field `trace` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            config.trace = parsed
        if "common_paths" in payload:
            config.common_paths.update(
                ConfigLoader._common_paths_map(payload["common_paths"], source_label)
            )
        config.validate()
        return config

    @staticmethod
    def _common_paths_map(raw: object, source_label: str) -> dict[str, tuple[str, ...]]:
        """Read a tool -> list-of-paths mapping with non-empty entries."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `common_paths` must be a mapping/object.")

        normalized: dict[str, tuple[str, ...]] = {}
        for raw_tool, raw_paths in raw.items():
            tool = normalize_optional_string(raw_tool)
            if tool is None:
                raise ValueError(f"{source_label} field `common_paths` contains a blank key.")
            if isinstance(raw_paths, str) or not isinstance(raw_paths, list):
                raise ValueError(
                    f"{source_label} field `common_paths.{tool}` must be a list of paths."
                )
            paths: list[str] = []
            for raw_path in raw_paths:
                value = normalize_optional_string(raw_path)
                if value is None:
                    raise ValueError(
                        f"{source_label} field `common_paths.{tool}` contains a blank path."
                    )
                paths.append(value)
            normalized[tool] = tuple(paths)
        return normalized
