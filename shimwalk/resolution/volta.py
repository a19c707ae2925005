"""Volta shim indirection.

Volta exposes every managed tool through a shim under ``~/.volta/bin``. The
tool actually run is described by two JSON files under ``~/.volta/tools``:

- ``user/platform.json``: pinned ``node.runtime`` and ``node.npm`` versions.
- ``user/bin/<tool>.json``: the ``package`` that provides a global tool.

Installed images live under ``tools/image/{node,npm,packages}``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..paths.normalizer import normalize_path
from .host import HostCapabilities

_VOLTA_SEGMENT_RE = re.compile(r"(?<=/)\.volta/", re.IGNORECASE)
_VOLTA_IMAGE_RE = re.compile(r"/\.volta/tools/image/", re.IGNORECASE)


def volta_root(bin_path: str, basename: str) -> str | None:
    """Return the directory containing ``.volta/`` for a Volta shim path.

    ``node`` itself and files already inside a Volta image are never shims.
    """

    if basename == "node" or _VOLTA_IMAGE_RE.search(bin_path):
        return None
    match = _VOLTA_SEGMENT_RE.search(bin_path)
    if match is None:
        return None
    return bin_path[: match.start()] + ".volta"


def resolve_volta_target(
    host: HostCapabilities,
    bin_path: str,
    basename: str,
) -> str | None:
    """Return the installed file behind a Volta shim, or `None` on a miss."""

    root = volta_root(bin_path, basename)
    if root is None:
        return None

    image_dir = f"{root}/tools/image"
    user_dir = f"{root}/tools/user"
    if basename in {"npm", "npx"}:
        platform = _read_json(host, f"{user_dir}/platform.json")
        node_info = _get_mapping(platform, "node")
        npm_version = _get_string(node_info, "npm")
        node_version = _get_string(node_info, "runtime")
        relative_cli = f"bin/{basename}-cli.js"
        candidates: list[str] = []
        if npm_version:
            candidates.append(f"{image_dir}/npm/{npm_version}/{relative_cli}")
        if node_version:
            candidates.append(
                f"{image_dir}/node/{node_version}/lib/node_modules/npm/{relative_cli}"
            )
    else:
        bin_info = _read_json(host, f"{user_dir}/bin/{basename}.json")
        package = _get_string(bin_info, "package")
        if not package:
            return None
        package_bin = f"{image_dir}/packages/{package}/bin/{basename}"
        candidates = [package_bin, f"{package_bin}.cmd"]

    for candidate in candidates:
        normalized = normalize_path(candidate)
        if _safe_exists(host, normalized):
            return normalized
    return None


def _read_json(host: HostCapabilities, path: str) -> Any:
    """Read a JSON document, returning `None` on any read or parse failure."""

    try:
        return json.loads(host.read_text(path))
    except (OSError, ValueError):
        return None


def _safe_exists(host: HostCapabilities, path: str) -> bool:
    try:
        return host.exists(path)
    except (OSError, ValueError):
        return False


def _get_mapping(payload: Any, key: str) -> dict[str, Any]:
    if isinstance(payload, dict):
        value = payload.get(key)
        if isinstance(value, dict):
            return value
    return {}


def _get_string(payload: Any, key: str) -> str | None:
    if isinstance(payload, dict):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
