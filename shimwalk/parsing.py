"""Shared parsing helpers for configuration and environment values."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})
_PLATFORM_ALIASES = {
    "auto": "auto",
    "posix": "posix",
    "unix": "posix",
    "linux": "posix",
    "darwin": "posix",
    "win32": "win32",
    "windows": "win32",
}


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string, else `None`."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_platform(value: object, field_name: str) -> str:
    """Parse a platform selector into ``auto``, ``posix`` or ``win32``.

    Raises:
        ValueError: If the token is not a known platform name.
    """

    normalized = normalize_optional_string(value)
    if normalized is not None:
        platform = _PLATFORM_ALIASES.get(normalized.lower())
        if platform is not None:
            return platform
    raise ValueError(f"`{field_name}` must be one of `auto`, `posix` or `win32`.")


def parse_positive_int(value: object, field_name: str) -> int:
    """Parse a strictly positive integer from an int or numeric text.

    Raises:
        ValueError: For booleans, blanks, non-numeric text and values below 1.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a positive integer.")
    if isinstance(value, int):
        parsed = value
    else:
        normalized = normalize_optional_string(value)
        try:
            parsed = int(normalized) if normalized is not None else 0
        except ValueError as exc:
            raise ValueError(f"`{field_name}` must be a positive integer.") from exc
    if parsed <= 0:
        raise ValueError(f"`{field_name}` must be a positive integer.")
    return parsed
