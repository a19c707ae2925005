"""Unit tests for shared configuration value parsers."""

from __future__ import annotations

import pytest

from shimwalk.parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_platform,
    parse_positive_int,
)


def test_normalize_optional_string_strips_and_blanks_to_none() -> None:
    """Whitespace-only and `None` values should normalize to `None`."""

    assert normalize_optional_string("  x ") == "x"
    assert normalize_optional_string("   ") is None
    assert normalize_optional_string(None) is None
    assert normalize_optional_string(3) == "3"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        ("YES", True),
        (" 1 ", True),
        ("off", False),
        ("0", False),
        ("maybe", None),
        ("", None),
    ],
)
def test_parse_permissive_boolean_accepts_common_tokens(value: object, expected: bool | None) -> None:
    """Boolean parser should accept common tokens and reject the rest with `None`."""

    assert parse_permissive_boolean(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("auto", "auto"),
        ("Linux", "posix"),
        ("darwin", "posix"),
        ("WINDOWS", "win32"),
        (" win32 ", "win32"),
    ],
)
def test_parse_platform_maps_aliases(value: str, expected: str) -> None:
    """Platform aliases should map onto `auto`, `posix` or `win32`."""

    assert parse_platform(value, "platform") == expected


def test_parse_platform_rejects_unknown_names() -> None:
    """Unknown platform names should raise a field-scoped error."""

    with pytest.raises(ValueError, match="`--platform` must be one of"):
        parse_platform("plan9", "--platform")


def test_parse_positive_int_accepts_ints_and_numeric_text() -> None:
    """Positive integers may be given as ints or numeric strings."""

    assert parse_positive_int(5, "depth") == 5
    assert parse_positive_int(" 12 ", "depth") == 12


@pytest.mark.parametrize("value", [0, -1, "abc", "", None, False])
def test_parse_positive_int_rejects_invalid_values(value: object) -> None:
    """Zero, negatives, booleans and non-numeric text should be rejected."""

    with pytest.raises(ValueError, match="`depth` must be a positive integer"):
        parse_positive_int(value, "depth")
