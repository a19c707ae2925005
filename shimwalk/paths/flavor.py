"""Path flavor selection shared by the pure path helpers.

Every helper accepts an optional ``win32`` keyword. ``None`` means "use the
host flavor"; tests and callers analyzing foreign paths pass it explicitly.
"""

from __future__ import annotations

import sys

IS_WINDOWS = sys.platform == "win32"


def use_win32(win32: bool | None) -> bool:
    """Return the effective flavor for an optional per-call override."""

    if win32 is None:
        return IS_WINDOWS
    return win32
