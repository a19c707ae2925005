"""Domain exceptions for lookup and CLI diagnostics."""

from __future__ import annotations


class ShimwalkError(RuntimeError):
    """Raised when a command stage fails in a caller-visible way."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class BinaryNotFoundError(ShimwalkError):
    """Raised when a PATH lookup finds nothing and the caller asked to fail."""

    def __init__(self, binary_name: str) -> None:
        super().__init__(
            stage="which",
            detail=f"Binary not found: `{binary_name}`.",
            hint="Check that the tool is installed and its directory is on PATH.",
        )
        self.binary_name = binary_name
