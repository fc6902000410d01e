"""Errors surfaced to callers.

Missing optional data and failed enrichment lookups are never errors; only
structurally invalid findings are.
"""

from __future__ import annotations


class MalformedFindingError(ValueError):
    """A finding violates the input contract (no category, no identifier, ...)."""

    def __init__(self, message: str, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"finding #{index}: {message}"
        super().__init__(message)
