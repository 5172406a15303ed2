"""Exceptions raised by the vault pruning pipeline.

Per-file errors (``ScanError``, ``ExtractionError``, ``ExecutionError``) are
recovered where they occur and end up in a report. ``InvariantError`` and its
subclasses are never recovered: they mean the in-memory model can no longer be
trusted and any further deletion could lose data.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultprune.domain.note import ImageLink


class VaultPruneError(Exception):
    """Base class for all vaultprune errors."""


class ScanError(VaultPruneError):
    """A single file could not be read during the scan."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class ExtractionError(VaultPruneError):
    """A note contains malformed image reference syntax.

    Attributes:
        line_number: 1-based line of the first malformed reference.
        partial: Links that were parsed successfully despite the error.
    """

    def __init__(self, message: str, *, line_number: int, partial: list["ImageLink"]) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.partial = partial


class InvariantError(VaultPruneError):
    """The repository model violates a structural invariant."""


class ReferenceInvariantError(InvariantError):
    """Forward and backward references disagree, or a deleted image is still referenced."""


class ClassificationInvariantError(InvariantError):
    """An image was placed in zero or several groups."""


class PlanningError(VaultPruneError):
    """A deletion plan cannot be built from the given model."""


class ExecutionError(VaultPruneError):
    """A single file operation failed while executing a plan."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
