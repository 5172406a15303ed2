"""Plan and report domain models."""

from enum import Enum

from pydantic import BaseModel

from vaultprune.domain.image import FileFacts, GroupKind


class ScanResult(BaseModel):
    """Raw facts gathered from the vault before the model is built."""

    images: list[FileFacts] = []
    notes: list[tuple[str, str]] = []  # (note path, content)
    errors: dict[str, str] = {}  # path -> reason


class NoteRewrite(BaseModel):
    """Planned rewrite of one note.

    Attributes:
        path: Path of the note to rewrite.
        original_content: Note text the plan was computed from.
        content: Note text with the deleted image links removed.
        image_refs: Remaining image references after the rewrite.
        removed_refs: Image paths whose links are removed from this note.
    """

    path: str
    original_content: str
    content: str
    image_refs: list[str]
    removed_refs: list[str]


class DeletionPlan(BaseModel):
    """Images to delete and the note rewrites that must happen first."""

    groups: list[GroupKind] = []
    images: list[str] = []
    notes: list[NoteRewrite] = []

    @property
    def is_empty(self) -> bool:
        return not self.images and not self.notes


class OutcomeKind(str, Enum):
    DELETED = "deleted"
    REWRITTEN = "rewritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class Outcome(BaseModel):
    kind: OutcomeKind
    reason: str = ""

    @classmethod
    def deleted(cls) -> "Outcome":
        return cls(kind=OutcomeKind.DELETED)

    @classmethod
    def rewritten(cls) -> "Outcome":
        return cls(kind=OutcomeKind.REWRITTEN)

    @classmethod
    def skipped(cls, reason: str) -> "Outcome":
        return cls(kind=OutcomeKind.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(kind=OutcomeKind.FAILED, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.kind is not OutcomeKind.FAILED


class ExecutionReport(BaseModel):
    """Outcome of every path attempted while executing a plan."""

    notes: dict[str, Outcome] = {}
    images: dict[str, Outcome] = {}

    def paths_with(self, kind: OutcomeKind) -> list[str]:
        outcomes = {**self.notes, **self.images}
        return sorted(path for path, outcome in outcomes.items() if outcome.kind is kind)

    @property
    def deleted(self) -> list[str]:
        return self.paths_with(OutcomeKind.DELETED)

    @property
    def failed(self) -> list[str]:
        return self.paths_with(OutcomeKind.FAILED)

    @property
    def ok(self) -> bool:
        return not self.failed


class DivergenceReport(BaseModel):
    """Paths whose group differs between two classifier implementations."""

    checked: int = 0
    divergences: dict[str, tuple[GroupKind | None, GroupKind | None]] = {}

    @property
    def is_equivalent(self) -> bool:
        return not self.divergences
