"""Applying deletion plans to the file and note stores."""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable

from loguru import logger

from vaultprune.domain.reports import (
    DeletionPlan,
    ExecutionReport,
    NoteRewrite,
    Outcome,
    OutcomeKind,
)
from vaultprune.errors import ExecutionError
from vaultprune.repository.model import RepositoryModel
from vaultprune.stores.base import FileStore, NoteStore

ALREADY_ABSENT = "already absent"
ALREADY_CLEAN = "already clean"
NOTE_NOT_FOUND = "note not found"
NOTE_CHANGED = "note changed since scan"
LINKS_KEPT = "links still resolve"


class DeletionExecutor:
    """Executes a deletion plan in two phases: note rewrites, then image deletions.

    Every note is rewritten by a single task, so two removals from the same note
    never race. An image is deleted only when every note referencing it has been
    rewritten, so a failed rewrite can never leave a link to a deleted file.
    The model is updated on the calling thread, for successful paths only.
    """

    def __init__(
        self,
        *,
        model: RepositoryModel,
        file_store: FileStore,
        note_store: NoteStore,
        max_workers: int = 8,
    ):
        self.model = model
        self.file_store = file_store
        self.note_store = note_store
        self.max_workers = max_workers

    def execute(self, plan: DeletionPlan) -> ExecutionReport:
        """Execute a plan and report the outcome of every path.

        Executing the same plan again is safe: absent images and notes that
        already hold the rewritten text are reported as skipped.
        """
        report = ExecutionReport()

        report.notes = self._run_all(
            {rewrite.path: rewrite for rewrite in plan.notes}, self._rewrite_note
        )
        cleared_notes = self._apply_note_outcomes(plan, report)

        deletable: dict[str, str] = {}
        for path in plan.images:
            blockers = sorted(self.model.referenced_by(path) - cleared_notes)
            if blockers:
                logger.warning(f"Not deleting {path}: still referenced by {blockers}")
                report.images[path] = Outcome.skipped(f"still referenced by {', '.join(blockers)}")
            else:
                deletable[path] = path

        report.images.update(self._run_all(deletable, self._delete_image))
        report.images = dict(sorted(report.images.items()))

        removed = [path for path, outcome in report.images.items() if self._image_gone(outcome)]
        self.model.remove_images(removed)
        self.model.verify()

        logger.info(
            f"Deleted {len(report.paths_with(OutcomeKind.DELETED))} images, "
            f"rewrote {len(report.paths_with(OutcomeKind.REWRITTEN))} notes, "
            f"{len(report.failed)} failures"
        )
        return report

    def _run_all(self, items: dict, operation: Callable) -> dict[str, Outcome]:
        outcomes: dict[str, Outcome] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future, str] = {
                executor.submit(operation, item): path for path, item in items.items()
            }
            for future in as_completed(futures):
                path = futures[future]
                try:
                    outcomes[path] = future.result()
                except ExecutionError as e:
                    logger.warning(f"Failed on {path}: {e.reason}")
                    outcomes[path] = Outcome.failed(e.reason)
                except (OSError, UnicodeError) as e:
                    logger.warning(f"Failed on {path}: {e}")
                    outcomes[path] = Outcome.failed(str(e))
        return dict(sorted(outcomes.items()))

    def _rewrite_note(self, rewrite: NoteRewrite) -> Outcome:
        try:
            current = self.note_store.read(rewrite.path)
        except FileNotFoundError:
            return Outcome.skipped(NOTE_NOT_FOUND)

        if current == rewrite.content:
            # Every link of the note still resolves to a surviving image
            if rewrite.content == rewrite.original_content:
                return Outcome.skipped(LINKS_KEPT)
            return Outcome.skipped(ALREADY_CLEAN)
        if current != rewrite.original_content:
            raise ExecutionError(rewrite.path, NOTE_CHANGED)

        self.note_store.write(rewrite.path, rewrite.content)
        logger.debug(f"Rewrote {rewrite.path}, removed {rewrite.removed_refs}")
        return Outcome.rewritten()

    def _delete_image(self, path: str) -> Outcome:
        try:
            self.file_store.delete(path)
        except FileNotFoundError:
            return Outcome.skipped(ALREADY_ABSENT)
        logger.debug(f"Deleted {path}")
        return Outcome.deleted()

    def _apply_note_outcomes(self, plan: DeletionPlan, report: ExecutionReport) -> set[str]:
        """Update the model for successful rewrites and return the cleared note paths."""
        cleared_notes = set()
        for rewrite in plan.notes:
            outcome = report.notes[rewrite.path]
            if outcome.kind is OutcomeKind.FAILED:
                continue
            if outcome.reason == NOTE_NOT_FOUND:
                self.model.remove_note(rewrite.path)
            elif self.model.note(rewrite.path) is not None:
                self.model.update_note(rewrite.path, rewrite.content)
            cleared_notes.add(rewrite.path)
        return cleared_notes

    @staticmethod
    def _image_gone(outcome: Outcome) -> bool:
        return outcome.kind is OutcomeKind.DELETED or outcome.reason == ALREADY_ABSENT
