"""Pure computation of which images to delete and how notes must change."""

from typing import Iterable

from loguru import logger

from vaultprune.domain.image import GroupKind
from vaultprune.domain.reports import DeletionPlan, NoteRewrite
from vaultprune.errors import PlanningError
from vaultprune.ingestion.reference_extractor import ReferenceExtractor
from vaultprune.repository.model import RepositoryModel


class DeletionPlanner:
    """Builds deletion plans from a classified model without touching any store."""

    def __init__(self, extractor: ReferenceExtractor | None = None):
        self.extractor = extractor or ReferenceExtractor()

    def plan(self, model: RepositoryModel, selected_groups: Iterable[GroupKind]) -> DeletionPlan:
        """Plan the deletion of every image whose group is selected.

        Canonical duplicate members are never in the DUPLICATE group, so they are
        only deleted if their own group is selected too. A link is removed from a
        note when every image it resolves to is deleted; a link that still
        resolves to a surviving image is kept.

        Args:
            model: Classified repository model
            selected_groups: Groups whose images are deleted

        Returns:
            DeletionPlan with images sorted by path and one rewrite per affected note

        Raises:
            PlanningError: If the model has not been classified.
        """
        if not model.is_classified:
            raise PlanningError("Model must be classified before planning deletions")

        groups = sorted(set(selected_groups), key=list(GroupKind).index)
        if GroupKind.VALID in groups:
            logger.warning("Planning deletion of VALID images")

        doomed = {image.path for image in model.images if image.group in groups}
        affected_notes = sorted({note for path in doomed for note in model.referenced_by(path)})

        rewrites = []
        for note_path in affected_notes:
            note = model.note(note_path)
            if note is None:
                raise PlanningError(f"{note_path} is referenced but not in the model")

            removed_refs = [path for path in note.image_refs if path in doomed]
            link_texts = {
                link.text for link in note.links if link.paths and set(link.paths) <= doomed
            }
            rewrites.append(
                NoteRewrite(
                    path=note.path,
                    original_content=note.content,
                    content=self.extractor.remove_links(note.content, link_texts),
                    image_refs=[path for path in note.image_refs if path not in doomed],
                    removed_refs=removed_refs,
                )
            )

        self._warn_lost_content(model, doomed)
        plan = DeletionPlan(groups=groups, images=sorted(doomed), notes=rewrites)
        logger.info(
            f"Planned deletion of {len(plan.images)} images and rewrite of {len(plan.notes)} notes"
        )
        return plan

    @staticmethod
    def _warn_lost_content(model: RepositoryModel, doomed: set[str]) -> None:
        """Warn when every referenced copy of some content is about to be deleted."""
        copies: dict[str, list[str]] = {}
        for image in model.images:
            if image.referenced_by and image.size_bytes:
                copies.setdefault(image.content_hash, []).append(image.path)

        for paths in copies.values():
            if len(paths) > 1 and set(paths) <= doomed:
                logger.warning(f"All copies of the same image will be deleted: {paths}")
