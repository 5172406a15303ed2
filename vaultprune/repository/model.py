"""In-memory model of the images and notes of one vault."""

from collections import defaultdict
from typing import Iterable

from loguru import logger

from vaultprune.domain.image import FileFacts, GroupKind, ImageRecord
from vaultprune.domain.note import ImageLink, NoteRecord
from vaultprune.errors import ExtractionError, ReferenceInvariantError
from vaultprune.ingestion.link_resolver import LinkResolver
from vaultprune.ingestion.reference_extractor import ReferenceExtractor


class RepositoryModel:
    """Owns every ImageRecord and NoteRecord of a run.

    Notes hold the forward references (note -> images). The back references
    (image -> notes) are derived from them and rewritten onto the image records
    whenever a note changes; nothing else writes ``referenced_by``.
    """

    def __init__(self, extractor: ReferenceExtractor | None = None) -> None:
        self.extractor = extractor or ReferenceExtractor()
        self._images: dict[str, ImageRecord] = {}
        self._notes: dict[str, NoteRecord] = {}
        self._resolver = LinkResolver([])
        self._back_references: dict[str, frozenset[str]] = {}

    @classmethod
    def build(
        cls,
        images: Iterable[FileFacts],
        notes: Iterable[tuple[str, str]],
        extractor: ReferenceExtractor | None = None,
    ) -> "RepositoryModel":
        """Build a consistent snapshot from scan results.

        A note with malformed reference syntax keeps the references that could
        be parsed and records a warning instead of aborting the build.

        Args:
            images: Facts of every image file
            notes: (path, content) pairs of every note
            extractor: Extractor used to find image links in note content

        Returns:
            RepositoryModel with back references computed
        """
        model = cls(extractor)
        for facts in images:
            model._images[facts.path] = ImageRecord(facts=facts)
        model._resolver = LinkResolver(model._images)

        for path, content in notes:
            model._notes[path] = model._read_note(path, content)

        model._refresh_back_references()
        logger.info(
            f"Built repository model: {len(model._images)} images, {len(model._notes)} notes"
        )
        return model

    @property
    def images(self) -> list[ImageRecord]:
        """All image records as a flat list ordered by path."""
        return [self._images[path] for path in sorted(self._images)]

    @property
    def notes(self) -> list[NoteRecord]:
        """All note records ordered by path."""
        return [self._notes[path] for path in sorted(self._notes)]

    def image(self, path: str) -> ImageRecord | None:
        return self._images.get(path)

    def note(self, path: str) -> NoteRecord | None:
        return self._notes.get(path)

    def referenced_by(self, path: str) -> frozenset[str]:
        """Notes referencing an image; empty for unknown paths."""
        return self._back_references.get(path, frozenset())

    @property
    def back_references(self) -> dict[str, frozenset[str]]:
        return dict(self._back_references)

    @property
    def is_classified(self) -> bool:
        return all(image.group is not None for image in self._images.values())

    def groups(self) -> dict[GroupKind, list[str]]:
        """Image paths per group, each list sorted. Unclassified images are left out."""
        groups: dict[GroupKind, list[str]] = {kind: [] for kind in GroupKind}
        for image in self.images:
            if image.group is not None:
                groups[image.group].append(image.path)
        return groups

    def add_image(self, facts: FileFacts) -> None:
        """Add or replace an image and re-link every note against the new image set."""
        self._images[facts.path] = ImageRecord(facts=facts)
        self._relink_notes()

    def add_note(self, path: str, content: str) -> None:
        """Add a note, or replace an existing note's content."""
        self._notes[path] = self._read_note(path, content)
        self._refresh_back_references()

    def update_note(self, path: str, content: str) -> None:
        if path not in self._notes:
            raise KeyError(f"Note {path} not found")
        self.add_note(path, content)

    def remove_note(self, path: str) -> None:
        self._notes.pop(path, None)
        self._refresh_back_references()

    def remove_images(self, paths: Iterable[str]) -> None:
        """Drop deleted images from the model.

        Links that also resolve to a surviving image (an ambiguous file name)
        remain valid and simply lose the removed candidate.

        Raises:
            ReferenceInvariantError: If a note still holds a link that resolves
                only to removed images.
        """
        removed = {path for path in paths if path in self._images}
        if not removed:
            return

        for note in self._notes.values():
            for link in note.links:
                if link.paths and set(link.paths) <= removed:
                    raise ReferenceInvariantError(
                        f"Cannot remove {sorted(set(link.paths))}: still linked from "
                        f"{note.path} line {link.line_number} ({link.text})"
                    )

        for path in removed:
            del self._images[path]
        self._relink_notes()
        logger.debug(f"Removed {len(removed)} images from the model")

    def verify(self) -> None:
        """Check bidirectional consistency of forward and back references.

        Raises:
            ReferenceInvariantError: If any reference is one-sided or points at an unknown image.
        """
        for note in self._notes.values():
            for image_path in note.image_refs:
                if image_path not in self._images:
                    raise ReferenceInvariantError(
                        f"{note.path} references unknown image {image_path}"
                    )
                if note.path not in self._images[image_path].referenced_by:
                    raise ReferenceInvariantError(
                        f"{image_path} does not list {note.path} as a referencing note"
                    )

        for image in self._images.values():
            for note_path in image.referenced_by:
                note = self._notes.get(note_path)
                if note is None or image.path not in note.image_refs:
                    raise ReferenceInvariantError(
                        f"{image.path} lists {note_path} but the note does not reference it"
                    )

    def _read_note(self, path: str, content: str) -> NoteRecord:
        warnings = []
        try:
            links = self.extractor.extract(content)
        except ExtractionError as e:
            logger.warning(f"Malformed image reference in {path}: {e}")
            warnings.append(str(e))
            links = e.partial

        return self._link_note(
            NoteRecord(path=path, content=content, links=links, warnings=warnings)
        )

    def _link_note(self, note: NoteRecord) -> NoteRecord:
        """Resolve a note's links against the current image set."""
        links: list[ImageLink] = []
        image_refs: list[str] = []
        missing_refs: list[str] = []

        for link in note.links:
            paths = self._resolver.resolve(note.path, link.target)
            links.append(link.model_copy(update={"paths": paths}))
            if not paths and link.target not in missing_refs:
                missing_refs.append(link.target)
            for image_path in paths:
                if image_path not in image_refs:
                    image_refs.append(image_path)

        return note.model_copy(
            update={"links": links, "image_refs": image_refs, "missing_refs": missing_refs}
        )

    def _relink_notes(self) -> None:
        self._resolver = LinkResolver(self._images)
        self._notes = {path: self._link_note(note) for path, note in self._notes.items()}
        self._refresh_back_references()

    def _refresh_back_references(self) -> None:
        back_references: dict[str, set[str]] = defaultdict(set)
        for note in self._notes.values():
            for image_path in note.image_refs:
                if image_path not in self._images:
                    raise ReferenceInvariantError(
                        f"{note.path} references unknown image {image_path}"
                    )
                back_references[image_path].add(note.path)

        self._back_references = {
            path: frozenset(back_references.get(path, ())) for path in self._images
        }
        for path, image in self._images.items():
            image.referenced_by = self._back_references[path]
