"""Orchestration of the complete pruning pipeline."""

from pathlib import Path
from typing import Iterable

from loguru import logger

from vaultprune.classification import DEFAULT_SUPPORTED_FORMATS, EquivalenceHarness, GroupClassifier
from vaultprune.deletion import DeletionExecutor, DeletionPlanner
from vaultprune.domain.image import GroupKind, ImageFormat
from vaultprune.domain.reports import DeletionPlan, DivergenceReport, ExecutionReport, ScanResult
from vaultprune.ingestion.file_facts import collect_file_facts
from vaultprune.ingestion.reference_extractor import DEFAULT_IMAGE_EXTENSIONS, ReferenceExtractor
from vaultprune.ingestion.scanner import VaultListing, scan_vault
from vaultprune.repository.model import RepositoryModel
from vaultprune.stores.base import FileStore, NoteStore


class PruneOrchestrator:
    """Orchestrates scan, classification, planning and execution for one vault."""

    def __init__(
        self,
        *,
        file_store: FileStore,
        note_store: NoteStore,
        supported_formats: Iterable[ImageFormat | str] = DEFAULT_SUPPORTED_FORMATS,
        image_extensions: list[str] | tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS,
        ignore_folders: list[str] | None = None,
        max_workers: int = 8,
    ):
        """Initialize the orchestrator with required services.

        Args:
            file_store: Store the image files are read from and deleted in
            note_store: Store the notes are read from and written to
            supported_formats: Formats that are not reported as incompatible
            image_extensions: Extensions that mark a file as an image
            ignore_folders: Vault-relative folders to skip while scanning
            max_workers: Thread count for hashing and file operations
        """
        self.file_store = file_store
        self.note_store = note_store
        self.image_extensions = image_extensions
        self.ignore_folders = ignore_folders or []
        self.max_workers = max_workers

        self.extractor = ReferenceExtractor(image_extensions)
        self.classifier = GroupClassifier(supported_formats)
        self.harness = EquivalenceHarness(supported_formats)
        self.planner = DeletionPlanner(self.extractor)

    def analyze(self, folder: Path) -> tuple[RepositoryModel, ScanResult]:
        """Scan a vault, build its model and classify every image.

        Args:
            folder: Vault root

        Returns:
            Tuple of (classified model, scan result with per-file errors)
        """
        listing = scan_vault(
            folder, ignore_folders=self.ignore_folders, image_extensions=self.image_extensions
        )
        scan_result = self.read_listing(listing)

        model = RepositoryModel.build(scan_result.images, scan_result.notes, self.extractor)
        self.classifier.classify(model)

        missing = sum(len(note.missing_refs) for note in model.notes)
        if missing:
            logger.info(f"{missing} image links point at files that do not exist")
        return model, scan_result

    def read_listing(self, listing: VaultListing) -> ScanResult:
        """Read every listed file, skipping the unreadable ones."""
        facts, errors = collect_file_facts(self.file_store, listing.images, self.max_workers)
        scan_result = ScanResult(images=facts, errors={e.path: e.reason for e in errors})

        for path in listing.notes:
            try:
                scan_result.notes.append((path, self.note_store.read(path)))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable note {path}: {e}")
                scan_result.errors[path] = str(e)

        return scan_result

    def check_equivalence(self, model: RepositoryModel) -> DivergenceReport:
        return self.harness.compare(model)

    def prune(
        self,
        model: RepositoryModel,
        groups: Iterable[GroupKind],
        *,
        apply_changes: bool = False,
    ) -> tuple[DeletionPlan, ExecutionReport | None]:
        """Plan the deletion of the selected groups and execute it if requested.

        Args:
            model: Classified model, updated in place when changes are applied
            groups: Groups to delete
            apply_changes: Execute the plan; otherwise only plan (dry run)

        Returns:
            Tuple of (plan, execution report or None for a dry run)
        """
        plan = self.planner.plan(model, groups)
        if not apply_changes:
            logger.info("Dry run: no files were changed")
            return plan, None

        executor = DeletionExecutor(
            model=model,
            file_store=self.file_store,
            note_store=self.note_store,
            max_workers=self.max_workers,
        )
        return plan, executor.execute(plan)
