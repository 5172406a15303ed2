"""End-to-end tests running the orchestrator on a vault written to disk."""

from pathlib import Path

import pytest

from vaultprune.domain.image import GroupKind
from vaultprune.orchestrator import PruneOrchestrator
from vaultprune.stores import LocalFileStore, LocalNoteStore

DEFAULT_GROUPS = [GroupKind.ZERO_BYTE, GroupKind.UNREFERENCED, GroupKind.DUPLICATE]


@pytest.fixture
def orchestrator(written_vault: Path) -> PruneOrchestrator:
    return PruneOrchestrator(
        file_store=LocalFileStore(written_vault),
        note_store=LocalNoteStore(written_vault),
        max_workers=2,
    )


def files_in(folder: Path) -> list[str]:
    return sorted(
        file.relative_to(folder).as_posix() for file in folder.rglob("*") if file.is_file()
    )


def test_analyze_classifies_vault(orchestrator: PruneOrchestrator, written_vault: Path) -> None:
    model, scan_result = orchestrator.analyze(written_vault)

    assert scan_result.errors == {}
    assert model.groups() == {
        GroupKind.ZERO_BYTE: ["Z - Attachements/empty.png"],
        GroupKind.UNREFERENCED: ["Z - Attachements/orphan.png"],
        GroupKind.DUPLICATE: ["Z - Attachements/b.png", "Z - Attachements/c.png"],
        GroupKind.INCOMPATIBLE: ["Z - Attachements/scan.tiff"],
        GroupKind.VALID: ["Z - Attachements/a.png", "photos/cat.jpg"],
    }
    assert orchestrator.check_equivalence(model).is_equivalent


def test_dry_run_changes_nothing(orchestrator: PruneOrchestrator, written_vault: Path) -> None:
    before = files_in(written_vault)
    model, _ = orchestrator.analyze(written_vault)

    plan, report = orchestrator.prune(model, DEFAULT_GROUPS)

    assert report is None
    assert len(plan.images) == 4
    assert files_in(written_vault) == before
    assert model.image("Z - Attachements/orphan.png") is not None


def test_apply_deletes_and_rewrites(orchestrator: PruneOrchestrator, written_vault: Path) -> None:
    model, _ = orchestrator.analyze(written_vault)

    _, report = orchestrator.prune(model, DEFAULT_GROUPS, apply_changes=True)

    assert report is not None and report.ok
    assert files_in(written_vault) == [
        "Z - Attachements/a.png",
        "Z - Attachements/scan.tiff",
        "daily/2024-01-01.md",
        "photos/cat.jpg",
        "projects/cats.md",
        "scans.md",
    ]
    daily = (written_vault / "daily/2024-01-01.md").read_text(encoding="utf-8")
    assert daily == "# Monday\n![[a.png]]\nText with an inline  image.\n"


def test_rescan_after_apply_is_clean(orchestrator: PruneOrchestrator, written_vault: Path) -> None:
    model, _ = orchestrator.analyze(written_vault)
    orchestrator.prune(model, DEFAULT_GROUPS, apply_changes=True)

    rescanned, _ = orchestrator.analyze(written_vault)

    assert all(note.missing_refs == [] for note in rescanned.notes), "No dangling links remain"
    plan, _ = orchestrator.prune(rescanned, DEFAULT_GROUPS)
    assert plan.is_empty


def test_unreadable_note_is_reported(orchestrator: PruneOrchestrator, written_vault: Path) -> None:
    (written_vault / "broken.md").write_bytes(b"\xff\xfe not utf-8 \x80")

    model, scan_result = orchestrator.analyze(written_vault)

    assert "broken.md" in scan_result.errors
    assert model.note("broken.md") is None
