"""CLI for classifying the images of an Obsidian vault and deleting selected groups"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from vaultprune.config import settings
from vaultprune.domain.image import GroupKind
from vaultprune.errors import InvariantError
from vaultprune.orchestrator import PruneOrchestrator
from vaultprune.stores.local import LocalFileStore, LocalNoteStore


def main(
    vault: str,
    groups: list[GroupKind],
    apply_changes: bool,
    check_equivalence: bool,
    report_path: str | None,
) -> int:
    # Setup paths and services
    folder = Path(vault).expanduser()
    orchestrator = PruneOrchestrator(
        file_store=LocalFileStore(folder),
        note_store=LocalNoteStore(folder),
        supported_formats=settings.supported_formats,
        image_extensions=settings.image_extensions,
        ignore_folders=settings.ignore_folders,
        max_workers=settings.max_workers,
    )

    try:
        model, scan_result = orchestrator.analyze(folder)

        for kind, paths in model.groups().items():
            logger.info(f"{kind.value}: {len(paths)}")
            for path in paths:
                logger.debug(f"  {path}")

        if check_equivalence and not orchestrator.check_equivalence(model).is_equivalent:
            logger.error("Legacy and flat-list classifiers disagree, not deleting anything")
            return 1

        plan, report = orchestrator.prune(model, groups, apply_changes=apply_changes)
    except InvariantError as e:
        logger.error(f"Aborting: {e}")
        return 2

    for path in plan.images:
        logger.info(f"{'delete' if apply_changes else 'would delete'}: {path}")
    for rewrite in plan.notes:
        logger.info(f"{'rewrite' if apply_changes else 'would rewrite'}: {rewrite.path}")

    if report_path:
        output = report if report is not None else plan
        Path(report_path).write_text(output.model_dump_json(indent=2))
        logger.info(f"Wrote report to {report_path}")

    if scan_result.errors:
        logger.warning(f"{len(scan_result.errors)} files could not be read")
    return 0 if report is None or report.ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--vault",
        type=str,
        required=False,
        help="Folder containing the vault",
        default=str(settings.vault_path),
    )
    parser.add_argument(
        "--groups",
        nargs="+",
        choices=[kind.value for kind in GroupKind],
        default=[
            GroupKind.ZERO_BYTE.value,
            GroupKind.UNREFERENCED.value,
            GroupKind.DUPLICATE.value,
        ],
        help="Groups of images to delete",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        default=settings.apply_changes,
        help="Apply changes; without this flag only the plan is shown",
    )
    parser.add_argument(
        "--check-equivalence",
        action="store_true",
        help="Compare the legacy and flat-list classifiers before deleting",
    )
    parser.add_argument("--report", type=str, required=False, help="Write a JSON report here")

    args = parser.parse_args()

    logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

    sys.exit(
        main(
            vault=args.vault,
            groups=[GroupKind(group) for group in args.groups],
            apply_changes=args.apply,
            check_equivalence=args.check_equivalence,
            report_path=args.report,
        )
    )
