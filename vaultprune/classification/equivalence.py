"""Shadow comparison of the legacy and flat-list classifiers."""

from typing import Iterable

from loguru import logger

from vaultprune.classification.classifier import (
    DEFAULT_SUPPORTED_FORMATS,
    ClassificationStrategy,
    GroupClassifier,
)
from vaultprune.classification.flat import classify_target
from vaultprune.classification.keyed import classify_legacy
from vaultprune.domain.image import ImageFormat
from vaultprune.domain.reports import DivergenceReport
from vaultprune.repository.model import RepositoryModel


class EquivalenceHarness:
    """Runs two classification strategies on one snapshot and diffs the results."""

    def __init__(
        self,
        supported_formats: Iterable[ImageFormat | str] = DEFAULT_SUPPORTED_FORMATS,
        legacy: ClassificationStrategy = classify_legacy,
        target: ClassificationStrategy = classify_target,
    ):
        self.legacy = GroupClassifier(supported_formats, strategy=legacy)
        self.target = GroupClassifier(supported_formats, strategy=target)

    def compare(self, model: RepositoryModel) -> DivergenceReport:
        """Report every image path whose group differs between the two strategies.

        Neither strategy writes to the model, so both see the identical snapshot.

        Returns:
            DivergenceReport mapping path to (legacy group, target group)
        """
        legacy_groups = self.legacy.assign(model)
        target_groups = self.target.assign(model)

        report = DivergenceReport(checked=len(target_groups))
        for path in sorted(legacy_groups.keys() | target_groups.keys()):
            legacy_group = legacy_groups.get(path)
            target_group = target_groups.get(path)
            if legacy_group != target_group:
                report.divergences[path] = (legacy_group, target_group)

        if report.is_equivalent:
            logger.info(f"Classifiers agree on all {report.checked} images")
        else:
            for path, (legacy_group, target_group) in report.divergences.items():
                logger.warning(
                    f"Classifier divergence for {path}: {legacy_group} != {target_group}"
                )
        return report
