"""Classification of vault images into actionable groups."""

from vaultprune.classification.classifier import (
    DEFAULT_SUPPORTED_FORMATS,
    ClassificationStrategy,
    GroupClassifier,
    assignments_from_buckets,
)
from vaultprune.classification.equivalence import EquivalenceHarness
from vaultprune.classification.flat import classify_target
from vaultprune.classification.keyed import classify_legacy, to_keyed_image_map

__all__ = [
    "DEFAULT_SUPPORTED_FORMATS",
    "ClassificationStrategy",
    "EquivalenceHarness",
    "GroupClassifier",
    "assignments_from_buckets",
    "classify_legacy",
    "classify_target",
    "to_keyed_image_map",
]
