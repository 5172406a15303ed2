"""Assignment of every image to exactly one group."""

from typing import Iterable, Protocol

from loguru import logger

from vaultprune.classification.flat import classify_target
from vaultprune.domain.image import GroupKind, ImageFormat
from vaultprune.errors import ClassificationInvariantError
from vaultprune.repository.model import RepositoryModel

DEFAULT_SUPPORTED_FORMATS = frozenset(
    {
        ImageFormat.PNG,
        ImageFormat.JPEG,
        ImageFormat.GIF,
        ImageFormat.WEBP,
        ImageFormat.BMP,
        ImageFormat.SVG,
        ImageFormat.AVIF,
    }
)


class ClassificationStrategy(Protocol):
    """A pure function from a model snapshot to group buckets.

    Rules, first match wins:
    1. ZERO_BYTE: the file is empty.
    2. UNREFERENCED: no note links to the image.
    3. DUPLICATE: another remaining image has the same hash and a smaller path.
    4. INCOMPATIBLE: the format is not supported.
    5. VALID: everything else.
    """

    def __call__(
        self, model: RepositoryModel, supported_formats: frozenset[ImageFormat]
    ) -> dict[GroupKind, list[str]]: ...


def assignments_from_buckets(
    buckets: dict[GroupKind, list[str]], image_paths: Iterable[str]
) -> dict[str, GroupKind]:
    """Turn group buckets into one group per image.

    Raises:
        ClassificationInvariantError: If an image is in several buckets, in
            none, or a bucket holds a path the model does not know.
    """
    known = set(image_paths)
    assignments: dict[str, GroupKind] = {}

    for kind in GroupKind:
        for path in buckets.get(kind, []):
            if path not in known:
                raise ClassificationInvariantError(f"{path} was classified but is not in the model")
            if path in assignments:
                raise ClassificationInvariantError(
                    f"{path} found in both {assignments[path].value} and {kind.value}"
                )
            assignments[path] = kind

    unassigned = known - assignments.keys()
    if unassigned:
        raise ClassificationInvariantError(f"Images without a group: {sorted(unassigned)}")
    return assignments


class GroupClassifier:
    """Classifies the images of a model with a pluggable strategy."""

    def __init__(
        self,
        supported_formats: Iterable[ImageFormat | str] = DEFAULT_SUPPORTED_FORMATS,
        strategy: ClassificationStrategy | None = None,
    ):
        """Initialize the classifier.

        Args:
            supported_formats: Formats that count as compatible
            strategy: Classification implementation, the flat-list one by default
        """
        self.supported_formats = frozenset(ImageFormat(f) for f in supported_formats)
        self.strategy = strategy or classify_target

    def assign(self, model: RepositoryModel) -> dict[str, GroupKind]:
        """Compute group assignments without touching the model."""
        buckets = self.strategy(model, self.supported_formats)
        return assignments_from_buckets(buckets, (image.path for image in model.images))

    def classify(self, model: RepositoryModel) -> RepositoryModel:
        """Set the group of every image in the model.

        Re-running on an unchanged model yields the same groups.

        Returns:
            The same model, classified
        """
        assignments = self.assign(model)
        for image in model.images:
            image.group = assignments[image.path]

        counts = {kind.value: len(paths) for kind, paths in model.groups().items()}
        logger.info(f"Classified {len(assignments)} images: {counts}")
        return model
