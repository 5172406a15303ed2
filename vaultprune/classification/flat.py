"""Classification over the flat, path-ordered list of image records.

Duplicates are only looked for among images that are neither empty nor
unreferenced. Within each group of equal hashes the smallest path is the
canonical member; it is never DUPLICATE and goes on to the INCOMPATIBLE and
VALID rules. An unreferenced copy therefore never makes a referenced copy a
DUPLICATE, even when its path is smaller.
"""

from itertools import groupby
from operator import attrgetter

from vaultprune.domain.image import GroupKind, ImageFormat, ImageRecord
from vaultprune.repository.model import RepositoryModel


def classify_target(
    model: RepositoryModel, supported_formats: frozenset[ImageFormat]
) -> dict[GroupKind, list[str]]:
    """Classify images by walking the model's records in path order.

    Duplicate detection only considers images that survived the ZERO_BYTE and
    UNREFERENCED rules, so every hash group keeps its smallest path, which then
    goes on to the INCOMPATIBLE and VALID rules.
    """
    buckets: dict[GroupKind, list[str]] = {kind: [] for kind in GroupKind}
    remaining: list[ImageRecord] = []

    for image in model.images:
        if image.size_bytes == 0:
            buckets[GroupKind.ZERO_BYTE].append(image.path)
        elif not image.referenced_by:
            buckets[GroupKind.UNREFERENCED].append(image.path)
        else:
            remaining.append(image)

    # Hashing finished when the facts were built; group by hash, then by path
    remaining.sort(key=attrgetter("content_hash", "path"))
    canonical_members: list[ImageRecord] = []
    for _, members in groupby(remaining, key=attrgetter("content_hash")):
        canonical, *duplicates = members
        canonical_members.append(canonical)
        buckets[GroupKind.DUPLICATE].extend(image.path for image in duplicates)

    for image in canonical_members:
        if image.format in supported_formats:
            buckets[GroupKind.VALID].append(image.path)
        else:
            buckets[GroupKind.INCOMPATIBLE].append(image.path)

    return {kind: sorted(paths) for kind, paths in buckets.items()}
