"""Legacy classification over a map keyed by image path.

Kept only to cross-check the flat-list classifier with the equivalence harness.
``to_keyed_image_map`` is the single adapter from the model to this
representation; nothing converts back.

The rules match the flat-list classifier: hash groups are formed only from
images that are neither empty nor unreferenced, so an unreferenced copy with a
smaller path never makes a referenced copy a DUPLICATE.
"""

from collections import defaultdict

from pydantic import BaseModel

from vaultprune.domain.image import GroupKind, ImageFormat
from vaultprune.repository.model import RepositoryModel


class KeyedImageInfo(BaseModel):
    """Per-image entry of the keyed map."""

    hash: str
    size: int
    format: str
    references: list[str] = []


def to_keyed_image_map(model: RepositoryModel) -> dict[str, KeyedImageInfo]:
    """Convert a model snapshot into the keyed map ``path -> info``."""
    return {
        image.path: KeyedImageInfo(
            hash=image.content_hash,
            size=image.size_bytes,
            format=image.format.value,
            references=sorted(model.referenced_by(image.path)),
        )
        for image in model.images
    }


def classify_legacy(
    model: RepositoryModel, supported_formats: frozenset[ImageFormat]
) -> dict[GroupKind, list[str]]:
    """Classify images by tagging entries of the keyed map."""
    image_map = to_keyed_image_map(model)
    supported = {image_format.value for image_format in supported_formats}

    tagged: dict[str, list[str]] = defaultdict(list)
    paths_by_hash: dict[str, list[str]] = defaultdict(list)

    for path, info in image_map.items():
        if info.size == 0:
            tagged["zero_byte"].append(path)
        elif not info.references:
            tagged["unreferenced"].append(path)
        else:
            paths_by_hash[info.hash].append(path)

    for paths in paths_by_hash.values():
        keep = min(paths)
        for path in paths:
            if path != keep:
                tagged["duplicate"].append(path)
            elif image_map[path].format in supported:
                tagged["valid"].append(path)
            else:
                tagged["incompatible"].append(path)

    return {GroupKind(tag): sorted(paths) for tag, paths in tagged.items()}
