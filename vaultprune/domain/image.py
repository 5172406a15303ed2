"""Image domain models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ImageFormat(str, Enum):
    """Image format detected from the file's leading bytes."""

    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"
    TIFF = "tiff"
    SVG = "svg"
    AVIF = "avif"
    HEIC = "heic"
    UNKNOWN = "unknown"

    @property
    def kind(self) -> str:
        if self is ImageFormat.SVG:
            return "vector"
        if self is ImageFormat.UNKNOWN:
            return "unsupported"
        return "raster"


class GroupKind(str, Enum):
    """Classification group of an image.

    Members are declared in rule order: the first matching rule wins.
    """

    ZERO_BYTE = "zero_byte"
    UNREFERENCED = "unreferenced"
    DUPLICATE = "duplicate"
    INCOMPATIBLE = "incompatible"
    VALID = "valid"


class FileFacts(BaseModel):
    """Metadata computed once from the raw bytes of an image file.

    Attributes:
        path: Vault-relative POSIX path of the image.
        size_bytes: File size in bytes.
        content_hash: SHA-256 hex digest of the file content.
        format: Format detected from the file content.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    size_bytes: int
    content_hash: str
    format: ImageFormat


class ImageRecord(BaseModel):
    """An image tracked by the repository model.

    ``referenced_by`` is written by ``RepositoryModel`` only, ``group`` by
    ``GroupClassifier`` only.
    """

    facts: FileFacts
    referenced_by: frozenset[str] = frozenset()
    group: GroupKind | None = None

    @property
    def path(self) -> str:
        return self.facts.path

    @property
    def size_bytes(self) -> int:
        return self.facts.size_bytes

    @property
    def content_hash(self) -> str:
        return self.facts.content_hash

    @property
    def format(self) -> ImageFormat:
        return self.facts.format
