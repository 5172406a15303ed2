"""Computing per-file facts (size, hash, format) for vault images."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from hashlib import sha256
from typing import Iterable

from loguru import logger

from vaultprune.domain.image import FileFacts, ImageFormat
from vaultprune.errors import ScanError
from vaultprune.stores.base import FileStore

_MAGIC_PREFIXES: list[tuple[bytes, ImageFormat]] = [
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"GIF87a", ImageFormat.GIF),
    (b"GIF89a", ImageFormat.GIF),
    (b"BM", ImageFormat.BMP),
    (b"II*\x00", ImageFormat.TIFF),
    (b"MM\x00*", ImageFormat.TIFF),
]

_FTYP_BRANDS: dict[bytes, ImageFormat] = {
    b"avif": ImageFormat.AVIF,
    b"avis": ImageFormat.AVIF,
    b"heic": ImageFormat.HEIC,
    b"heix": ImageFormat.HEIC,
    b"heif": ImageFormat.HEIC,
    b"mif1": ImageFormat.HEIC,
}


def detect_format(content: bytes) -> ImageFormat:
    """Detect an image format from the file's leading bytes.

    The file extension is not consulted: a ``.png`` holding JPEG data is
    reported as JPEG, and a renamed text file as ``UNKNOWN``.
    """
    for prefix, image_format in _MAGIC_PREFIXES:
        if content.startswith(prefix):
            return image_format

    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return ImageFormat.WEBP

    if content[4:8] == b"ftyp":
        return _FTYP_BRANDS.get(content[8:12], ImageFormat.UNKNOWN)

    head = content[:1024].lstrip(b"\xef\xbb\xbf \t\r\n").lower()
    if head.startswith((b"<?xml", b"<svg", b"<!doctype svg")) and b"<svg" in head:
        return ImageFormat.SVG

    return ImageFormat.UNKNOWN


def compute_file_facts(path: str, content: bytes) -> FileFacts:
    """Build the facts of one file from its raw bytes."""
    return FileFacts(
        path=path,
        size_bytes=len(content),
        content_hash=sha256(content).hexdigest(),
        format=detect_format(content),
    )


def read_file_facts(file_store: FileStore, path: str) -> FileFacts:
    """Read a file once and compute its facts.

    Raises:
        ScanError: If the file cannot be read.
    """
    try:
        content = file_store.read(path)
    except OSError as e:
        raise ScanError(path, str(e)) from e
    return compute_file_facts(path, content)


def collect_file_facts(
    file_store: FileStore, paths: Iterable[str], max_workers: int = 8
) -> tuple[list[FileFacts], list[ScanError]]:
    """Compute facts for many files concurrently.

    Unreadable files are skipped and returned as errors. The call returns only
    once every file has been hashed, so the result can be grouped by hash.

    Args:
        file_store: Store the files are read from
        paths: Image paths to read
        max_workers: Maximum number of reader threads

    Returns:
        Tuple of (facts sorted by path, scan errors sorted by path)
    """
    facts: list[FileFacts] = []
    errors: list[ScanError] = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(read_file_facts, file_store, path): path for path in paths}
        for future in as_completed(futures):
            try:
                facts.append(future.result())
            except ScanError as e:
                logger.warning(f"Skipping unreadable image: {e}")
                errors.append(e)

    facts.sort(key=lambda f: f.path)
    errors.sort(key=lambda e: e.path)
    logger.info(f"Hashed {len(facts)} images ({len(errors)} unreadable)")
    return facts, errors
