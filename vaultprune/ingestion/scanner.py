"""Discovery of notes and images in a vault folder."""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from vaultprune.ingestion.reference_extractor import DEFAULT_IMAGE_EXTENSIONS


class VaultListing(BaseModel):
    """Vault-relative POSIX paths of the files that matter to pruning."""

    notes: list[str] = []
    images: list[str] = []


def scan_vault(
    folder: Path,
    *,
    ignore_folders: list[str] | None = None,
    image_extensions: list[str] | tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS,
) -> VaultListing:
    """List the notes and images of a vault.

    Hidden folders (``.obsidian``, ``.trash``, ...) and the configured ignore
    folders are skipped. Excalidraw drawings are not treated as notes.

    Args:
        folder: Vault root
        ignore_folders: Vault-relative folders to skip
        image_extensions: Extensions (without dot) that mark a file as an image

    Returns:
        VaultListing with sorted note and image paths
    """
    ignored = [Path(f) for f in ignore_folders or []]
    extensions = {f".{ext.lower()}" for ext in image_extensions}
    listing = VaultListing()

    for file in sorted(folder.rglob("*")):
        if not file.is_file():
            continue
        relative_path = file.relative_to(folder)
        if any(part.startswith(".") for part in relative_path.parts[:-1]):
            continue
        if any(relative_path.is_relative_to(ignored_folder) for ignored_folder in ignored):
            continue

        if file.suffix.lower() == ".md" and not file.name.endswith(".excalidraw.md"):
            listing.notes.append(relative_path.as_posix())
        elif file.suffix.lower() in extensions:
            listing.images.append(relative_path.as_posix())

    logger.info(f"Found {len(listing.notes)} notes and {len(listing.images)} images in {folder}")
    return listing
