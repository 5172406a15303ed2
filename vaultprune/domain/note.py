"""Note domain models."""

from pydantic import BaseModel


class ImageLink(BaseModel):
    """A single image reference found in note content.

    Attributes:
        text: The exact matched text, e.g. ``![[photo.png|400]]``.
        target: The link target as written, e.g. ``photo.png``.
        line_number: 1-based line the link was found on.
        paths: Vault paths of the images the target resolves to. A bare file name
            that several images share resolves to all of them.
    """

    text: str
    target: str
    line_number: int
    paths: list[str] = []


class NoteRecord(BaseModel):
    """A note tracked by the repository model.

    Attributes:
        path: Vault-relative POSIX path of the note.
        content: Note text as read during the scan.
        links: All extracted image links, in document order.
        image_refs: Resolved image paths, in first-occurrence order, without repeats.
        missing_refs: Link targets that do not resolve to any known image.
        warnings: Extraction problems found in this note.
    """

    path: str
    content: str = ""
    links: list[ImageLink] = []
    image_refs: list[str] = []
    missing_refs: list[str] = []
    warnings: list[str] = []
