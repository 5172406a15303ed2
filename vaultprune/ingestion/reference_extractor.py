"""Image reference extraction and removal for markdown content."""

import re

from vaultprune.domain.note import ImageLink
from vaultprune.errors import ExtractionError

DEFAULT_IMAGE_EXTENSIONS = (
    "png",
    "jpg",
    "jpeg",
    "gif",
    "webp",
    "bmp",
    "tif",
    "tiff",
    "svg",
    "avif",
    "heic",
)


class ReferenceExtractor:
    """Extracts image links from note text and removes them again."""

    def __init__(self, image_extensions: list[str] | tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS):
        """Initialize the extractor.

        Args:
            image_extensions: File extensions (without dot) that make an embed an image embed.
        """
        extensions = "|".join(re.escape(ext.lower()) for ext in image_extensions)
        # Pattern matches: ![alt](path), ![[image.ext|size]], and <img src="path">
        self._image_pattern = re.compile(
            r"!\[[^\]]*\]\(([^\(\)]*(?:\([^\(\)]*\)[^\(\)]*)*)\)|"  # ![alt](path)
            rf"!\[\[([^\]|]+\.(?:{extensions}))(?:\|[^\]]*)?\]\]|"  # ![[image.ext|size]]
            r'<img[^>]+src=[\'"](.*?)[\'"][^>]*>',  # <img src="path">
            re.IGNORECASE,
        )
        self._unclosed_embed = re.compile(r"!\[\[(?![^\[\]]*\]\])")
        self._unclosed_markdown = re.compile(r"!\[[^\]]*\]\((?![^\n]*\))")

    def extract(self, content: str) -> list[ImageLink]:
        """Extract image links from markdown, embed, and HTML syntax.

        External ``http(s)`` images are skipped. Links are returned in document order.

        Raises:
            ExtractionError: If a line contains an unterminated image reference. The
                error carries every well-formed link of the note in ``partial``.
        """
        links: list[ImageLink] = []
        first_error: tuple[int, str] | None = None

        for line_number, line in enumerate(content.splitlines(), start=1):
            for match in self._image_pattern.finditer(line):
                target = (match.group(1) or match.group(2) or match.group(3) or "").strip()
                if not target or target.startswith(("http://", "https://", "data:")):
                    continue
                # ![alt](path "title")
                if match.group(1) and " \"" in target:
                    target = target.split(' "', 1)[0].strip()
                links.append(ImageLink(text=match.group(0), target=target, line_number=line_number))

            if first_error is None:
                remainder = self._image_pattern.sub("", line)
                if self._unclosed_embed.search(remainder):
                    first_error = (line_number, "unterminated ![[ embed")
                elif self._unclosed_markdown.search(remainder):
                    first_error = (line_number, "unterminated ![alt]( image link")

        if first_error is not None:
            line_number, message = first_error
            raise ExtractionError(message, line_number=line_number, partial=links)
        return links

    @staticmethod
    def remove_links(content: str, link_texts: set[str]) -> str:
        """Remove every occurrence of the given link texts from the content.

        Lines that held nothing but removed links are dropped entirely; other
        whitespace and line endings are preserved.

        Args:
            content: Note text
            link_texts: Exact link texts to remove, as found by ``extract``

        Returns:
            The rewritten note text
        """
        if not link_texts:
            return content

        # Longest first so a link that contains another is removed whole
        pattern = re.compile(
            "|".join(re.escape(text) for text in sorted(link_texts, key=len, reverse=True))
        )

        lines = []
        for line in content.splitlines(keepends=True):
            stripped = pattern.sub("", line)
            if stripped != line and not stripped.strip():
                continue
            lines.append(stripped)
        return "".join(lines)
