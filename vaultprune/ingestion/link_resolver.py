"""Resolution of image link targets to vault image paths."""

import posixpath
from collections import defaultdict
from typing import Iterable
from urllib.parse import unquote

from loguru import logger


class LinkResolver:
    """Resolve image link targets against the set of known image paths."""

    def __init__(self, image_paths: Iterable[str]):
        """
        Initialize LinkResolver.

        Args:
            image_paths: Vault-relative POSIX paths of every image in the vault
        """
        self.image_paths = set(image_paths)
        self._by_name: dict[str, list[str]] = defaultdict(list)
        for path in sorted(self.image_paths):
            self._by_name[posixpath.basename(path).lower()].append(path)

    def resolve(self, note_path: str, target: str) -> list[str]:
        """
        Resolve a link target with clear precedence rules.

        Priority:
        1. Relative to the note's folder (most specific)
        2. Relative to the vault root
        3. By file name anywhere in the vault, ignoring case (Obsidian's shortest form)

        Args:
            note_path: Vault path of the note containing the link
            target: Link target as written in the note

        Returns:
            Matching image paths; empty if the target matches no image
        """
        # Links may be URL encoded, e.g. "My%20Image.png"
        clean_target = unquote(target).split("#", 1)[0].strip()
        if not clean_target:
            return []

        resolution_strategies = [
            ("relative to note", self._resolve_relative_to_note),
            ("relative to vault", self._resolve_relative_to_vault),
            ("by file name", self._resolve_by_name),
        ]

        for strategy_name, resolver_func in resolution_strategies:
            candidates = resolver_func(note_path, clean_target)
            logger.debug(f"Trying {strategy_name} for {target}: {candidates}")
            if candidates:
                return candidates

        logger.debug(f"No image found for link {target} in {note_path}")
        return []

    def _resolve_relative_to_note(self, note_path: str, target: str) -> list[str]:
        candidate = posixpath.normpath(posixpath.join(posixpath.dirname(note_path), target))
        return [candidate] if candidate in self.image_paths else []

    def _resolve_relative_to_vault(self, note_path: str, target: str) -> list[str]:
        candidate = posixpath.normpath(target.lstrip("/"))
        return [candidate] if candidate in self.image_paths else []

    def _resolve_by_name(self, note_path: str, target: str) -> list[str]:
        return list(self._by_name.get(posixpath.basename(target).lower(), []))
