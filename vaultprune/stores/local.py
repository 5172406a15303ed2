import os
import shutil
import tempfile
from pathlib import Path

from vaultprune.stores.base import FileStore, NoteStore


class _VaultRooted:
    def __init__(self, root: str | Path) -> None:
        """Initialize a store rooted at a vault directory.

        Args:
            root: Vault directory. All paths passed to the store are relative to it.
        """
        self._root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self._root / path


class LocalFileStore(_VaultRooted, FileStore):
    """File store backed by the local filesystem."""

    def read(self, path: str) -> bytes:
        with open(self._resolve(path), "rb") as f:
            return f.read()

    def delete(self, path: str) -> None:
        self._resolve(path).unlink()

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()


class LocalNoteStore(_VaultRooted, NoteStore):
    """Note store backed by the local filesystem, reading and writing UTF-8."""

    def read(self, path: str) -> str:
        with open(self._resolve(path), "r", encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, path: str, text: str) -> None:
        """Replace a note's text.

        The text goes to a temporary file next to the note, which then replaces
        the note in one step. A failed write leaves the note untouched.
        """
        target = self._resolve(path)
        if target.exists() and not os.access(target, os.W_OK):
            raise PermissionError(f"Permission denied: {target}")

        temp = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        )
        temp_path = Path(temp.name)
        try:
            with temp as f:
                f.write(text)
            if target.exists():
                shutil.copymode(target, temp_path)
            os.replace(temp_path, target)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
