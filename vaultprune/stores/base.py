from typing import Protocol


class FileStore(Protocol):
    """Protocol for reading and deleting image files in a vault."""

    def read(self, path: str) -> bytes:
        """Read a file. Raises FileNotFoundError if it does not exist."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file. Raises FileNotFoundError or PermissionError."""
        ...

    def exists(self, path: str) -> bool:
        """Check whether a file exists."""
        ...


class NoteStore(Protocol):
    """Protocol for reading and writing note text."""

    def read(self, path: str) -> str:
        """Read a note. Raises FileNotFoundError if it does not exist."""
        ...

    def write(self, path: str, text: str) -> None:
        """Persist note text. Raises PermissionError if the note is read-only."""
        ...
