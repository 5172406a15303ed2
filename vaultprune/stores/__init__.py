from vaultprune.stores.base import FileStore, NoteStore
from vaultprune.stores.local import LocalFileStore, LocalNoteStore

__all__ = ["FileStore", "NoteStore", "LocalFileStore", "LocalNoteStore"]
