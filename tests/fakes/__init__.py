from tests.fakes.fake_file_store import FakeFileStore
from tests.fakes.fake_note_store import FakeNoteStore

__all__ = ["FakeFileStore", "FakeNoteStore"]
