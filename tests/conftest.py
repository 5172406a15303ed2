import tempfile
from pathlib import Path
from typing import Generator

import pytest

from tests.fakes import FakeFileStore, FakeNoteStore
from tests.fakes.vault_builder import png


@pytest.fixture
def vault_files() -> dict[str, bytes]:
    """Images of a small vault covering every group."""
    return {
        "Z - Attachements/a.png": png(b"same"),
        "Z - Attachements/b.png": png(b"same"),
        "Z - Attachements/c.png": png(b"same"),
        "Z - Attachements/empty.png": b"",
        "Z - Attachements/orphan.png": png(b"orphan"),
        "Z - Attachements/scan.tiff": b"II*\x00scan",
        "photos/cat.jpg": b"\xff\xd8\xff\xe0cat",
    }


@pytest.fixture
def vault_notes() -> dict[str, str]:
    """Notes referencing the images in ``vault_files``."""
    return {
        "daily/2024-01-01.md": (
            "# Monday\n"
            "![[a.png]]\n"
            "Text with an inline ![[b.png|400]] image.\n"
            "![[empty.png]]\n"
        ),
        "projects/cats.md": "# Cats\n![a cat](../photos/cat.jpg)\n![[c.png]]\n",
        "scans.md": '<img src="Z - Attachements/scan.tiff" width="200">\n',
    }


@pytest.fixture
def fake_file_store(vault_files: dict[str, bytes]) -> FakeFileStore:
    return FakeFileStore(vault_files)


@pytest.fixture
def fake_note_store(vault_notes: dict[str, str]) -> FakeNoteStore:
    return FakeNoteStore(vault_notes)


@pytest.fixture
def temp_vault_base() -> Generator[Path, None, None]:
    """Create a temporary directory holding a vault
    used when testing scanning and the local stores.
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def vault_directory(temp_vault_base: Path) -> Path:
    """Create the vault directory."""
    vault_dir = temp_vault_base / "vault"
    vault_dir.mkdir()
    return vault_dir


@pytest.fixture
def attachments_directory(vault_directory: Path) -> Path:
    """Create attachments directory."""
    attachments_dir = vault_directory / "Z - Attachements"
    attachments_dir.mkdir()
    return attachments_dir


@pytest.fixture
def written_vault(
    vault_directory: Path, vault_files: dict[str, bytes], vault_notes: dict[str, str]
) -> Path:
    """Write the fixture vault to disk."""
    for path, content in vault_files.items():
        file = vault_directory / path
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(content)
    for path, text in vault_notes.items():
        file = vault_directory / path
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(text, encoding="utf-8")
    return vault_directory
