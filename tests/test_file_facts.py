"""Tests for computing file facts."""

from hashlib import sha256

import pytest
from pydantic import ValidationError

from tests.fakes import FakeFileStore
from vaultprune.domain.image import ImageFormat
from vaultprune.errors import ScanError
from vaultprune.ingestion.file_facts import (
    collect_file_facts,
    compute_file_facts,
    detect_format,
    read_file_facts,
)


@pytest.mark.parametrize(
    "content,expected",
    [
        (b"\x89PNG\r\n\x1a\nrest", ImageFormat.PNG),
        (b"\xff\xd8\xff\xe0rest", ImageFormat.JPEG),
        (b"GIF89a...", ImageFormat.GIF),
        (b"GIF87a...", ImageFormat.GIF),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", ImageFormat.WEBP),
        (b"BM\x00\x00", ImageFormat.BMP),
        (b"II*\x00rest", ImageFormat.TIFF),
        (b"MM\x00*rest", ImageFormat.TIFF),
        (b"\x00\x00\x00\x1cftypavif", ImageFormat.AVIF),
        (b"\x00\x00\x00\x18ftypheic", ImageFormat.HEIC),
        (b"\x00\x00\x00\x18ftypmp42", ImageFormat.UNKNOWN),
        (b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"/>', ImageFormat.SVG),
        (b"  <svg viewBox='0 0 1 1'></svg>", ImageFormat.SVG),
        (b"<?xml version='1.0'?><html/>", ImageFormat.UNKNOWN),
        (b"plain text", ImageFormat.UNKNOWN),
        (b"", ImageFormat.UNKNOWN),
    ],
)
def test_detect_format(content: bytes, expected: ImageFormat) -> None:
    assert detect_format(content) is expected


def test_format_kind() -> None:
    assert ImageFormat.PNG.kind == "raster"
    assert ImageFormat.SVG.kind == "vector"
    assert ImageFormat.UNKNOWN.kind == "unsupported"


def test_compute_file_facts() -> None:
    facts = compute_file_facts("a/b.png", b"\x89PNG\r\n\x1a\ndata")

    assert facts.path == "a/b.png"
    assert facts.size_bytes == 12
    assert facts.content_hash == sha256(b"\x89PNG\r\n\x1a\ndata").hexdigest()
    assert facts.format is ImageFormat.PNG


def test_file_facts_are_immutable() -> None:
    facts = compute_file_facts("a.png", b"")
    with pytest.raises(ValidationError):
        facts.size_bytes = 10  # type: ignore[misc]


def test_read_file_facts_wraps_missing_file() -> None:
    with pytest.raises(ScanError, match="Could not read gone.png"):
        read_file_facts(FakeFileStore(), "gone.png")


def test_collect_file_facts_skips_unreadable_files() -> None:
    store = FakeFileStore({"b.png": b"\x89PNG\r\n\x1a\n", "a.png": b""})

    facts, errors = collect_file_facts(store, ["b.png", "missing.png", "a.png"], max_workers=2)

    assert [f.path for f in facts] == ["a.png", "b.png"], "Facts should be sorted by path"
    assert [e.path for e in errors] == ["missing.png"]
