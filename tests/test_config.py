import pytest

from vaultprune.classification import GroupClassifier
from vaultprune.config import Settings


def test_defaults_are_a_dry_run() -> None:
    settings = Settings(_env_file=None)

    assert settings.apply_changes is False
    assert "png" in settings.image_extensions
    assert "tiff" not in settings.supported_formats


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VAULTPRUNE_MAX_WORKERS", "3")
    monkeypatch.setenv("VAULTPRUNE_APPLY_CHANGES", "true")
    monkeypatch.setenv("VAULTPRUNE_IGNORE_FOLDERS", '["templates", "archive"]')

    settings = Settings(_env_file=None)

    assert settings.max_workers == 3
    assert settings.apply_changes is True
    assert settings.ignore_folders == ["templates", "archive"]


def test_supported_formats_feed_the_classifier() -> None:
    settings = Settings(_env_file=None)

    classifier = GroupClassifier(settings.supported_formats)

    assert {f.value for f in classifier.supported_formats} == set(settings.supported_formats)
