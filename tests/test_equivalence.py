"""Tests for the classifier equivalence harness."""

from tests.fakes.vault_builder import build_model, png
from vaultprune.classification import EquivalenceHarness, to_keyed_image_map
from vaultprune.domain.image import GroupKind


def everything_valid(model, supported_formats):
    return {GroupKind.VALID: [image.path for image in model.images]}


def test_classifiers_agree_on_fixture_vault(
    vault_files: dict[str, bytes], vault_notes: dict[str, str]
) -> None:
    model = build_model(vault_files, vault_notes, classify=False)

    report = EquivalenceHarness().compare(model)

    assert report.is_equivalent
    assert report.checked == len(vault_files)


def test_classifiers_agree_on_duplicate_chains() -> None:
    images = {f"{folder}/copy.png": png(b"same") for folder in ("c", "a", "b", "d")}
    notes = {"n.md": "![](b/copy.png)\n![](c/copy.png)", "m.md": "![](d/copy.png)"}

    report = EquivalenceHarness().compare(build_model(images, notes, classify=False))

    assert report.is_equivalent


def test_divergence_is_reported_per_path(
    vault_files: dict[str, bytes], vault_notes: dict[str, str]
) -> None:
    model = build_model(vault_files, vault_notes, classify=False)

    report = EquivalenceHarness(legacy=everything_valid).compare(model)

    assert not report.is_equivalent
    assert report.divergences == {
        "Z - Attachements/b.png": (GroupKind.VALID, GroupKind.DUPLICATE),
        "Z - Attachements/c.png": (GroupKind.VALID, GroupKind.DUPLICATE),
        "Z - Attachements/empty.png": (GroupKind.VALID, GroupKind.ZERO_BYTE),
        "Z - Attachements/orphan.png": (GroupKind.VALID, GroupKind.UNREFERENCED),
        "Z - Attachements/scan.tiff": (GroupKind.VALID, GroupKind.INCOMPATIBLE),
    }


def test_compare_does_not_classify_the_model(
    vault_files: dict[str, bytes], vault_notes: dict[str, str]
) -> None:
    model = build_model(vault_files, vault_notes, classify=False)

    EquivalenceHarness().compare(model)

    assert not model.is_classified, "The harness must only read the snapshot"


def test_keyed_image_map(vault_files: dict[str, bytes], vault_notes: dict[str, str]) -> None:
    model = build_model(vault_files, vault_notes, classify=False)

    image_map = to_keyed_image_map(model)

    assert sorted(image_map) == sorted(vault_files)
    a = image_map["Z - Attachements/a.png"]
    assert a.format == "png"
    assert a.size == len(vault_files["Z - Attachements/a.png"])
    assert a.references == ["daily/2024-01-01.md"]
    assert a.hash == image_map["Z - Attachements/c.png"].hash
    assert image_map["Z - Attachements/orphan.png"].references == []
