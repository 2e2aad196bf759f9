import pytest

from quickpackage.content.models import ContentReference
from quickpackage.export.manifest import ExportManifest, SourceGroup, build_manifest


def _ref(item_id, version=1):
    return ContentReference("master", item_id, "en", version)


def test_build_manifest_keeps_reference_order():
    refs = [_ref("home"), _ref("b"), _ref("a")]
    manifest = build_manifest(refs, "Home.zip", source_name="Home", author="Jane")

    assert manifest.metadata.package_name == "Home.zip"
    assert manifest.metadata.author == "Jane"
    assert manifest.metadata.created_at
    assert len(manifest.sources) == 1

    source = manifest.sources[0]
    assert source.name == "Home"
    assert source.references() == refs
    assert manifest.entry_count == 3


def test_source_group_rejects_duplicates():
    source = SourceGroup("Home")
    source.add_reference(_ref("home"))
    with pytest.raises(ValueError):
        source.add_reference(_ref("home"))
    assert len(source) == 1


def test_source_group_entries_are_read_only_view():
    source = SourceGroup("Home", [_ref("home").to_token()])
    assert isinstance(source.entries, tuple)


def test_manifest_dict_round_trip():
    manifest = build_manifest([_ref("home"), _ref("a")], "p.zip", source_name="Home")
    manifest.metadata.readme = "hello"

    restored = ExportManifest.from_dict(manifest.to_dict())

    assert restored.to_dict() == manifest.to_dict()


def test_empty_manifest_has_one_empty_source():
    manifest = build_manifest([], "empty.zip", source_name="Home")
    assert manifest.entry_count == 0
    assert manifest.sources[0].name == "Home"
