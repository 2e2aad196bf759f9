from pathlib import Path

import pytest

from quickpackage.config import QuickPackageConfig
from quickpackage.errors import (
    AccountNotFound,
    InvalidPackageName,
    PackageExistsError,
    WriteFailure,
)
from quickpackage.export.builder import ArchiveBuilder
from quickpackage.export.generator import generate_package
from quickpackage.export.reader import read_package
from quickpackage.export.writer import PackageWriter, WriterState


def _refs(qp, ctx, *item_ids):
    return [qp.database.get_item(i, ctx).reference for i in item_ids]


def test_writes_to_packages_folder(qp, tree, admin_ctx, config):
    refs = _refs(qp, admin_ctx, tree.home, tree.a, tree.b)

    path = qp.builder.build_archive(refs, "Home.zip", source_name="Home", author="Jane Editor")

    expected = (Path(config.data_folder) / "packages" / "Home.zip").resolve()
    assert path == str(expected)
    assert expected.is_file()

    contents = read_package(path)
    assert contents.format_version == 1
    assert contents.metadata["name"] == "Home.zip"
    assert contents.metadata["author"] == "Jane Editor"
    assert contents.installation["user"] == config.elevated_user
    assert contents.installation["site"] == config.shell_site

    source = contents.manifest.sources[0]
    assert source.name == "Home"
    assert source.references() == refs
    assert [item["id"] for item in contents.items] == [tree.home, tree.a, tree.b]


def test_payload_carries_fields(qp, tree, admin_ctx):
    refs = _refs(qp, admin_ctx, tree.home)

    path = qp.builder.build_archive(refs, "Home.zip", source_name="Home")

    (item,) = read_package(path).items
    assert item["version"] == 2
    assert item["fields"] == {"title": "Home v2"}
    assert item["path"] == "/sitecore/content/Home"


def test_empty_reference_list_still_produces_archive(qp, tree):
    path = qp.builder.build_archive([], "empty.zip", source_name="Home")

    contents = read_package(path)
    assert contents.items == []
    assert contents.manifest.entry_count == 0


def test_same_name_overwrites_silently(qp, tree, admin_ctx):
    first = qp.builder.build_archive(
        _refs(qp, admin_ctx, tree.home, tree.a), "same.zip", source_name="Home"
    )
    second = qp.builder.build_archive(
        _refs(qp, admin_ctx, tree.other), "same.zip", source_name="Other"
    )

    assert first == second
    contents = read_package(second)
    assert [item["id"] for item in contents.items] == [tree.other]
    assert contents.manifest.sources[0].name == "Other"


def test_overwrite_can_be_disabled(qp, tree, admin_ctx, config):
    config.overwrite_existing = False
    refs = _refs(qp, admin_ctx, tree.home)
    path = qp.builder.build_archive(refs, "once.zip", source_name="Home")
    before = Path(path).read_bytes()

    with pytest.raises(PackageExistsError):
        qp.builder.build_archive(refs, "once.zip", source_name="Home")

    assert Path(path).read_bytes() == before


def test_explicit_output_dir(qp, tree, admin_ctx, tmp_path):
    refs = _refs(qp, admin_ctx, tree.home)

    path = qp.builder.build_archive(
        refs, "Home.zip", source_name="Home", output_dir=tmp_path / "elsewhere"
    )

    assert path == str((tmp_path / "elsewhere" / "Home.zip").resolve())


@pytest.mark.parametrize("name", ["", "   ", "../escape.zip", "a/b.zip", "a\\b.zip", ".."])
def test_invalid_names_are_rejected(qp, tree, name):
    with pytest.raises(InvalidPackageName):
        qp.builder.build_archive([], name, source_name="Home")


def test_unknown_elevated_account(qp, tree, config):
    builder = ArchiveBuilder(
        QuickPackageConfig(
            db_uri=config.db_uri,
            data_folder=config.data_folder,
            elevated_user="nobody",
        ),
        qp.database,
        qp.accounts,
    )
    with pytest.raises(AccountNotFound):
        builder.build_archive([], "x.zip", source_name="Home")


# ----------------------------------------------------------------------
# Scope guarantees
# ----------------------------------------------------------------------

class RecordingWriter(PackageWriter):
    instances = []

    def __init__(self, path):
        super().__init__(path)
        RecordingWriter.instances.append(self)


def _builder(qp, generator):
    RecordingWriter.instances = []
    return ArchiveBuilder(
        qp.config,
        qp.database,
        qp.accounts,
        writer_factory=RecordingWriter,
        generator=generator,
    )


def test_generator_failure_cleans_up(qp, tree, admin_ctx):
    seen = []

    def failing(manifest, writer, database, context):
        seen.append(context)
        writer.put_entry("installer/version", "1")
        raise OSError("disk full")

    builder = _builder(qp, failing)
    refs = _refs(qp, admin_ctx, tree.home)

    with pytest.raises(WriteFailure) as excinfo:
        builder.build_archive(refs, "broken.zip", source_name="Home")

    assert isinstance(excinfo.value.__cause__, OSError)
    (writer,) = RecordingWriter.instances
    assert writer.state is WriterState.CLOSED
    assert not writer.path.exists()
    # the elevated identity does not outlive the call
    (elevated,) = seen
    assert not elevated.active


def test_missing_item_at_write_time_is_a_write_failure(qp, tree, admin_ctx):
    refs = _refs(qp, admin_ctx, tree.home, tree.a)
    qp.database.delete_item(tree.a)

    with pytest.raises(WriteFailure):
        qp.builder.build_archive(refs, "gone.zip", source_name="Home")

    assert not qp.builder.package_path("gone.zip").exists()


def test_identity_does_not_leak_between_calls(qp, tree, admin_ctx, editor_ctx):
    seen = []

    def recording(manifest, writer, database, context):
        seen.append(context)
        return generate_package(manifest, writer, database, context)

    builder = _builder(qp, recording)
    refs = _refs(qp, admin_ctx, tree.home)

    builder.build_archive(refs, "one.zip", source_name="Home")
    builder.build_archive(refs, "two.zip", source_name="Home")

    first, second = seen
    assert first is not second
    assert first.user.is_admin and second.user.is_admin
    assert first.site == second.site == qp.config.shell_site
    assert not first.active and not second.active

    # the caller's own context is untouched
    assert editor_ctx.active
    assert editor_ctx.site == "website"
    assert not editor_ctx.user.is_admin
    assert all(w.state is WriterState.CLOSED for w in RecordingWriter.instances)


def test_revoked_context_cannot_read(qp, tree):
    seen = []

    def recording(manifest, writer, database, context):
        seen.append(context)
        return 0

    _builder(qp, recording).build_archive([], "x.zip", source_name="Home")

    with pytest.raises(PermissionError):
        qp.database.get_item(tree.home, seen[0])
