"""Tests for delete, force delete, trash emptying and restoration."""

import io
import logging

import pytest

from artifact_layout.context import LayoutContext
from artifact_layout.errors import InvalidTargetError
from artifact_layout.models import Configuration, Repository, Storage
from artifact_layout.storage import FilesystemStorageProvider

from tests.conftest import STORAGE

JAR = "org/carlspring/foo/1.2/foo-1.2.jar"
NUPKG = "mypkg/1.0.0/mypkg.1.0.0.nupkg"


@pytest.fixture
def delete_calls(monkeypatch):
    """Record the relative path of every storage-level delete, in order."""
    calls = []
    original = FilesystemStorageProvider.delete

    def spy(self, path):
        calls.append(path.relative)
        return original(self, path)

    monkeypatch.setattr(FilesystemStorageProvider, "delete", spy)
    return calls


class TestDelete:

    @pytest.mark.parametrize("repository", ["releases", "nuget", "raw", "forceable", "no-trash"])
    @pytest.mark.parametrize("force", [False, True])
    def test_missing_path_is_noop(self, context, repo_dir, caplog, repository, force):
        provider = context.provider_for(STORAGE, repository)
        with caplog.at_level(logging.DEBUG):
            provider.delete(STORAGE, repository, "nothing/here.txt", force=force)

        assert not any(r.levelno > logging.WARNING for r in caplog.records)
        assert not (repo_dir(repository) / ".trash").exists()

    def test_soft_delete_then_undelete(self, context, repo_dir, write_file):
        write_file("raw", "docs/a.txt", b"data")
        provider = context.provider_for(STORAGE, "raw")

        provider.delete(STORAGE, "raw", "docs/a.txt")
        assert not provider.contains(STORAGE, "raw", "docs/a.txt")
        assert (repo_dir("raw") / ".trash" / "docs" / "a.txt").exists()

        provider.undelete(STORAGE, "raw", "docs/a.txt")
        assert (repo_dir("raw") / "docs" / "a.txt").read_bytes() == b"data"

    def test_force_without_policy_stays_recoverable(self, context, repo_dir, write_file):
        write_file("raw", "a.txt")
        provider = context.provider_for(STORAGE, "raw")

        provider.delete(STORAGE, "raw", "a.txt", force=True)
        assert (repo_dir("raw") / ".trash" / "a.txt").exists()

        provider.undelete(STORAGE, "raw", "a.txt")
        assert (repo_dir("raw") / "a.txt").exists()

    def test_force_with_policy_purges(self, context, repo_dir, write_file):
        write_file("forceable", "a.txt")
        provider = context.provider_for(STORAGE, "forceable")

        provider.delete(STORAGE, "forceable", "a.txt", force=True)

        assert not (repo_dir("forceable") / "a.txt").exists()
        assert not (repo_dir("forceable") / ".trash" / "a.txt").exists()

    def test_trash_disabled_unlinks(self, context, repo_dir, write_file):
        write_file("no-trash", "a.txt")
        context.provider_for(STORAGE, "no-trash").delete(STORAGE, "no-trash", "a.txt")

        assert not (repo_dir("no-trash") / "a.txt").exists()
        assert not (repo_dir("no-trash") / ".trash").exists()

    def test_directory_removed_bottom_up(self, context, repo_dir, write_file, delete_calls):
        write_file("raw", "d/x.txt")
        write_file("raw", "d/sub/y.txt")

        context.provider_for(STORAGE, "raw").delete(STORAGE, "raw", "d")

        assert set(delete_calls) == {"d/x.txt", "d/sub/y.txt", "d/sub", "d"}
        assert delete_calls.index("d/sub/y.txt") < delete_calls.index("d/sub")
        assert delete_calls.index("d/x.txt") < delete_calls.index("d")
        assert delete_calls.index("d/sub") < delete_calls.index("d")
        assert delete_calls[-1] == "d"
        assert not (repo_dir("raw") / "d").exists()
        assert (repo_dir("raw") / ".trash" / "d" / "sub" / "y.txt").exists()

    def test_directory_delete_then_undelete(self, context, repo_dir, write_file):
        write_file("raw", "d/x.txt", b"x")
        write_file("raw", "d/sub/y.txt", b"y")
        provider = context.provider_for(STORAGE, "raw")

        provider.delete(STORAGE, "raw", "d")
        provider.undelete(STORAGE, "raw", "d")

        assert (repo_dir("raw") / "d" / "x.txt").read_bytes() == b"x"
        assert (repo_dir("raw") / "d" / "sub" / "y.txt").read_bytes() == b"y"

    def test_repository_root_is_kept(self, context, repo_dir, write_file):
        write_file("raw", "a.txt")
        write_file("raw", "d/b.txt")

        context.provider_for(STORAGE, "raw").delete(STORAGE, "raw", "/")

        root = repo_dir("raw")
        assert root.is_dir()
        assert not (root / "a.txt").exists()
        assert not (root / "d").exists()
        assert (root / ".trash" / "a.txt").exists()
        assert (root / ".trash" / "d" / "b.txt").exists()

    def test_service_entries_below_root_go_with_directory(self, context, repo_dir, write_file):
        write_file("raw", "d/x.txt", b"x")
        write_file("raw", "d/.temp/upload.part", b"part")
        write_file("raw", ".temp/pending", b"pending")
        provider = context.provider_for(STORAGE, "raw")

        provider.delete(STORAGE, "raw", "/")

        root = repo_dir("raw")
        assert not (root / "d").exists()
        assert (root / ".trash" / "d" / ".temp" / "upload.part").read_bytes() == b"part"
        assert (root / ".temp" / "pending").read_bytes() == b"pending"

        provider.undelete(STORAGE, "raw", "d")
        assert (root / "d" / "x.txt").read_bytes() == b"x"
        assert (root / "d" / ".temp" / "upload.part").read_bytes() == b"part"


class TestTrashCollisions:

    def test_file_over_trashed_directory_refused(self, context, repo_dir, write_file):
        write_file("raw", "d/x.txt", b"x")
        provider = context.provider_for(STORAGE, "raw")
        provider.delete(STORAGE, "raw", "d")
        write_file("raw", "d", b"file")

        with pytest.raises(InvalidTargetError):
            provider.delete(STORAGE, "raw", "d")

        root = repo_dir("raw")
        assert (root / "d").read_bytes() == b"file"
        assert (root / ".trash" / "d" / "x.txt").read_bytes() == b"x"

        (root / "d").unlink()
        provider.undelete(STORAGE, "raw", "d/x.txt")
        assert (root / "d" / "x.txt").read_bytes() == b"x"

    def test_trashed_file_blocking_directory_refused(self, context, repo_dir, write_file):
        write_file("raw", "d", b"old")
        provider = context.provider_for(STORAGE, "raw")
        provider.delete(STORAGE, "raw", "d")
        write_file("raw", "d/x.txt", b"x")

        with pytest.raises(InvalidTargetError):
            provider.delete(STORAGE, "raw", "d/x.txt")

        root = repo_dir("raw")
        assert (root / "d" / "x.txt").read_bytes() == b"x"
        assert (root / ".trash" / "d").read_bytes() == b"old"


class TestCompanionCascade:

    def test_maven_artifact_takes_its_checksums(self, context, repo_dir):
        provider = context.provider_for(STORAGE, "releases")
        provider.store(STORAGE, "releases", JAR, io.BytesIO(b"jar"))
        version_dir = repo_dir("releases") / "org/carlspring/foo/1.2"
        assert sorted(p.name for p in version_dir.iterdir()) == [
            "foo-1.2.jar", "foo-1.2.jar.md5", "foo-1.2.jar.sha1",
        ]

        provider.delete(STORAGE, "releases", JAR)
        assert list(version_dir.iterdir()) == []

        provider.undelete(STORAGE, "releases", JAR)
        assert sorted(p.name for p in version_dir.iterdir()) == [
            "foo-1.2.jar", "foo-1.2.jar.md5", "foo-1.2.jar.sha1",
        ]

    def test_missing_companion_is_skipped(self, context, repo_dir, write_file):
        write_file("releases", JAR)
        write_file("releases", JAR + ".sha1", b"abc")

        context.provider_for(STORAGE, "releases").delete(STORAGE, "releases", JAR)

        trash = repo_dir("releases") / ".trash" / "org/carlspring/foo/1.2"
        assert sorted(p.name for p in trash.iterdir()) == ["foo-1.2.jar", "foo-1.2.jar.sha1"]

    def test_nuget_package_leaves_nuspec(self, context, repo_dir, write_file):
        write_file("nuget", NUPKG, b"pkg")
        write_file("nuget", NUPKG + ".sha512", b"hash")
        write_file("nuget", "mypkg/1.0.0/mypkg.nuspec", b"<package/>")

        context.provider_for(STORAGE, "nuget").delete(STORAGE, "nuget", NUPKG)

        version_dir = repo_dir("nuget") / "mypkg" / "1.0.0"
        assert sorted(p.name for p in version_dir.iterdir()) == ["mypkg.nuspec"]
        trash = repo_dir("nuget") / ".trash" / "mypkg" / "1.0.0"
        assert sorted(p.name for p in trash.iterdir()) == [
            "mypkg.1.0.0.nupkg", "mypkg.1.0.0.nupkg.sha512",
        ]

    def test_raw_artifact_takes_its_checksums(self, context, repo_dir):
        provider = context.provider_for(STORAGE, "raw")
        provider.store(STORAGE, "raw", "a.bin", io.BytesIO(b"one"))
        root = repo_dir("raw")

        provider.delete(STORAGE, "raw", "a.bin")
        assert [p.name for p in root.iterdir() if not p.name.startswith(".")] == []
        assert sorted(p.name for p in (root / ".trash").iterdir()) == ["a.bin", "a.bin.md5", "a.bin.sha1"]

        provider.undelete(STORAGE, "raw", "a.bin")
        assert sorted(p.name for p in root.iterdir() if not p.name.startswith(".")) == [
            "a.bin", "a.bin.md5", "a.bin.sha1",
        ]

    def test_rewritten_raw_artifact_has_no_stale_digests(self, context):
        provider = context.provider_for(STORAGE, "raw")
        provider.store(STORAGE, "raw", "a.bin", io.BytesIO(b"one"))
        provider.delete(STORAGE, "raw", "a.bin")
        provider.store(STORAGE, "raw", "a.bin", io.BytesIO(b"two"), write_checksums=False)

        with provider.get_input_stream(STORAGE, "raw", "a.bin") as stream:
            assert stream.read() == b"two"
            assert stream.digests == {}

    def test_forced_cascade_purges_companions(self, tmp_path):
        configuration = Configuration(
            base_dir=str(tmp_path / "storages"),
            storages={"s": Storage(repositories={
                "m": Repository(layout="Maven 2", allows_force_deletion=True),
            })},
        )
        context = LayoutContext(configuration)
        provider = context.provider_for("s", "m")
        provider.store("s", "m", JAR, io.BytesIO(b"jar"))

        provider.delete("s", "m", JAR, force=True)

        root = tmp_path / "storages" / "s" / "m"
        assert list((root / "org/carlspring/foo/1.2").iterdir()) == []
        assert list((root / ".trash" / "org/carlspring/foo/1.2").iterdir()) == []


class TestDeleteMetadata:

    def test_maven_metadata_at_artifact_level(self, context, repo_dir, write_file):
        write_file("releases", "org/carlspring/foo/maven-metadata.xml")
        write_file("releases", JAR)

        context.provider_for(STORAGE, "releases").delete_metadata(STORAGE, "releases", "org/carlspring/foo")

        root = repo_dir("releases")
        assert not (root / "org/carlspring/foo/maven-metadata.xml").exists()
        assert (root / JAR).exists()

    def test_maven_metadata_file_path(self, context, repo_dir, write_file):
        write_file("releases", "org/carlspring/foo/1.2/maven-metadata.xml")
        context.provider_for(STORAGE, "releases").delete_metadata(
            STORAGE, "releases", "org/carlspring/foo/1.2/maven-metadata.xml")
        assert not (repo_dir("releases") / "org/carlspring/foo/1.2/maven-metadata.xml").exists()

    def test_nuget_metadata_is_noop(self, context, repo_dir, write_file):
        write_file("nuget", "mypkg/1.0.0/mypkg.nuspec")
        context.provider_for(STORAGE, "nuget").delete_metadata(STORAGE, "nuget", "mypkg/1.0.0")
        assert (repo_dir("nuget") / "mypkg/1.0.0/mypkg.nuspec").exists()


class TestTrashLifecycle:

    def test_delete_trash_single_repository(self, context, repo_dir, write_file):
        write_file("raw", "a.txt")
        provider = context.provider_for(STORAGE, "raw")
        provider.delete(STORAGE, "raw", "a.txt")

        assert provider.delete_trash(STORAGE, "raw") is None
        assert not (repo_dir("raw") / ".trash").exists()

        provider.undelete(STORAGE, "raw", "a.txt")
        assert not (repo_dir("raw") / "a.txt").exists()

    def test_undelete_trash_restores_everything(self, context, repo_dir, write_file):
        write_file("raw", "a.txt", b"a")
        write_file("raw", "d/b.txt", b"b")
        provider = context.provider_for(STORAGE, "raw")
        provider.delete(STORAGE, "raw", "a.txt")
        provider.delete(STORAGE, "raw", "d")

        provider.undelete_trash(STORAGE, "raw")

        root = repo_dir("raw")
        assert (root / "a.txt").read_bytes() == b"a"
        assert (root / "d" / "b.txt").read_bytes() == b"b"

    def test_undelete_trash_without_trash_warns_and_proceeds(self, context, repo_dir, write_file, caplog):
        # files trashed before the policy was switched off
        write_file("no-trash", ".trash/old.txt", b"old")

        with caplog.at_level(logging.WARNING):
            context.provider_for(STORAGE, "no-trash").undelete_trash(STORAGE, "no-trash")

        assert "does not have trash enabled" in caplog.text
        assert (repo_dir("no-trash") / "old.txt").read_bytes() == b"old"

    def test_global_delete_trash_honours_policy(self, tmp_path, caplog):
        configuration = Configuration(
            base_dir=str(tmp_path / "storages"),
            storages={
                "s1": Storage(repositories={
                    "keep": Repository(layout="Raw", allows_deletion=False),
                    "purge": Repository(layout="Raw"),
                }),
                "s2": Storage(repositories={"other": Repository(layout="Maven 2")}),
            },
        )
        context = LayoutContext(configuration)
        for storage_id, repository_id in [("s1", "keep"), ("s1", "purge"), ("s2", "other")]:
            target = tmp_path / "storages" / storage_id / repository_id / "a.txt"
            target.parent.mkdir(parents=True)
            target.write_bytes(b"x")
            context.provider_for(storage_id, repository_id).delete(storage_id, repository_id, "a.txt")

        with caplog.at_level(logging.WARNING):
            result = context.sweep_provider.delete_trash()

        assert result.ok
        assert result.skipped == ["s1:keep"]
        assert sorted(result.processed) == ["s1:purge", "s2:other"]
        assert "does not support removal of trash" in caplog.text
        assert (tmp_path / "storages/s1/keep/.trash/a.txt").exists()
        assert not (tmp_path / "storages/s1/purge/.trash").exists()
        assert not (tmp_path / "storages/s2/other/.trash").exists()

    def test_global_sweep_continues_past_failure(self, context, monkeypatch, write_file):
        write_file("raw", "a.txt")
        provider = context.provider_for(STORAGE, "raw")
        provider.delete(STORAGE, "raw", "a.txt")

        original = FilesystemStorageProvider.delete_trash

        def flaky(self, path):
            if path.repository.id == "releases":
                raise OSError("disk on fire")
            return original(self, path)

        monkeypatch.setattr(FilesystemStorageProvider, "delete_trash", flaky)
        result = context.sweep_provider.delete_trash()

        assert result.failed == [f"{STORAGE}:releases"]
        assert not result.ok
        assert f"{STORAGE}:raw" in result.processed

    def test_global_undelete_trash(self, context, repo_dir, write_file):
        write_file("raw", "a.txt")
        write_file("nuget", NUPKG)
        context.provider_for(STORAGE, "raw").delete(STORAGE, "raw", "a.txt")
        context.provider_for(STORAGE, "nuget").delete(STORAGE, "nuget", NUPKG)

        result = context.sweep_provider.undelete_trash()

        assert result.ok
        assert (repo_dir("raw") / "a.txt").exists()
        assert (repo_dir("nuget") / NUPKG).exists()

    @pytest.mark.parametrize("args", [(STORAGE, None), (None, "raw")])
    def test_partial_target_rejected(self, context, args):
        provider = context.provider_for(STORAGE, "raw")
        with pytest.raises(ValueError):
            provider.delete_trash(*args)
        with pytest.raises(ValueError):
            provider.undelete_trash(*args)
