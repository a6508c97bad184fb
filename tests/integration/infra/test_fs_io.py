from __future__ import annotations

"""
Integration tests for FileSystem and Archive Infrastructure.

Exercises LocalStore against real directories and zip files.
"""

import os
import zipfile
from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest

from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.infra.fs import ArchiveReadError, LocalStore

# -----------------------------------------------------------------------------
# ENTRY INSPECTION TESTS
# -----------------------------------------------------------------------------

def test_entry_kind_detection(make_jar: Callable[..., Path], class_dir: Path, tmp_path: Path) -> None:
    """TC-01: Archives are recognized by content, not by extension."""
    store = LocalStore()
    jar = Entry.of(make_jar("lib/a.jar", {"x.txt": b""}))
    fake_jar = tmp_path / "fake.jar"
    fake_jar.write_text("not a zip", encoding="utf-8")

    assert store.is_directory(Entry.of(class_dir)) is True
    assert store.is_archive(jar) is True
    assert store.is_archive(Entry.of(fake_jar)) is False
    assert store.is_archive(Entry.of(class_dir)) is False
    assert store.exists(Entry.of(tmp_path / "nope")) is False


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_canonical_key_resolves_symlinks(class_dir: Path, tmp_path: Path) -> None:
    """TC-02: A symlink and its target share one canonical key."""
    link = tmp_path / "link"
    try:
        os.symlink(str(class_dir), str(link), target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    store = LocalStore()
    assert store.canonical_key(Entry.of(link)) == store.canonical_key(Entry.of(class_dir))


# -----------------------------------------------------------------------------
# ENUMERATION TESTS
# -----------------------------------------------------------------------------

def test_list_files_recursively_is_sorted_and_relative(class_dir: Path) -> None:
    """TC-03: Directory walks yield sorted, slash-delimited relative names."""
    names = list(LocalStore().list_files_recursively(Entry.of(class_dir)))
    assert names == [
        "log.xml",
        "com/example/App$Nested.class",
        "com/example/App.class",
        "com/example/messages.properties",
        "com/example/inner/Helper.class",
    ]


def test_open_archive_entries_reports_directory_markers(make_jar: Callable[..., Path]) -> None:
    """TC-04: Archive listings flag directory markers."""
    jar = make_jar("lib/a.jar", {"a/x.txt": b""}, directories=["a/"])
    entries = LocalStore().open_archive_entries(Entry.of(jar))
    assert ("a/", True) in entries
    assert ("a/x.txt", False) in entries


def test_open_archive_entries_rejects_corrupt_archive(tmp_path: Path) -> None:
    """TC-05: Corrupt archives raise ArchiveReadError (an OSError)."""
    bad = tmp_path / "bad.jar"
    bad.write_bytes(b"PK\x03\x04 truncated")
    with pytest.raises(OSError):
        LocalStore().open_archive_entries(Entry.of(bad))
    with pytest.raises(ArchiveReadError):
        LocalStore().read_manifest(Entry.of(bad))


def test_read_manifest(make_jar: Callable[..., Path]) -> None:
    """TC-06: Manifests are parsed; archives without one return None."""
    with_manifest = make_jar("lib/m.jar", {"x.txt": b""}, class_path="a.jar b.jar")
    without_manifest = make_jar("lib/n.jar", {"x.txt": b""})
    store = LocalStore()

    manifest = store.read_manifest(Entry.of(with_manifest))
    assert manifest is not None
    assert manifest.get("Class-Path") == "a.jar b.jar"
    assert store.read_manifest(Entry.of(without_manifest)) is None


# -----------------------------------------------------------------------------
# CONTENT ACCESS TESTS
# -----------------------------------------------------------------------------

def test_contains_and_open_resource_content(make_jar: Callable[..., Path], class_dir: Path) -> None:
    """TC-07: Content is readable from both directories and archives."""
    store = LocalStore()
    jar = Entry.of(make_jar("lib/c.jar", {"c/data.txt": b"jar-data"}))
    directory = Entry.of(class_dir)

    assert store.contains(jar, "c/data.txt") is True
    assert store.contains(jar, "c/missing.txt") is False
    assert store.contains(directory, "log.xml") is True
    assert store.contains(directory, "com") is False

    with store.open_resource_content(jar, "c/data.txt") as stream:
        assert stream.read() == b"jar-data"
    with store.open_resource_content(directory, "log.xml") as stream:
        assert stream.read() == b"<configuration/>"
    with pytest.raises(FileNotFoundError):
        store.open_resource_content(jar, "c/missing.txt")


# -----------------------------------------------------------------------------
# DAMAGED ARCHIVE TESTS
# -----------------------------------------------------------------------------

def test_damaged_manifest_raises_archive_read_error(make_corrupt_jar: Callable[..., Path]) -> None:
    """TC-08: A manifest whose deflate stream is garbage fails as an OSError."""
    jar = Entry.of(make_corrupt_jar(
        "lib/bad.jar",
        {"ok.txt": b"fine"},
        "META-INF/MANIFEST.MF",
        class_path="other.jar",
    ))
    store = LocalStore()

    # The central directory is intact, so listing still works
    assert ("ok.txt", False) in store.open_archive_entries(jar)
    with pytest.raises(ArchiveReadError):
        store.read_manifest(jar)


def test_damaged_member_content_raises_archive_read_error(make_corrupt_jar: Callable[..., Path]) -> None:
    """TC-09: Reading a damaged member fails as an OSError; presence checks still answer."""
    jar = Entry.of(make_corrupt_jar("lib/bad.jar", {"a/data.bin": b"payload" * 50}, "a/data.bin"))
    store = LocalStore()

    assert store.contains(jar, "a/data.bin") is True
    with pytest.raises(ArchiveReadError):
        store.open_resource_content(jar, "a/data.bin")


@pytest.mark.parametrize("failure", [
    RuntimeError("File is encrypted, password required for extraction"),
    NotImplementedError("That compression method is not supported"),
    EOFError(),
])
def test_undecodable_manifest_is_reported_as_archive_read_error(
        make_jar: Callable[..., Path], failure: Exception
) -> None:
    """TC-10: Encrypted, unsupported or truncated members all surface as ArchiveReadError."""
    jar = Entry.of(make_jar("lib/m.jar", {"x.txt": b""}, class_path="a.jar"))

    with patch.object(zipfile.ZipFile, "read", side_effect=failure):
        with pytest.raises(ArchiveReadError):
            LocalStore().read_manifest(jar)
