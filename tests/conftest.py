from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Archive-building fixtures used by scanner, locator and pipeline tests.
"""

import os
import struct
import sys
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Helpers
# -----------------------------------------------------------------------------
def write_jar(
        jar_path: Path,
        members: Optional[Dict[str, bytes]] = None,
        class_path: Optional[str] = None,
        directories: Iterable[str] = (),
        compression: int = zipfile.ZIP_STORED,
) -> Path:
    """
    Write a zip archive with an optional manifest 'Class-Path' attribute.

    Args:
        jar_path: Destination of the archive.
        members: Member name -> content.
        class_path: Value of the manifest 'Class-Path' attribute, if any.
        directories: Directory marker names (ending in '/').
        compression: zipfile compression method for every member.

    Returns:
        Path: The archive path.
    """
    jar_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(jar_path, "w", compression=compression) as zf:
        if class_path is not None:
            manifest = f"Manifest-Version: 1.0\nClass-Path: {class_path}\n\n"
            zf.writestr("META-INF/MANIFEST.MF", manifest)
        for directory in directories:
            zf.writestr(zipfile.ZipInfo(directory), b"")
        for name, content in (members or {}).items():
            zf.writestr(name, content)
    return jar_path


def corrupt_member(jar_path: Path, member: str) -> None:
    """
    Overwrite the stored bytes of one archive member with 0xFF.

    The central directory stays intact, so the archive still opens and lists
    normally; only decoding that member fails. For a deflated member this
    surfaces as zlib.error ("invalid block type").
    """
    with zipfile.ZipFile(jar_path) as zf:
        info = zf.getinfo(member)

    data = bytearray(jar_path.read_bytes())
    header = info.header_offset
    name_len, extra_len = struct.unpack("<HH", data[header + 26:header + 30])
    start = header + 30 + name_len + extra_len
    data[start:start + info.compress_size] = b"\xff" * info.compress_size
    jar_path.write_bytes(bytes(data))


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_jar(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a factory writing archives under the test's temporary directory.

    Usage: make_jar("lib/a.jar", {"a/A.class": b"..."}, class_path="b.jar")
    """
    def _factory(
            relative_path: str,
            members: Optional[Dict[str, bytes]] = None,
            class_path: Optional[str] = None,
            directories: Iterable[str] = (),
            compression: int = zipfile.ZIP_STORED,
    ) -> Path:
        return write_jar(tmp_path / relative_path, members, class_path, directories, compression)

    return _factory


@pytest.fixture
def class_dir(tmp_path: Path) -> Path:
    """Create a directory entry holding classes and plain resources."""
    root = tmp_path / "classes"
    (root / "com" / "example" / "inner").mkdir(parents=True)
    (root / "com" / "example" / "App.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "com" / "example" / "App$Nested.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "com" / "example" / "inner" / "Helper.class").write_bytes(b"\xca\xfe\xba\xbe")
    (root / "com" / "example" / "messages.properties").write_text("k=v", encoding="utf-8")
    (root / "log.xml").write_text("<configuration/>", encoding="utf-8")
    return root


@pytest.fixture
def make_corrupt_jar(make_jar: Callable[..., Path]) -> Callable[..., Path]:
    """
    Return a factory writing a deflated archive with one damaged member.

    Usage: make_corrupt_jar("bad.jar", {"ok.txt": b"x"}, "META-INF/MANIFEST.MF", class_path="")
    """
    def _factory(
            relative_path: str,
            members: Dict[str, bytes],
            damaged_member: str,
            class_path: Optional[str] = None,
    ) -> Path:
        jar = make_jar(relative_path, members, class_path=class_path, compression=zipfile.ZIP_DEFLATED)
        corrupt_member(jar, damaged_member)
        return jar

    return _factory
