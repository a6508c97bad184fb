from __future__ import annotations

"""
FileSystem and Archive Infrastructure Layer.

Implements the storage primitives the scanner consumes: existence and kind
checks, recursive directory listing, zip archive listing, manifest reading
and resource content access. Acts as an abstraction over 'os' and 'zipfile'
so the scanning engine can be exercised against any store with the same
methods.
"""

import io
import logging
import os
import threading
import zipfile
import zlib
from typing import BinaryIO, Iterator, List, Optional, Set, Tuple

from classpath_scanner.domain.constants import MANIFEST_PATH
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.manifest_models import Manifest, parse_manifest

logger = logging.getLogger(__name__)

RESOURCE_SEPARATOR = "/"

# Errors zipfile raises on a damaged archive or a member it cannot decode
_ARCHIVE_READ_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


class ArchiveReadError(OSError):
    """Raised when a file that looks like an archive cannot be read as one."""


# -----------------------------------------------------------------------------
# LOCAL STORE
# -----------------------------------------------------------------------------

class LocalStore:
    """
    Backing store over the local filesystem and zip archives.

    Stateless: a single instance may be shared by concurrent scans.
    """

    # -------------------------------------------------------------------------
    # Entry inspection
    # -------------------------------------------------------------------------

    def exists(self, entry: Entry) -> bool:
        return os.path.exists(entry.path)

    def is_directory(self, entry: Entry) -> bool:
        return os.path.isdir(entry.path)

    def is_archive(self, entry: Entry) -> bool:
        """
        Check whether an entry is a readable zip archive.

        The check looks at the content, not the extension, so a '.jar' that
        is really a text file is not an archive.
        """
        return os.path.isfile(entry.path) and zipfile.is_zipfile(entry.path)

    def canonical_key(self, entry: Entry) -> str:
        """
        Identity of the physical location, independent of symlinks.

        Args:
            entry: Entry to identify.

        Returns:
            str: Real path of the entry.
        """
        return os.path.realpath(entry.path)

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def list_files_recursively(
            self,
            entry: Entry,
            follow_symlinks: bool = True,
            cancellation_event: Optional[threading.Event] = None,
    ) -> Iterator[str]:
        """
        Yield every regular file beneath a directory as a relative name.

        Names use '/' as separator regardless of platform. Symlinked
        directories are followed at most once per real directory, so link
        loops terminate.

        Args:
            entry: Directory entry to walk.
            follow_symlinks: Whether to descend into symlinked directories.
            cancellation_event: Stops the walk early when set.

        Yields:
            str: Slash-delimited path relative to the entry root.
        """
        root_path = entry.path
        walked: Set[str] = set()

        for root, dirs, files in os.walk(root_path, followlinks=follow_symlinks):
            if cancellation_event and cancellation_event.is_set():
                return

            real_root = os.path.realpath(root)
            if real_root in walked:
                dirs[:] = []
                continue
            walked.add(real_root)

            dirs.sort()
            files.sort()

            for file_name in files:
                file_path = os.path.join(root, file_name)
                if not os.path.isfile(file_path):
                    continue
                rel_path = os.path.relpath(file_path, root_path)
                yield rel_path.replace(os.sep, RESOURCE_SEPARATOR)

    def open_archive_entries(self, entry: Entry) -> List[Tuple[str, bool]]:
        """
        List the members of a zip archive.

        Args:
            entry: Archive entry.

        Returns:
            List[Tuple[str, bool]]: (member name, is directory marker) pairs.

        Raises:
            ArchiveReadError: If the archive is corrupt or unreadable.
        """
        try:
            with zipfile.ZipFile(entry.path) as zf:
                return [(info.filename, info.is_dir()) for info in zf.infolist()]
        except _ARCHIVE_READ_ERRORS as e:
            raise ArchiveReadError(f"Cannot read archive {entry}: {e}") from e

    def read_manifest(self, entry: Entry, manifest_path: str = MANIFEST_PATH) -> Optional[Manifest]:
        """
        Read and parse the manifest of a zip archive.

        Args:
            entry: Archive entry.
            manifest_path: Member name of the manifest.

        Returns:
            Optional[Manifest]: Parsed manifest, or None if the archive has none.

        Raises:
            ArchiveReadError: If the archive is corrupt or unreadable.
        """
        try:
            with zipfile.ZipFile(entry.path) as zf:
                try:
                    raw = zf.read(manifest_path)
                except KeyError:
                    return None
        except _ARCHIVE_READ_ERRORS as e:
            raise ArchiveReadError(f"Cannot read manifest of {entry}: {e}") from e

        return parse_manifest(raw)

    # -------------------------------------------------------------------------
    # Content access
    # -------------------------------------------------------------------------

    def contains(self, entry: Entry, resource_name: str) -> bool:
        """
        Check whether an entry physically holds a resource.

        Args:
            entry: Directory or archive entry.
            resource_name: Slash-delimited resource name.

        Returns:
            bool: True if the resource can be opened from this entry.
        """
        if self.is_directory(entry):
            return os.path.isfile(_member_path(entry, resource_name))
        if self.is_archive(entry):
            try:
                with zipfile.ZipFile(entry.path) as zf:
                    info = zf.getinfo(resource_name)
            except KeyError:
                return False
            except (OSError,) + _ARCHIVE_READ_ERRORS:
                return False
            return not info.is_dir()
        return False

    def open_resource_content(self, entry: Entry, resource_name: str) -> BinaryIO:
        """
        Open a resource held by an entry as a binary stream.

        Archive members are read fully into memory so the archive can be
        closed before the stream is returned.

        Args:
            entry: Directory or archive entry holding the resource.
            resource_name: Slash-delimited resource name.

        Returns:
            BinaryIO: Readable binary stream; the caller closes it.

        Raises:
            FileNotFoundError: If the entry does not hold the resource.
            ArchiveReadError: If the archive is corrupt or unreadable.
        """
        if self.is_directory(entry):
            return open(_member_path(entry, resource_name), "rb")

        try:
            with zipfile.ZipFile(entry.path) as zf:
                return io.BytesIO(zf.read(resource_name))
        except KeyError as e:
            raise FileNotFoundError(f"{resource_name} not found in {entry}") from e
        except _ARCHIVE_READ_ERRORS as e:
            raise ArchiveReadError(f"Cannot read archive {entry}: {e}") from e


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _member_path(entry: Entry, resource_name: str) -> str:
    """Map a slash-delimited resource name onto a path under a directory entry."""
    return os.path.join(entry.path, *resource_name.split(RESOURCE_SEPARATOR))
