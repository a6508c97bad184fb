from __future__ import annotations

"""
Search-Path Entry Data Model.

An Entry identifies one physical location on a search path: a directory or
an archive file. Identity is the canonical absolute form of the path, so two
spellings of the same location compare equal.
"""

import os
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Entry:
    """
    Canonical identifier of a directory or archive on the search path.

    Attributes:
        path: Absolute, normalized filesystem path (no '.' or '..' segments).
    """
    path: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", canonical_path(os.fspath(self.path)))

    @classmethod
    def of(cls, path: Union[str, "os.PathLike[str]", "Entry"]) -> Entry:
        """
        Build an Entry from any path-like value, normalizing it.

        Args:
            path: Relative or absolute path, or an existing Entry.

        Returns:
            Entry: The canonical entry for the location.
        """
        if isinstance(path, Entry):
            return path
        return cls(os.fspath(path))

    @property
    def parent_dir(self) -> str:
        """Directory containing this entry."""
        return os.path.dirname(self.path)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __fspath__(self) -> str:
        return self.path

    def __str__(self) -> str:
        return self.path


def canonical_path(path: str) -> str:
    """
    Compute the canonical textual form of a path without touching the disk.

    Args:
        path: Raw path string.

    Returns:
        str: Absolute path with redundant separators and dot segments removed.
    """
    return os.path.normpath(os.path.abspath(path))
