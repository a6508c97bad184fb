from __future__ import annotations

"""
Domain Constants.

Centralizes the naming conventions of the archive and class-file formats
understood by the scanner.
"""

from typing import FrozenSet

CLASS_FILE_SUFFIX = ".class"

# Special class files that carry metadata rather than a type definition
MODULE_DESCRIPTOR_FILE = "module-info.class"
PACKAGE_INFO_FILE = "package-info.class"
EXCLUDED_CLASS_FILES: FrozenSet[str] = frozenset({MODULE_DESCRIPTOR_FILE, PACKAGE_INFO_FILE})

# -----------------------------------------------------------------------------
# ARCHIVE MANIFEST
# -----------------------------------------------------------------------------

MANIFEST_PATH = "META-INF/MANIFEST.MF"
CLASS_PATH_ATTRIBUTE = "Class-Path"

FILE_SCHEME = "file"

DEFAULT_MAX_HIERARCHY_DEPTH = 256
DEFAULT_SEARCH_PATH_VARIABLE = "CLASSPATH"
