from __future__ import annotations

"""
Resource Classification Service.

Decides whether a scanned resource name denotes a compiled type. Stateless:
every function here is a pure function of its arguments.
"""

import posixpath
from typing import Collection

from classpath_scanner.domain.constants import CLASS_FILE_SUFFIX, EXCLUDED_CLASS_FILES
from classpath_scanner.domain.resource_models import ClassResourceRecord, ResourceRecord
from classpath_scanner.domain.scope_models import Scope


def is_class_resource(
        resource_name: str,
        excluded_files: Collection[str] = EXCLUDED_CLASS_FILES,
) -> bool:
    """
    Tell whether a resource name denotes a compiled type.

    Module descriptors and package-info files share the class-file suffix
    but define no type, so they stay plain resources.

    Args:
        resource_name: Slash-delimited resource name.
        excluded_files: Base names never treated as types.

    Returns:
        bool: True if the name should become a ClassResourceRecord.
    """
    if not resource_name.endswith(CLASS_FILE_SUFFIX):
        return False
    return posixpath.basename(resource_name) not in excluded_files


def classify(
        resource_name: str,
        scope: Scope,
        excluded_files: Collection[str] = EXCLUDED_CLASS_FILES,
) -> ResourceRecord:
    """
    Build the record for a scanned resource.

    Args:
        resource_name: Slash-delimited resource name.
        scope: Scope owning the entry the resource was found under.
        excluded_files: Base names never treated as types.

    Returns:
        ResourceRecord: A ClassResourceRecord for class files, else a plain record.
    """
    if is_class_resource(resource_name, excluded_files):
        return ClassResourceRecord(resource_name, scope)
    return ResourceRecord(resource_name, scope)
