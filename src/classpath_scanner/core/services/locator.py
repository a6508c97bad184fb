from __future__ import annotations

"""
Resource Location Service.

Finds where a scanned resource physically lives so its content can be read.
Entries are searched the way a parent-first loader would search them:
ancestor scopes first, each archive followed by its manifest companions.
"""

import logging
from typing import Any, BinaryIO, Dict, List, Optional, Set

from classpath_scanner.core.services.hierarchy import flatten
from classpath_scanner.core.services.manifest import extract
from classpath_scanner.domain.config import get_default_config
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.errors import ResourceNotFoundError
from classpath_scanner.domain.resource_models import ResourceLocation, ResourceRecord
from classpath_scanner.domain.scope_models import Scope
from classpath_scanner.infra.fs import LocalStore

logger = logging.getLogger(__name__)


def locate(
        resource_name: str,
        scope: Scope,
        *,
        store: Optional[Any] = None,
        config: Optional[Dict[str, Any]] = None,
) -> List[ResourceLocation]:
    """
    List every location visible from a scope that holds a resource.

    Args:
        resource_name: Slash-delimited resource name.
        scope: Scope whose search path is searched, ancestors included.
        store: Backing store (defaults to the local filesystem).
        config: Validated configuration dictionary (defaults if None).

    Returns:
        List[ResourceLocation]: Matches in search order; empty if none.

    Raises:
        HierarchyTraversalError: If the scope hierarchy cannot be walked.
    """
    cfg = config if config is not None else get_default_config()
    store = store if store is not None else LocalStore()

    ownership = flatten(scope, cfg["max_hierarchy_depth"])
    visited: Set[str] = set()
    locations: List[ResourceLocation] = []

    for root_entry in ownership:
        pending: List[Entry] = [root_entry]
        while pending:
            entry = pending.pop()
            key = store.canonical_key(entry)
            if key in visited:
                continue
            visited.add(key)

            if not store.exists(entry):
                continue
            if store.contains(entry, resource_name):
                locations.append(ResourceLocation(entry, resource_name))
            if not store.is_archive(entry):
                continue

            try:
                manifest = store.read_manifest(entry, cfg["manifest_path"])
            except OSError as e:
                logger.debug(f"Ignoring unreadable manifest of {entry}: {e}")
                continue
            pending.extend(reversed(extract(entry, manifest, cfg["manifest_attribute"])))

    return locations


def open_resource(
        record: ResourceRecord,
        *,
        store: Optional[Any] = None,
        config: Optional[Dict[str, Any]] = None,
) -> BinaryIO:
    """
    Open the first visible copy of a resource as a binary stream.

    Args:
        record: Record produced by a scan.
        store: Backing store (defaults to the local filesystem).
        config: Validated configuration dictionary (defaults if None).

    Returns:
        BinaryIO: Readable stream; the caller closes it.

    Raises:
        ResourceNotFoundError: If no visible entry holds the resource anymore.
    """
    store = store if store is not None else LocalStore()
    locations = locate(record.resource_name, record.scope, store=store, config=config)
    if not locations:
        raise ResourceNotFoundError(
            f"Resource '{record.resource_name}' is not visible from {record.scope!r}"
        )
    first = locations[0]
    return store.open_resource_content(first.entry, first.resource_name)


def read_bytes(
        record: ResourceRecord,
        *,
        store: Optional[Any] = None,
        config: Optional[Dict[str, Any]] = None,
) -> bytes:
    """Read the full content of the first visible copy of a resource."""
    with open_resource(record, store=store, config=config) as stream:
        return stream.read()
