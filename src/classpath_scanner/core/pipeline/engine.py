from __future__ import annotations

"""
Core scanning pipeline.

This module coordinates a complete scan:
1. Validates configuration.
2. Flattens the scope hierarchy into the ordered entry ownership map.
3. Scans every owned entry, sequentially or on a bounded worker pool.
4. Returns the immutable set of records (or a ClassPath view over it).
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, FrozenSet, Mapping, Optional

from classpath_scanner.core.pipeline.validator import validate_config
from classpath_scanner.core.services.hierarchy import flatten
from classpath_scanner.core.services.scanner import Scanner
from classpath_scanner.domain.classpath_models import ClassPath
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.resource_models import ResourceRecord
from classpath_scanner.domain.scope_models import Scope

logger = logging.getLogger(__name__)


def scan_from_root(
        scope: Scope,
        *,
        config: Optional[Dict[str, Any]] = None,
        store: Optional[Any] = None,
        cancellation_event: Optional[threading.Event] = None,
) -> FrozenSet[ResourceRecord]:
    """
    Discover every resource visible from a scope and its ancestors.

    Args:
        scope: The leaf scope to scan from.
        config: Raw configuration overrides (validated leniently).
        store: Backing store (defaults to the local filesystem).
        cancellation_event: When set, the scan stops and returns what it has.

    Returns:
        FrozenSet[ResourceRecord]: One record per (resource name, owning scope).

    Raises:
        HierarchyTraversalError: If the scope hierarchy cannot be walked.
    """
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    logger.info(f"Scan started from {scope!r}.")

    ownership = flatten(scope, cfg["max_hierarchy_depth"])
    scanner = Scanner(store=store, config=cfg, cancellation_event=cancellation_event)
    execute_scan(scanner, ownership, cfg["max_workers"])

    resources = scanner.resources
    if scanner.cancelled:
        logger.info(f"Scan cancelled with {len(resources)} resources found.")
    else:
        logger.info(f"Scan finished: {len(ownership)} entries, {len(resources)} resources.")
    return resources


def build_class_path(
        scope: Scope,
        *,
        config: Optional[Dict[str, Any]] = None,
        store: Optional[Any] = None,
        cancellation_event: Optional[threading.Event] = None,
) -> ClassPath:
    """Scan from a scope and wrap the result in a queryable ClassPath."""
    return ClassPath(scan_from_root(
        scope,
        config=config,
        store=store,
        cancellation_event=cancellation_event,
    ))


def execute_scan(
        scanner: Scanner,
        ownership: Mapping[Entry, Scope],
        max_workers: int = 1,
) -> None:
    """
    Scan every owned entry into the given scanner.

    With more than one worker, the owners of every entry and manifest
    companion are first fixed by a sequential planning pass. Only the
    enumeration of the planned entries is dispatched to the thread pool, so
    resources are attributed exactly as in a sequential scan.

    Args:
        scanner: Scanner accumulating the results of this scan.
        ownership: Ordered entry -> owning scope mapping.
        max_workers: Upper bound on concurrent workers.
    """
    if max_workers <= 1:
        for entry, owner in ownership.items():
            if scanner.cancelled:
                break
            scanner.scan(entry, owner)
        return

    planned = scanner.plan(ownership)

    tasks = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ScanWorker") as executor:
        for entry, owner in planned:
            if scanner.cancelled:
                break
            tasks.append(executor.submit(scanner.collect, entry, owner))

        # Surface unexpected worker failures to the caller
        for future in as_completed(tasks):
            future.result()
