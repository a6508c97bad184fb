from __future__ import annotations

"""
Recursive Search-Path Scanning Service.

Enumerates the resources under directory and archive entries and follows
the companion references declared in archive manifests. A visited-set keyed
by canonical location guarantees each physical entry is scanned at most
once per scan, which is what stops archives that reference themselves,
directly or through other archives.
"""

import logging
import threading
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Set, Tuple, Union

from classpath_scanner.core.services.classifier import classify
from classpath_scanner.core.services.manifest import extract
from classpath_scanner.domain.config import get_default_config
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.resource_models import ResourceRecord
from classpath_scanner.domain.scan_models import ScanState
from classpath_scanner.domain.scope_models import Scope
from classpath_scanner.infra.fs import LocalStore

logger = logging.getLogger(__name__)


class Scanner:
    """
    Accumulates the resources reachable from one or more entries.

    One Scanner corresponds to one scan: its visited-set and results are
    never shared with another instance. The public methods are safe to call
    from several worker threads of the same scan.
    """

    def __init__(
            self,
            store: Optional[Any] = None,
            config: Optional[Dict[str, Any]] = None,
            cancellation_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Initialize an empty scan.

        Args:
            store: Backing store (defaults to the local filesystem).
            config: Validated configuration dictionary (defaults if None).
            cancellation_event: Stops the scan early when set.
        """
        cfg = config if config is not None else get_default_config()
        self._store = store if store is not None else LocalStore()
        self._manifest_path: str = cfg["manifest_path"]
        self._manifest_attribute: str = cfg["manifest_attribute"]
        self._excluded_class_files = frozenset(cfg["excluded_class_files"])
        self._follow_symlinks: bool = cfg["follow_symlinks"]
        self._state = ScanState(cancellation_event=cancellation_event)

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    @property
    def resources(self) -> FrozenSet[ResourceRecord]:
        """Snapshot of the records found so far."""
        return self._state.snapshot()

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    def scan(self, entry: Union[str, Entry], scope: Scope) -> None:
        """
        Scan an entry and every companion it declares, on behalf of a scope.

        Companions inherit the scope of the entry that declared them. The
        traversal is depth-first and driven by an explicit stack, so long
        reference chains do not grow the call stack. Missing entries,
        unreadable archives and files that are neither directories nor
        archives contribute nothing.

        Args:
            entry: Directory or archive to scan.
            scope: Scope that owns the entry.
        """
        pending: List[Entry] = [Entry.of(entry)]

        while pending:
            if self._state.cancelled:
                logger.info("Scan cancelled. Keeping partial results.")
                return

            current = pending.pop()
            companions = self._scan_entry(current, scope)
            # Reversed so that companions are visited in declaration order
            pending.extend(reversed(companions))

    def plan(self, ownership: Mapping[Entry, Scope]) -> List[Tuple[Entry, Scope]]:
        """
        Fix the owner of every entry a scan will reach, before enumerating any.

        Walks the ownership map in order and expands archive companions
        depth-first exactly as successive scan() calls would, but reads only
        manifests. Enumerating the planned pairs with collect(), in any order
        or concurrently, then attributes every resource the same way a
        sequential scan does.

        Args:
            ownership: Ordered entry -> owning scope mapping.

        Returns:
            List[Tuple[Entry, Scope]]: Existing directories and archives with
                                       their owners, in sequential scan order.
        """
        planned: List[Tuple[Entry, Scope]] = []
        seen: Set[str] = set()

        for root_entry, owner in ownership.items():
            pending: List[Entry] = [root_entry]
            while pending:
                if self._state.cancelled:
                    return planned

                entry = pending.pop()
                key = self._store.canonical_key(entry)
                if key in seen:
                    continue
                seen.add(key)

                if not self._store.exists(entry):
                    continue
                if self._store.is_directory(entry):
                    planned.append((entry, owner))
                elif self._store.is_archive(entry):
                    planned.append((entry, owner))
                    pending.extend(reversed(self._read_companions(entry)))

        logger.debug(f"Planned {len(planned)} entries from {len(ownership)} declared")
        return planned

    def collect(self, entry: Union[str, Entry], scope: Scope) -> None:
        """Enumerate a single entry on behalf of a scope, ignoring its companions."""
        if self._state.cancelled:
            return
        self._scan_entry(Entry.of(entry), scope, follow_companions=False)

    # ==========================================================================
    # PRIVATE HELPERS
    # ==========================================================================

    def _scan_entry(self, entry: Entry, scope: Scope, follow_companions: bool = True) -> List[Entry]:
        """Scan a single entry and return the companions it declares."""
        if not self._state.mark_visited(self._store.canonical_key(entry)):
            return []

        if not self._store.exists(entry):
            logger.debug(f"Skipping missing search path entry: {entry}")
            return []

        if self._store.is_directory(entry):
            self._scan_directory(entry, scope)
            return []

        if self._store.is_archive(entry):
            return self._scan_archive(entry, scope, follow_companions)

        logger.debug(f"Skipping entry that is neither a directory nor an archive: {entry}")
        return []

    def _scan_directory(self, entry: Entry, scope: Scope) -> None:
        count = 0
        for resource_name in self._store.list_files_recursively(
                entry,
                follow_symlinks=self._follow_symlinks,
                cancellation_event=self._state.cancellation_event,
        ):
            self._emit(resource_name, scope)
            count += 1
        logger.debug(f"Scanned directory {entry}: {count} resources")

    def _scan_archive(self, entry: Entry, scope: Scope, follow_companions: bool = True) -> List[Entry]:
        """
        Emit the members of an archive and read its companion references.

        The manifest itself is archive metadata, not a resource, and is not
        emitted.
        """
        try:
            members = self._store.open_archive_entries(entry)
        except OSError as e:
            logger.warning(f"Skipping unreadable archive {entry}: {e}")
            return []

        count = 0
        for member_name, is_directory in members:
            if self._state.cancelled:
                return []
            if is_directory or member_name == self._manifest_path:
                continue
            self._emit(member_name, scope)
            count += 1
        logger.debug(f"Scanned archive {entry}: {count} resources")

        if not follow_companions:
            return []
        return self._read_companions(entry)

    def _read_companions(self, entry: Entry) -> List[Entry]:
        """Resolve the companions an archive's manifest declares."""
        try:
            manifest = self._store.read_manifest(entry, self._manifest_path)
        except OSError as e:
            logger.warning(f"Ignoring unreadable manifest of {entry}: {e}")
            return []

        return extract(entry, manifest, self._manifest_attribute)

    def _emit(self, resource_name: str, scope: Scope) -> None:
        self._state.add(classify(resource_name, scope, self._excluded_class_files))
