from __future__ import annotations

"""
Scan State Data Model.

Holds the transient state of one top-level scan: which locations have been
visited and which resources have been found. Owned by exactly one scan and
discarded when it completes.
"""

import threading
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Set

from classpath_scanner.domain.resource_models import ResourceRecord


@dataclass
class ScanState:
    """
    Mutable accumulator shared by the workers of a single scan.

    Attributes:
        visited: Canonical keys of every entry already scanned.
        resources: Records found so far.
        cancellation_event: When set, the scan stops and keeps its partial result.
        lock: Guards visited and resources when workers run in parallel.
    """
    visited: Set[str] = field(default_factory=set)
    resources: Set[ResourceRecord] = field(default_factory=set)
    cancellation_event: Optional[threading.Event] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def mark_visited(self, key: str) -> bool:
        """
        Record a location as visited.

        Args:
            key: Canonical key of the entry.

        Returns:
            bool: True on the first visit, False if it was already visited.
        """
        with self.lock:
            if key in self.visited:
                return False
            self.visited.add(key)
            return True

    def add(self, record: ResourceRecord) -> None:
        with self.lock:
            self.resources.add(record)

    def snapshot(self) -> FrozenSet[ResourceRecord]:
        with self.lock:
            return frozenset(self.resources)

    @property
    def cancelled(self) -> bool:
        return self.cancellation_event is not None and self.cancellation_event.is_set()
