from __future__ import annotations

"""
Loader-Hierarchy Flattening Service.

Collapses a chain of scopes into one ordered mapping from entry to owning
scope. Ancestors are processed first and the first scope to claim an entry
keeps it, so a parent always wins over a child declaring the same entry.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping

from classpath_scanner.domain.constants import DEFAULT_MAX_HIERARCHY_DEPTH
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.errors import HierarchyTraversalError
from classpath_scanner.domain.scope_models import Scope

logger = logging.getLogger(__name__)


def flatten(
        scope: Scope,
        max_depth: int = DEFAULT_MAX_HIERARCHY_DEPTH,
) -> Mapping[Entry, Scope]:
    """
    Build the ordered entry ownership map for a scope and its ancestors.

    Args:
        scope: The leaf scope to start from.
        max_depth: Maximum number of scopes in the chain.

    Returns:
        Mapping[Entry, Scope]: Read-only mapping in root-first, then
                               declaration order.

    Raises:
        HierarchyTraversalError: If the chain loops, is too deep, or a scope
                                 fails to report its entries.
    """
    ownership: Dict[Entry, Scope] = {}

    for current in ancestor_chain(scope, max_depth):
        try:
            declared = current.declared_entries()
        except Exception as e:
            raise HierarchyTraversalError(
                f"Failed to list the entries declared by {current!r}: {e}"
            ) from e

        for entry in declared:
            if entry not in ownership:
                ownership[entry] = current

    logger.debug(f"Flattened {scope!r} into {len(ownership)} entries")
    return MappingProxyType(ownership)


def ancestor_chain(
        scope: Scope,
        max_depth: int = DEFAULT_MAX_HIERARCHY_DEPTH,
) -> List[Scope]:
    """
    List a scope and its ancestors, root-most first.

    Args:
        scope: The leaf scope.
        max_depth: Maximum number of scopes in the chain.

    Returns:
        List[Scope]: Chain ordered from the root down to scope.

    Raises:
        HierarchyTraversalError: On a parent cycle or a chain deeper than max_depth.
    """
    chain: List[Scope] = []
    seen = set()
    current = scope

    while current is not None:
        if id(current) in seen:
            raise HierarchyTraversalError(f"Scope hierarchy loops back to {current!r}")
        if len(chain) >= max_depth:
            raise HierarchyTraversalError(
                f"Scope hierarchy of {scope!r} is deeper than {max_depth} levels"
            )
        seen.add(id(current))
        chain.append(current)

        try:
            current = current.parent
        except Exception as e:
            raise HierarchyTraversalError(f"Failed to read the parent of {current!r}: {e}") from e

    chain.reverse()
    return chain
