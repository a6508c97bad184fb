from __future__ import annotations

"""
Loader Scope Abstractions.

A Scope is a node in a loader hierarchy: it has at most one parent and an
ordered list of declared search-path entries. The scanner depends only on
this two-method interface; each concrete kind of host loader gets its own
adapter below.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from classpath_scanner.domain.constants import DEFAULT_SEARCH_PATH_VARIABLE
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.locations import has_scheme, resolve

logger = logging.getLogger(__name__)

EntryLike = Union[str, "os.PathLike[str]", Entry]


# ==============================================================================
# ABSTRACT INTERFACE
# ==============================================================================

class Scope(ABC):
    """
    Abstract node of a loader hierarchy.

    Scopes compare by identity: two distinct scope objects never own the
    same resource record, even when they declare the same entries.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name or type(self).__name__

    @property
    @abstractmethod
    def parent(self) -> Optional[Scope]:
        """
        The enclosing scope, or None for a root scope.

        Returns:
            Optional[Scope]: Parent scope reference.
        """

    @abstractmethod
    def declared_entries(self) -> List[Entry]:
        """
        List the search-path entries this scope declares, in order.

        Returns:
            List[Entry]: Declared entries (may be empty).
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


# ==============================================================================
# ADAPTERS
# ==============================================================================

class EntryListScope(Scope):
    """
    Scope backed by an explicit list of locations.

    Locations may be plain paths, Entry values or 'file:' URLs. Any other
    location kind cannot be scanned and is dropped.
    """

    def __init__(
            self,
            entries: Iterable[EntryLike],
            parent: Optional[Scope] = None,
            name: str = "",
    ) -> None:
        super().__init__(name)
        self._locations = list(entries)
        self._parent = parent

    @property
    def parent(self) -> Optional[Scope]:
        return self._parent

    def declared_entries(self) -> List[Entry]:
        base_dir = os.getcwd()
        entries: List[Entry] = []
        for location in self._locations:
            entry = _to_entry(base_dir, location)
            if entry is None:
                logger.debug(f"{self!r}: skipping non-local location {location!r}")
                continue
            entries.append(entry)
        return entries


class DelegatingScope(Scope):
    """
    Scope that exposes no search path of its own.

    Everything it can load comes from its ancestors.
    """

    def __init__(self, parent: Optional[Scope] = None, name: str = "") -> None:
        super().__init__(name)
        self._parent = parent

    @property
    def parent(self) -> Optional[Scope]:
        return self._parent

    def declared_entries(self) -> List[Entry]:
        return []


class SearchPathScope(Scope):
    """
    Scope whose entries come from a separator-joined search-path string.

    Mirrors a runtime's system loader, whose entries are read from a
    variable such as CLASSPATH. Empty segments are ignored.
    """

    def __init__(
            self,
            search_path: str,
            parent: Optional[Scope] = None,
            name: str = "",
            separator: str = os.pathsep,
    ) -> None:
        super().__init__(name)
        self.search_path = search_path
        self.separator = separator
        self._parent = parent

    @classmethod
    def from_environment(
            cls,
            variable: str = DEFAULT_SEARCH_PATH_VARIABLE,
            parent: Optional[Scope] = None,
    ) -> SearchPathScope:
        """
        Build a scope from an environment variable.

        Args:
            variable: Name of the variable holding the search path.
            parent: Optional parent scope.

        Returns:
            SearchPathScope: Scope over the variable's current value ('' if unset).
        """
        return cls(os.environ.get(variable, ""), parent=parent, name=variable)

    @property
    def parent(self) -> Optional[Scope]:
        return self._parent

    def declared_entries(self) -> List[Entry]:
        base_dir = os.getcwd()
        entries: List[Entry] = []
        for segment in self.search_path.split(self.separator):
            segment = segment.strip()
            if not segment:
                continue
            entry = _to_entry(base_dir, segment)
            if entry is None:
                logger.warning(f"Invalid search path entry: {segment}")
                continue
            entries.append(entry)
        return entries


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _to_entry(base_dir: str, location: EntryLike) -> Optional[Entry]:
    """Convert a declared location into an Entry, or None if not local."""
    if isinstance(location, Entry):
        return location
    raw = os.fspath(location)
    if has_scheme(raw):
        return resolve(base_dir, raw)
    return Entry.of(os.path.join(base_dir, raw))
