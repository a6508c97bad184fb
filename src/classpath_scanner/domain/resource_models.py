from __future__ import annotations

"""
Resource Domain Data Models.

Defines the immutable records produced by a scan. A ResourceRecord pairs a
slash-delimited resource name with the scope that owns it; a
ClassResourceRecord is a record whose name denotes a compiled type and
exposes the naming derived from it.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from classpath_scanner.domain.constants import CLASS_FILE_SUFFIX

if TYPE_CHECKING:
    from classpath_scanner.domain.entry_models import Entry
    from classpath_scanner.domain.scope_models import Scope

_LEADING_DIGITS = re.compile(r"^\d+")


# -----------------------------------------------------------------------------
# RESOURCE RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ResourceRecord:
    """
    A named resource reachable from a scope's search path.

    Equality and hashing use the (resource_name, scope) pair only, so a
    class record and a plain record with the same name and scope are equal.

    Attributes:
        resource_name: Slash-delimited name, e.g. 'a/b/c.txt'.
        scope: The scope that owns the entry the resource was found under.
    """
    resource_name: str
    scope: "Scope"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceRecord):
            return NotImplemented
        return self.resource_name == other.resource_name and self.scope is other.scope

    def __hash__(self) -> int:
        return hash((self.resource_name, id(self.scope)))

    def __str__(self) -> str:
        return self.resource_name


@dataclass(frozen=True, eq=False)
class ClassResourceRecord(ResourceRecord):
    """
    A resource naming a compiled type ('.class' file).

    All derived names are pure functions of the resource name.
    """

    @property
    def class_name(self) -> str:
        """Dotted type name, e.g. 'a.b.Foo$Bar'."""
        return get_class_name(self.resource_name)

    @property
    def package_name(self) -> str:
        """Enclosing namespace of the type, or '' for the default package."""
        return get_package_name(self.class_name)

    @property
    def simple_name(self) -> str:
        """
        Unqualified type name.

        For nested types this is the part after the last '$' with any
        leading digits removed: anonymous types yield '' and local types
        yield their declared name.
        """
        return get_simple_name(self.class_name)

    @property
    def is_top_level(self) -> bool:
        return "$" not in self.class_name

    def __str__(self) -> str:
        return self.class_name


@dataclass(frozen=True)
class ResourceLocation:
    """
    A physical place a resource can be read from.

    Attributes:
        entry: Directory or archive holding the resource.
        resource_name: Slash-delimited name within the entry.
    """
    entry: "Entry"
    resource_name: str


# -----------------------------------------------------------------------------
# NAME DERIVATION
# -----------------------------------------------------------------------------

def get_class_name(filename: str) -> str:
    """
    Convert a class-file resource name into a dotted type name.

    Args:
        filename: Slash-delimited resource name ending in '.class'.

    Returns:
        str: e.g. 'abc/d/Abc.class' -> 'abc.d.Abc'.
    """
    class_name = filename
    if class_name.endswith(CLASS_FILE_SUFFIX):
        class_name = class_name[:-len(CLASS_FILE_SUFFIX)]
    return class_name.replace("/", ".")


def get_package_name(class_name: str) -> str:
    """Return everything before the last '.' of a dotted name, or ''."""
    last_dot = class_name.rfind(".")
    return "" if last_dot == -1 else class_name[:last_dot]


def get_simple_name(class_name: str) -> str:
    """Derive the unqualified name of a dotted type name."""
    last_dollar = class_name.rfind("$")
    if last_dollar != -1:
        inner_name = class_name[last_dollar + 1:]
        return _LEADING_DIGITS.sub("", inner_name)

    package_name = get_package_name(class_name)
    if not package_name:
        return class_name
    return class_name[len(package_name) + 1:]
