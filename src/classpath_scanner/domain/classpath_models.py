from __future__ import annotations

"""
Class Path Result Model.

Wraps the immutable set of records produced by one scan and answers the
usual questions about it: which classes exist, which are top-level, and
which belong to a given package.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterator, Optional

from classpath_scanner.domain.resource_models import ClassResourceRecord, ResourceRecord


@dataclass(frozen=True)
class ClassPath:
    """
    Immutable view over the resources found by a scan.

    Attributes:
        resources: Every record found, classes included. Archive manifests
                   are not resources.
    """
    resources: FrozenSet[ResourceRecord]

    def get_resources(self) -> FrozenSet[ResourceRecord]:
        """All resources, including the class files of every class."""
        return self.resources

    def get_all_classes(self) -> FrozenSet[ClassResourceRecord]:
        """
        All class records, nested, local and anonymous types included.

        Returns:
            FrozenSet[ClassResourceRecord]: Every class-file record.
        """
        return frozenset(r for r in self.resources if isinstance(r, ClassResourceRecord))

    def get_top_level_classes(self, package_name: Optional[str] = None) -> FrozenSet[ClassResourceRecord]:
        """
        Top-level classes, optionally limited to one package.

        Args:
            package_name: Exact dotted package name; None means every package.

        Returns:
            FrozenSet[ClassResourceRecord]: Matching top-level class records.
        """
        return frozenset(
            c for c in self.get_all_classes()
            if c.is_top_level and (package_name is None or c.package_name == package_name)
        )

    def get_top_level_classes_recursive(self, package_name: str) -> FrozenSet[ClassResourceRecord]:
        """
        Top-level classes of a package and all of its sub-packages.

        Args:
            package_name: Dotted package name, e.g. 'com.example'.

        Returns:
            FrozenSet[ClassResourceRecord]: Matching top-level class records.
        """
        prefix = package_name + "."
        return frozenset(
            c for c in self.get_all_classes()
            if c.is_top_level and (c.package_name == package_name or c.class_name.startswith(prefix))
        )

    def __iter__(self) -> Iterator[ResourceRecord]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)
