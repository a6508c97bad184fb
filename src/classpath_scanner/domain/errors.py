from __future__ import annotations

"""
Scan Error Taxonomy.

Stale search-path entries, malformed manifest references and unreadable
archives are recovered where they happen and never reach the caller. The
exceptions below are the conditions that do.
"""


class ClassPathScanError(Exception):
    """Base class for all errors raised by the scanning engine."""


class HierarchyTraversalError(ClassPathScanError):
    """
    Raised when the loader hierarchy cannot be walked.

    Covers a scope failing to report its declared entries, a parent chain
    that loops back on itself and a chain deeper than the configured limit.
    """


class ResourceNotFoundError(ClassPathScanError, LookupError):
    """Raised when no entry of a scope physically contains a resource."""
