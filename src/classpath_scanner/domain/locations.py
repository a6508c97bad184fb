from __future__ import annotations

"""
Search-Path Reference Resolver.

Turns a reference string, as found in a manifest 'Class-Path' attribute or a
declared search path, into a canonical Entry. Resolution is purely textual:
nothing here touches the filesystem, existence is the scanner's concern.
"""

import logging
import os
import re
from typing import Optional
from urllib.parse import unquote

from classpath_scanner.domain.constants import FILE_SCHEME
from classpath_scanner.domain.entry_models import Entry

logger = logging.getLogger(__name__)

# Two characters minimum so that Windows drive letters ('C:') are not schemes
_SCHEME_RX = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+):")
_WINDOWS_DRIVE_RX = re.compile(r"^/[A-Za-z]:")
_LOCAL_AUTHORITIES = ("", "localhost")


# ==============================================================================
# PUBLIC API
# ==============================================================================

def has_scheme(reference: str) -> bool:
    """Tell whether a reference carries an explicit location scheme."""
    return _SCHEME_RX.match(reference) is not None


def resolve(base_dir: str, reference: str) -> Optional[Entry]:
    """
    Resolve a possibly-relative reference against a base directory.

    References with a 'file:' scheme are parsed as locations; absolute ones
    ignore base_dir. Any other scheme cannot be scanned and yields None.
    Plain references are joined to base_dir literally: spaces and characters
    such as '^' are kept as they are, without percent-decoding.

    Args:
        base_dir: Directory relative references are resolved against.
        reference: Reference string to resolve.

    Returns:
        Optional[Entry]: The resolved entry, or None if it cannot be resolved.
    """
    match = _SCHEME_RX.match(reference)
    if match is None:
        return Entry.of(os.path.join(base_dir, reference))

    scheme = match.group(1).lower()
    if scheme != FILE_SCHEME:
        logger.debug(f"Unsupported location scheme '{scheme}' in reference: {reference}")
        return None

    return _resolve_file_location(base_dir, reference[match.end():])


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _resolve_file_location(base_dir: str, location: str) -> Optional[Entry]:
    """Resolve the scheme-specific part of a 'file:' reference."""
    if location.startswith("//"):
        authority, _, path = location[2:].partition("/")
        if authority.lower() not in _LOCAL_AUTHORITIES:
            logger.debug(f"Ignoring remote file location on host '{authority}'")
            return None
        path = "/" + path
    else:
        path = location

    # Query and fragment never name part of a file
    path = path.split("?", 1)[0].split("#", 1)[0]
    path = unquote(path)
    if not path:
        return None

    if os.name == "nt" and _WINDOWS_DRIVE_RX.match(path):
        path = path[1:]

    if path.startswith("/") or os.path.isabs(path):
        return Entry.of(path)
    return Entry.of(os.path.join(base_dir, path))
