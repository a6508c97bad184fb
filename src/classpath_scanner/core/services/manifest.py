from __future__ import annotations

"""
Manifest Companion Reference Extraction.

Reads the 'Class-Path' attribute of an archive manifest and resolves each
declared companion location relative to the directory holding the archive.
"""

import logging
from typing import List, Optional

from classpath_scanner.domain.constants import CLASS_PATH_ATTRIBUTE
from classpath_scanner.domain.entry_models import Entry
from classpath_scanner.domain.locations import resolve
from classpath_scanner.domain.manifest_models import Manifest

logger = logging.getLogger(__name__)


def extract(
        declaring_entry: Entry,
        manifest: Optional[Manifest],
        attribute: str = CLASS_PATH_ATTRIBUTE,
) -> List[Entry]:
    """
    Extract the companion entries declared by an archive's manifest.

    Tokens are separated by runs of whitespace and kept in declaration order.
    Tokens that cannot be resolved are logged and dropped; duplicates are
    kept, the scanner's visited-set takes care of them.

    Args:
        declaring_entry: The archive whose manifest is being read.
        manifest: Parsed manifest, or None if the archive has none.
        attribute: Name of the attribute listing companion references.

    Returns:
        List[Entry]: Resolved companion entries, in order.
    """
    if manifest is None:
        return []

    value = manifest.get(attribute)
    if value is None or not value.strip():
        return []

    base_dir = declaring_entry.parent_dir
    companions: List[Entry] = []
    for token in value.split():
        entry = resolve(base_dir, token)
        if entry is None:
            logger.warning(f"Invalid {attribute} entry in {declaring_entry}: {token}")
            continue
        companions.append(entry)

    return companions
