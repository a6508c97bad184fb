from __future__ import annotations

"""
Archive Manifest Data Model.

Parses the main section of a JAR-style manifest ('META-INF/MANIFEST.MF').
Only the main attributes matter to the scanner; per-entry sections that
follow the first blank line are ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_CONTINUATION_PREFIX = " "
_HEADER_SEPARATOR = ":"


# -----------------------------------------------------------------------------
# MANIFEST MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Manifest:
    """
    Main-section attributes of an archive manifest.

    Attribute names are case-insensitive, as in the manifest format itself.
    The original spelling is kept for display.

    Attributes:
        attributes: Mapping of lower-cased name to (original name, value).
    """
    attributes: Dict[str, Tuple[str, str]] = field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Look up an attribute value by name, ignoring case.

        Args:
            name: Attribute name, e.g. 'Class-Path'.
            default: Value returned when the attribute is absent.

        Returns:
            Optional[str]: The attribute value or the default.
        """
        item = self.attributes.get(name.lower())
        return item[1] if item is not None else default

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.attributes

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self.attributes.values())

    def __len__(self) -> int:
        return len(self.attributes)


# -----------------------------------------------------------------------------
# PARSING
# -----------------------------------------------------------------------------

def parse_manifest(content: Union[str, bytes]) -> Manifest:
    """
    Parse the main section of a manifest document.

    Handles LF and CRLF line endings and continuation lines (a line starting
    with a single space extends the previous value). Lines without a header
    separator are logged and skipped.

    Args:
        content: Raw manifest text or UTF-8 bytes.

    Returns:
        Manifest: Parsed main attributes (empty if the document is empty).
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")

    attributes: Dict[str, Tuple[str, str]] = {}
    current_name: Optional[str] = None

    for raw_line in content.splitlines():
        # The main section ends at the first blank line
        if not raw_line.strip():
            if attributes or current_name is not None:
                break
            continue

        if raw_line.startswith(_CONTINUATION_PREFIX):
            if current_name is None:
                logger.debug(f"Ignoring orphan manifest continuation line: {raw_line!r}")
                continue
            original, value = attributes[current_name.lower()]
            attributes[current_name.lower()] = (original, value + raw_line[1:])
            continue

        name, sep, value = raw_line.partition(_HEADER_SEPARATOR)
        name = name.strip()
        if not sep or not name:
            logger.debug(f"Ignoring malformed manifest line: {raw_line!r}")
            current_name = None
            continue

        # A single space separates the header from its value
        if value.startswith(" "):
            value = value[1:]

        attributes[name.lower()] = (name, value)
        current_name = name

    return Manifest(attributes=attributes)
