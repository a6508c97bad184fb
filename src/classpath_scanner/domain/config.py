from __future__ import annotations

"""
Scan Configuration Defaults.

Provides the default, dictionary-based configuration driving a scan.
Callers override individual keys and pass the result through
'classpath_scanner.core.pipeline.validator.validate_config'.
"""

from typing import Any, Dict

from classpath_scanner.domain.constants import (
    CLASS_PATH_ATTRIBUTE,
    DEFAULT_MAX_HIERARCHY_DEPTH,
    EXCLUDED_CLASS_FILES,
    MANIFEST_PATH,
)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default scan configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Archive metadata
        "manifest_path": MANIFEST_PATH,
        "manifest_attribute": CLASS_PATH_ATTRIBUTE,

        # Classification
        "excluded_class_files": sorted(EXCLUDED_CLASS_FILES),

        # Traversal
        "max_workers": 1,
        "max_hierarchy_depth": DEFAULT_MAX_HIERARCHY_DEPTH,
        "follow_symlinks": True,
    }
