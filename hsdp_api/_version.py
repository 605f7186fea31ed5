"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Version information for hsdp-api.

Source checkouts read the VERSION file at the repository root; installed
wheels fall back to the distribution metadata.
"""

from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "hsdp-api"


def get_version() -> str:
    """Return the library version string (e.g. "0.27.0")."""
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


__version__ = get_version()
