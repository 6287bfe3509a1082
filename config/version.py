"""
SurfLab - Version
=================

Muss mit `version` in pyproject.toml übereinstimmen.
"""

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# "alpha", "beta", "rc1" oder "" für stable
VERSION_SUFFIX = ""

APP_NAME = "SurfLab"

VERSION = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
VERSION_STRING = f"{VERSION}-{VERSION_SUFFIX}" if VERSION_SUFFIX else VERSION
VERSION_FULL = f"v{VERSION_STRING}"


def get_version_info() -> dict:
    """Versionsinformationen für Banner und Debug-Ausgaben."""
    return {
        "app_name": APP_NAME,
        "version": VERSION,
        "version_string": VERSION_STRING,
        "version_full": VERSION_FULL,
    }
