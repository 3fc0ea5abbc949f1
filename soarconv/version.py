"""
Version information for the SOAR playbook converter.
"""

# Semantic versioning: MAJOR.MINOR.PATCH
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

VERSION = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

CONVERTER_ID = "soarconv"


def get_version_string() -> str:
    """Return the formatted version string for display."""
    return f"{CONVERTER_ID} v{VERSION}"
