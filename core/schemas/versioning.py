"""
Schemas & Canonicalization
File: versioning.py

Purpose: Proof artifact version constants.
Imports nothing from the other schema files so every one of them can use it.
"""

# Version written by current notaries
SCHEMA_VERSION: str = "v1"

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({SCHEMA_VERSION})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when an artifact declares a version this viewer cannot read."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            f"Unsupported proof version: '{version}'. "
            f"Supported versions: {sorted(SUPPORTED_SCHEMA_VERSIONS)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """
    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)
