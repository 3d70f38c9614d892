"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Version constants
from .versioning import (
    JOURNAL_FORMAT,
    JOURNAL_VERSION,
    SUPPORTED_JOURNAL_VERSIONS,
    is_compatible_journal_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    AccumulatorError,
    AccumulatorException,
    CanonicalizationException,
    ConfigurationException,
    ErrorCodes,
    InvalidInputException,
    InvalidPositionException,
    NodeNotFoundException,
    StoreFailureException,
    UnsupportedHasherException,
)

__all__ = [
    # Versioning
    "JOURNAL_FORMAT",
    "JOURNAL_VERSION",
    "SUPPORTED_JOURNAL_VERSIONS",
    "is_compatible_journal_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "AccumulatorError",
    "AccumulatorException",
    "CanonicalizationException",
    "ConfigurationException",
    "ErrorCodes",
    "InvalidInputException",
    "InvalidPositionException",
    "NodeNotFoundException",
    "StoreFailureException",
    "UnsupportedHasherException",
]
