"""
Schemas & Canonicalization
File: versioning.py

Purpose: Centralize journal format version constants.
This file must stay tiny and have no imports from other schema files
to avoid circular dependencies.
"""

# Journal file format written by JournalNodeStore
JOURNAL_FORMAT: str = "mmr-journal"
JOURNAL_VERSION: str = "v1"

SUPPORTED_JOURNAL_VERSIONS: frozenset[str] = frozenset({"v1"})


def is_compatible_journal_version(version: str) -> bool:
    """Check if a journal version can be replayed."""
    return version in SUPPORTED_JOURNAL_VERSIONS
