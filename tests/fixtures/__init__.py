"""
Test fixtures package for MMR accumulator tests.

This package provides factory functions for creating test objects:
- mmr_fixtures.py: accumulators, filled trees, tampering helpers

Usage:
    from fixtures import make_mmr, make_filled_mmr

    def test_something():
        mmr, results = make_filled_mmr(5)
"""

from .mmr_fixtures import (
    make_mmr,
    make_filled_mmr,
    make_journal_mmr,
    flip_bit,
)

__all__ = [
    "make_mmr",
    "make_filled_mmr",
    "make_journal_mmr",
    "flip_bit",
]
