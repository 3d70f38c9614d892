"""
Pytest configuration and shared fixtures for MMR accumulator tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_mmr = importlib.import_module("fixtures.mmr_fixtures")

make_mmr = _mmr.make_mmr
make_filled_mmr = _mmr.make_filled_mmr
make_journal_mmr = _mmr.make_journal_mmr


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def keccak_hasher():
    """Provide the default Keccak hasher."""
    from core.crypto.hasher import KeccakHasher
    return KeccakHasher()


@pytest.fixture
def memory_store():
    """Provide an empty in-memory node store."""
    from core.store.memory import MemoryNodeStore
    return MemoryNodeStore()


@pytest.fixture
def mmr():
    """Provide an empty in-memory accumulator."""
    return make_mmr()


@pytest.fixture
def mmr_with():
    """Factory fixture: an accumulator already holding 1..n."""
    def _make(leaves: int, **kwargs):
        accumulator, _ = make_filled_mmr(leaves, **kwargs)
        return accumulator
    return _make


@pytest.fixture
def journal_path(tmp_path):
    """Path for a fresh journal file."""
    return tmp_path / "mmr.jsonl"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep MMR_* variables from the developer's shell out of tests."""
    import os
    for name in list(os.environ):
        if name.startswith("MMR_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
