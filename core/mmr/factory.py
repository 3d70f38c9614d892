"""
Accumulator construction from RuntimeConfig.

Each call builds a fresh, independent instance; nothing is cached at
module level.
"""
from __future__ import annotations

import logging

from core.config.runtime import RuntimeConfig
from core.crypto.hasher import Hasher, get_hasher
from core.mmr.engine import MerkleMountainRange
from core.store.base import NodeStore
from core.store.journal import JournalNodeStore
from core.store.memory import MemoryNodeStore


logger = logging.getLogger(__name__)


def create_store(config: RuntimeConfig, hasher: Hasher) -> NodeStore:
    """Build the configured node store, bound to ``hasher``."""
    if config.store.backend == "journal":
        logger.debug("Opening journal store at %s", config.store.path)
        return JournalNodeStore(
            config.store.path,
            hasher_name=hasher.name,
            fsync=config.store.fsync,
        )
    return MemoryNodeStore()


def create_accumulator(config: RuntimeConfig | None = None) -> MerkleMountainRange:
    """Build an accumulator from ``config`` (defaults: keccak, in-memory)."""
    config = config or RuntimeConfig()
    hasher = get_hasher(config.hasher.name)
    return MerkleMountainRange(
        create_store(config, hasher),
        hasher,
        allow_internal_proofs=config.engine.allow_internal_proofs,
    )


__all__ = ["create_store", "create_accumulator"]
