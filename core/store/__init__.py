"""
Node stores for the MMR engine.

    from core.store import MemoryNodeStore, JournalNodeStore

    store = JournalNodeStore("mmr.jsonl", hasher_name="keccak")
"""
from .models import Node
from .base import NodeStore
from .memory import MemoryNodeStore
from .journal import JournalNodeStore

__all__ = [
    "Node",
    "NodeStore",
    "MemoryNodeStore",
    "JournalNodeStore",
]
