"""
In-memory node store, for tests and short-lived accumulators.
"""
from __future__ import annotations

from typing import Optional, Sequence

from core.store.base import NodeStore
from core.store.models import Node


class MemoryNodeStore(NodeStore):
    """Dict-backed store; contents vanish with the instance."""

    def __init__(self) -> None:
        super().__init__()
        self._nodes: dict[int, Node] = {}
        self._count = 0

    def _load(self, position: int) -> Optional[Node]:
        return self._nodes.get(position)

    def _commit(self, nodes: Sequence[Node], elements_count: int) -> None:
        for node in nodes:
            self._nodes[node.position] = node
        self._count = elements_count

    def _committed_count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"MemoryNodeStore(elements_count={self._count})"


__all__ = ["MemoryNodeStore"]
