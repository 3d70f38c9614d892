"""
Node Store Interface

Mapping from element position to Node plus the committed element count.

Writes are append-only: a position can be written once, and only as the
next free position. Inside ``transaction()`` writes are buffered and
become visible together, with the element count, when the block exits
cleanly. Buffered writes are invisible to readers, so proofs and peaks
computed during an in-flight append only ever see committed positions.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from core.schemas.errors import InvalidPositionException, NodeNotFoundException, StoreFailureException
from core.store.models import Node


logger = logging.getLogger(__name__)


class NodeStore(ABC):
    """
    Base class for MMR node stores.

    Subclasses implement the three storage primitives; ordering rules and
    transaction buffering live here.
    """

    def __init__(self) -> None:
        self._pending: Optional[list[Node]] = None

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _load(self, position: int) -> Optional[Node]:
        """Return the committed node at ``position`` or None."""

    @abstractmethod
    def _commit(self, nodes: Sequence[Node], elements_count: int) -> None:
        """Persist ``nodes`` and the new element count as one unit."""

    @abstractmethod
    def _committed_count(self) -> int:
        """Number of committed elements."""

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def elements_count(self) -> int:
        """Committed element count. Pending transaction writes are excluded."""
        return self._committed_count()

    def get(self, position: int) -> Node:
        """
        Return the committed node at ``position``.

        Raises:
            NodeNotFoundException: If nothing is stored there.
        """
        node = self._load(position)
        if node is None:
            raise NodeNotFoundException(position)
        return node

    def get_many(self, positions: Sequence[int]) -> list[Node]:
        return [self.get(position) for position in positions]

    def set(self, position: int, node: Node) -> None:
        """
        Write ``node`` at ``position``.

        Raises:
            InvalidPositionException: If ``position`` is not the next free
                position or does not match ``node.position``.
        """
        if node.position != position:
            raise InvalidPositionException(
                f"Node position {node.position} does not match slot {position}",
                position=position,
            )

        expected = self._committed_count() + len(self._pending or ()) + 1
        if position != expected:
            raise InvalidPositionException(
                f"Positions are append-only: expected {expected}, got {position}",
                position=position,
                elements_count=expected - 1,
            )

        if self._pending is not None:
            self._pending.append(node)
        else:
            self._commit([node], position)

    @contextmanager
    def transaction(self) -> Iterator["NodeStore"]:
        """
        Buffer ``set`` calls and commit them together.

        On an exception inside the block nothing is written and the
        exception propagates unchanged.
        """
        if self._pending is not None:
            raise StoreFailureException("Nested store transactions are not supported")

        self._pending = []
        try:
            yield self
        except BaseException:
            logger.debug("Discarding %d uncommitted nodes", len(self._pending))
            self._pending = None
            raise

        nodes, self._pending = self._pending, None
        if nodes:
            self._commit(nodes, nodes[-1].position)

    def close(self) -> None:
        """Release resources. Default stores hold none."""

    def __enter__(self) -> "NodeStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["NodeStore"]
