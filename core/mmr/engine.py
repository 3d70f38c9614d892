"""
MMR Engine
Append, peak enumeration, bagging and proof generation over a NodeStore.

The engine keeps no state of its own: every operation is a function of
the store's committed element count and node digests. Appends must be
serialized by the caller (single writer); reads may run concurrently and
only ever observe committed positions.

Usage:
    from core.crypto import KeccakHasher, encode_value
    from core.mmr import MerkleMountainRange
    from core.store import MemoryNodeStore

    mmr = MerkleMountainRange(MemoryNodeStore(), KeccakHasher())
    result = mmr.append(encode_value(3))
    proof = mmr.get_proof(result.element_position)
    assert proof.verify(encode_value(3), result.root_bytes, mmr.hasher)
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.crypto.encoding import encode_value
from core.crypto.hasher import Hasher
from core.crypto.hashing import to_hex
from core.mmr.models import AppendResult, MmrProof
from core.mmr.positions import find_peaks, get_height, is_leaf, leaf_count, proof_path
from core.mmr.verification import verify_proof
from core.schemas.errors import InvalidInputException, InvalidPositionException
from core.store.base import NodeStore
from core.store.models import Node


logger = logging.getLogger(__name__)


class MerkleMountainRange:
    """
    Merkle Mountain Range accumulator.

    Args:
        store: Where nodes live. The engine is the store's only writer.
        hasher: Leaf/node/peak hashing scheme.
        allow_internal_proofs: Permit get_proof on internal node positions.
            Off by default: only leaves are proven.
    """

    def __init__(
        self,
        store: NodeStore,
        hasher: Hasher,
        *,
        allow_internal_proofs: bool = False,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.allow_internal_proofs = allow_internal_proofs

    def __repr__(self) -> str:
        return (
            f"MerkleMountainRange(store={self.store!r}, hasher={self.hasher!r}, "
            f"elements_count={self.elements_count})"
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def elements_count(self) -> int:
        return self.store.elements_count()

    @property
    def leaves_count(self) -> int:
        return leaf_count(self.store.elements_count())

    def _resolve_count(self, elements_count: Optional[int]) -> int:
        current = self.store.elements_count()
        if elements_count is None:
            return current
        if elements_count > current:
            raise InvalidPositionException(
                f"Tree size {elements_count} is beyond the current {current} elements",
                position=elements_count,
                elements_count=current,
            )
        find_peaks(elements_count)
        return elements_count

    def get_node(self, position: int) -> Node:
        return self.store.get(position)

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, value: bytes) -> AppendResult:
        """
        Append an encoded value as a new leaf.

        Merges equal-height peaks like carries in a binary counter, then
        commits the leaf and all merged parents in one store transaction.
        """
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidInputException(
                f"Appended value must be bytes, got {type(value).__name__}",
                field_path="value",
            )
        value = bytes(value)

        elements_count = self.store.elements_count()
        peaks = self._peak_digests(elements_count)

        position = elements_count + 1
        leaf_position = position
        leaf_digest = self.hasher.hash_leaf(position, value)
        nodes = [Node.leaf(position, leaf_digest, value)]
        peaks.append(leaf_digest)

        height = 0
        while get_height(position + 1) > height:
            position += 1
            height += 1
            right = peaks.pop()
            left = peaks.pop()
            parent = self.hasher.hash_node(position, left, right)
            nodes.append(Node.parent(position, parent, height))
            peaks.append(parent)
            logger.debug("Merged peaks into position %d (height %d)", position, height)

        with self.store.transaction():
            for node in nodes:
                self.store.set(node.position, node)

        root = self.hasher.hash_peaks(peaks, position)
        result = AppendResult(
            leaf_index=leaf_count(elements_count) + 1,
            element_position=leaf_position,
            elements_count=position,
            root_hash=to_hex(root),
        )
        logger.debug(
            "Appended leaf %d at position %d, elements_count=%d",
            result.leaf_index, leaf_position, position,
        )
        return result

    def append_value(self, value: int | str) -> AppendResult:
        """Encode an integer (or numeric string) to 32 bytes and append it."""
        return self.append(encode_value(value))

    # ------------------------------------------------------------------
    # Peaks & root
    # ------------------------------------------------------------------

    def _peak_digests(self, elements_count: int) -> list[bytes]:
        return [node.digest for node in self.store.get_many(find_peaks(elements_count))]

    def get_peaks(self, elements_count: Optional[int] = None) -> list[bytes]:
        """Peak digests, highest mountain first, at the current or an earlier size."""
        return self._peak_digests(self._resolve_count(elements_count))

    def bag_peaks(self, peaks: Sequence[bytes], elements_count: int) -> bytes:
        """Bag ``peaks`` into the root for a tree of ``elements_count``."""
        return self.hasher.hash_peaks(peaks, elements_count)

    def get_root(self, elements_count: Optional[int] = None) -> bytes:
        count = self._resolve_count(elements_count)
        return self.bag_peaks(self._peak_digests(count), count)

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def get_proof(self, position: int, elements_count: Optional[int] = None) -> MmrProof:
        """
        Build an inclusion proof for ``position``.

        Args:
            position: Element position to prove
            elements_count: Prove against this earlier tree size instead of
                the current one

        Raises:
            InvalidPositionException: If ``position`` is out of range, or is
                an internal node while internal proofs are disabled.
        """
        count = self._resolve_count(elements_count)
        sibling_positions, _ = proof_path(position, count)

        if not self.allow_internal_proofs and not is_leaf(position):
            raise InvalidPositionException(
                f"Position {position} is an internal node; internal proofs are disabled",
                position=position,
                elements_count=count,
            )

        node = self.store.get(position)
        siblings = [n.digest for n in self.store.get_many(sibling_positions)]
        return MmrProof.from_digests(
            element_position=position,
            element_hash=node.digest,
            siblings=siblings,
            peaks=self._peak_digests(count),
            elements_count=count,
        )

    def verify_proof(
        self,
        value: bytes,
        position: int,
        siblings: Sequence[bytes],
        peaks: Sequence[bytes],
        elements_count: int,
        expected_root: bytes,
    ) -> bool:
        """Pure verification with this engine's hasher; no store access."""
        return verify_proof(
            value,
            position,
            siblings,
            peaks,
            elements_count,
            expected_root,
            hasher=self.hasher,
        )


__all__ = ["MerkleMountainRange"]
