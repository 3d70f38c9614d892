"""
Pluggable Hashers
Position-bound leaf/node hashing and peak bagging over a 256-bit primitive.

Canonical Commitment Rules (Hard Contracts, shared with the on-chain verifier):
1. Leaf hashing:   leaf(p) = H(uint256_be(p) || value)
2. Node hashing:   node(p) = H(uint256_be(p) || H(left || right))
3. Peak bagging:   bag  = 32 zero bytes if there are no peaks, else the
                   peaks folded right-to-left: bag = H(peak || bag)
4. Root binding:   root = H(uint256_be(elements_count) || bag)

``p`` is the 1-based element position the node is stored at. These rules
reproduce the Keccak accumulator the Solidity verifier is written against,
e.g. values 1, 2, 3 give peaks 0xf11f11f5...58f5bf6, 0x83ec6a1f...93772465
and root 0x9cf52726...a243b373 at elements_count 4.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from core.crypto.hashing import DIGEST_SIZE, ensure_digest, keccak256, sha256
from core.schemas.errors import InvalidInputException, UnsupportedHasherException


EMPTY_BAG: bytes = b"\x00" * DIGEST_SIZE


def _uint256(number: int, field_path: str) -> bytes:
    if number < 0:
        raise InvalidInputException(
            f"{field_path} must be non-negative, got {number}",
            field_path=field_path,
        )
    return number.to_bytes(32, "big")


class Hasher(ABC):
    """
    Hash capability consumed by the MMR engine.

    Subclasses only supply the raw primitive via ``digest``; the
    position binding and bagging scheme are fixed here so every hasher
    follows the same protocol.
    """

    name: str = ""

    @abstractmethod
    def digest(self, data: bytes) -> bytes:
        """Return the 32-byte primitive hash of ``data``."""

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Plain hash of two concatenated digests."""
        return self.digest(ensure_digest(left, "left") + ensure_digest(right, "right"))

    def hash_leaf(self, position: int, value: bytes) -> bytes:
        """Hash an encoded leaf value stored at ``position``."""
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidInputException(
                f"Leaf value must be bytes, got {type(value).__name__}",
                field_path="value",
            )
        return self.digest(_uint256(position, "position") + bytes(value))

    def hash_node(self, position: int, left: bytes, right: bytes) -> bytes:
        """Hash an ordered pair of child digests into their parent at ``position``."""
        return self.digest(_uint256(position, "position") + self.hash_pair(left, right))

    def bag(self, peaks: Sequence[bytes]) -> bytes:
        """Fold peaks right-to-left into one digest."""
        if not peaks:
            return EMPTY_BAG
        bag = ensure_digest(peaks[-1], "peaks[-1]")
        for peak in reversed(peaks[:-1]):
            bag = self.hash_pair(peak, bag)
        return bag

    def hash_peaks(self, peaks: Sequence[bytes], elements_count: int) -> bytes:
        """Bag ``peaks`` and bind the result to ``elements_count``."""
        return self.digest(_uint256(elements_count, "elements_count") + self.bag(peaks))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class KeccakHasher(Hasher):
    """EVM-compatible Keccak-256 hasher (default)."""

    name = "keccak"

    def digest(self, data: bytes) -> bytes:
        return keccak256(data)


class Sha256Hasher(Hasher):
    """SHA-256 hasher for deployments without an EVM verifier."""

    name = "sha256"

    def digest(self, data: bytes) -> bytes:
        return sha256(data)


HASHERS: dict[str, type[Hasher]] = {
    KeccakHasher.name: KeccakHasher,
    Sha256Hasher.name: Sha256Hasher,
}


def get_hasher(name: str) -> Hasher:
    """
    Build a hasher by registry name.

    Raises:
        UnsupportedHasherException: If ``name`` is not registered.
    """
    try:
        return HASHERS[name.lower()]()
    except KeyError:
        raise UnsupportedHasherException(name, list(HASHERS)) from None


__all__ = [
    "EMPTY_BAG",
    "Hasher",
    "KeccakHasher",
    "Sha256Hasher",
    "HASHERS",
    "get_hasher",
]
