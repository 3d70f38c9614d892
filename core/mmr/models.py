"""
MMR Result Models

Wire-facing results of engine operations. Digests are carried as
0x-prefixed hex strings so results serialize to JSON unchanged; the
``*_bytes`` helpers give the raw digests back.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import digest_from_hex, to_hex

if TYPE_CHECKING:
    from core.crypto.hasher import Hasher


def _check_digest(value: str) -> str:
    digest_from_hex(value)
    return value.lower()


class AppendResult(BaseModel):
    """Outcome of a single append."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., ge=1, description="1-based index among leaves")
    element_position: int = Field(..., ge=1, description="Position the leaf was stored at")
    elements_count: int = Field(..., ge=1, description="Total elements after the append")
    root_hash: str = Field(..., description="Bagged root after the append (0x-prefixed)")

    @field_validator("root_hash")
    @classmethod
    def _root_is_digest(cls, v: str) -> str:
        return _check_digest(v)

    @property
    def leaves_count(self) -> int:
        return self.leaf_index

    @property
    def root_bytes(self) -> bytes:
        return digest_from_hex(self.root_hash)


class MmrProof(BaseModel):
    """
    Inclusion proof for one element against a given tree size.

    Attributes:
        element_position: Position being proven
        element_hash: Digest stored at that position
        siblings_hashes: Sibling digests bottom-up to the containing peak
        peaks_hashes: All peaks of the tree at ``elements_count``
        elements_count: Tree size the proof is relative to
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    element_position: int = Field(..., ge=1)
    element_hash: str
    siblings_hashes: list[str] = Field(default_factory=list)
    peaks_hashes: list[str] = Field(..., min_length=1)
    elements_count: int = Field(..., ge=1)

    @field_validator("element_hash")
    @classmethod
    def _element_is_digest(cls, v: str) -> str:
        return _check_digest(v)

    @field_validator("siblings_hashes", "peaks_hashes")
    @classmethod
    def _all_digests(cls, v: list[str]) -> list[str]:
        return [_check_digest(item) for item in v]

    @property
    def siblings_bytes(self) -> list[bytes]:
        return [digest_from_hex(h) for h in self.siblings_hashes]

    @property
    def peaks_bytes(self) -> list[bytes]:
        return [digest_from_hex(h) for h in self.peaks_hashes]

    def verify(
        self,
        value: bytes,
        expected_root: bytes,
        hasher: Optional["Hasher"] = None,
    ) -> bool:
        """Verify this proof for leaf ``value`` against ``expected_root``."""
        from core.mmr.verification import verify_proof

        return verify_proof(
            value,
            self.element_position,
            self.siblings_bytes,
            self.peaks_bytes,
            self.elements_count,
            expected_root,
            hasher=hasher,
        )

    @classmethod
    def from_digests(
        cls,
        element_position: int,
        element_hash: bytes,
        siblings: list[bytes],
        peaks: list[bytes],
        elements_count: int,
    ) -> "MmrProof":
        return cls(
            element_position=element_position,
            element_hash=to_hex(element_hash),
            siblings_hashes=[to_hex(s) for s in siblings],
            peaks_hashes=[to_hex(p) for p in peaks],
            elements_count=elements_count,
        )


__all__ = ["AppendResult", "MmrProof"]
