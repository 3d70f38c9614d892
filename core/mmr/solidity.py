"""
Solidity Proof Export
Shape proofs exactly as the on-chain verifier consumes them.

    verifyProof(uint index, bytes32 value, bytes32[] proof,
                bytes32[] peaks, uint pos, bytes32 rootHash)

``index`` is the leaf's element position, ``value`` the 32-byte encoded
value, ``pos`` the element count the proof is relative to.
"""
from __future__ import annotations

from typing import Optional

from eth_abi import decode, encode
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hasher import Hasher
from core.crypto.hashing import digest_from_hex, to_hex
from core.mmr.models import MmrProof
from core.mmr.verification import verify_proof


ABI_TYPES: list[str] = ["uint256", "bytes32", "bytes32[]", "bytes32[]", "uint256", "bytes32"]


class SolidityProof(BaseModel):
    """Proof in the verifier's argument order, JSON-friendly."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    index: int = Field(..., ge=1, description="Element position of the proven leaf")
    value: str = Field(..., description="32-byte encoded leaf value (0x-prefixed)")
    proof: list[str] = Field(default_factory=list, description="Sibling digests bottom-up")
    peaks: list[str] = Field(..., min_length=1)
    pos: int = Field(..., ge=1, description="Element count the proof is relative to")
    root_hash: str = Field(..., alias="rootHash")

    @field_validator("value", "root_hash")
    @classmethod
    def _is_word(cls, v: str) -> str:
        digest_from_hex(v)
        return v.lower()

    @field_validator("proof", "peaks")
    @classmethod
    def _are_words(cls, v: list[str]) -> list[str]:
        for item in v:
            digest_from_hex(item)
        return [item.lower() for item in v]

    @classmethod
    def from_proof(cls, value: bytes, proof: MmrProof, root_hash: bytes) -> "SolidityProof":
        return cls(
            index=proof.element_position,
            value=to_hex(value),
            proof=list(proof.siblings_hashes),
            peaks=list(proof.peaks_hashes),
            pos=proof.elements_count,
            root_hash=to_hex(root_hash),
        )

    def abi_args(self) -> list:
        return [
            self.index,
            digest_from_hex(self.value),
            [digest_from_hex(h) for h in self.proof],
            [digest_from_hex(h) for h in self.peaks],
            self.pos,
            digest_from_hex(self.root_hash),
        ]

    def abi_encode(self) -> bytes:
        """ABI-encode as ``(uint256,bytes32,bytes32[],bytes32[],uint256,bytes32)``."""
        return encode(ABI_TYPES, self.abi_args())

    @classmethod
    def abi_decode(cls, data: bytes) -> "SolidityProof":
        index, value, proof, peaks, pos, root = decode(ABI_TYPES, data)
        return cls(
            index=index,
            value=to_hex(value),
            proof=[to_hex(h) for h in proof],
            peaks=[to_hex(h) for h in peaks],
            pos=pos,
            root_hash=to_hex(root),
        )

    def verify(self, hasher: Optional[Hasher] = None) -> bool:
        """Run the same check the contract runs."""
        return verify_proof(
            digest_from_hex(self.value),
            self.index,
            [digest_from_hex(h) for h in self.proof],
            [digest_from_hex(h) for h in self.peaks],
            self.pos,
            digest_from_hex(self.root_hash),
            hasher=hasher,
        )


__all__ = ["ABI_TYPES", "SolidityProof"]
