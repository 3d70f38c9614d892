"""
Batch Driver
Append a run of values to a fresh accumulator and emit ABI-encoded output
for contract test harnesses.

Two output modes:
- roots: ``abi.encode(bytes32[] roots)`` after every append, or
  ``abi.encode(bytes32 root)`` for the final root only
- proofs: one SolidityProof per append, each ABI-encoded, joined by ';'
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from eth_abi import encode

from core.crypto.encoding import encode_value
from core.crypto.hasher import Hasher, KeccakHasher
from core.crypto.hashing import to_hex
from core.mmr.engine import MerkleMountainRange
from core.mmr.solidity import SolidityProof
from core.schemas.errors import InvalidInputException
from core.store.memory import MemoryNodeStore


logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Roots (and optionally proofs) collected over a batch run."""
    roots: list[bytes] = field(default_factory=list)
    proofs: list[SolidityProof] = field(default_factory=list)

    @property
    def final_root(self) -> bytes:
        if not self.roots:
            raise InvalidInputException("Batch produced no roots")
        return self.roots[-1]


def batch_values(count: Optional[int] = None, values: Optional[str] = None) -> list[str]:
    """
    Values to append: the ';'-separated ``values`` if given, else "1".."count".

    Raises:
        InvalidInputException: If neither yields at least one value.
    """
    if values:
        items = [item.strip() for item in values.split(";") if item.strip()]
    elif count is not None and count > 0:
        items = [str(i) for i in range(1, count + 1)]
    else:
        items = []

    if not items:
        raise InvalidInputException("Number of appends to perform has not been provided")
    return items


def run_batch(
    values: Sequence[int | str],
    *,
    generate_proofs: bool = False,
    hasher: Optional[Hasher] = None,
) -> BatchResult:
    """Append ``values`` to an in-memory accumulator, collecting roots/proofs."""
    mmr = MerkleMountainRange(MemoryNodeStore(), hasher or KeccakHasher())
    result = BatchResult()

    for value in values:
        encoded = encode_value(value)
        appended = mmr.append(encoded)
        result.roots.append(appended.root_bytes)

        if generate_proofs:
            proof = mmr.get_proof(appended.element_position)
            result.proofs.append(
                SolidityProof.from_proof(encoded, proof, appended.root_bytes)
            )

    logger.info("Batch appended %d values, elements_count=%d", len(values), mmr.elements_count)
    return result


def encode_batch_output(result: BatchResult, *, final_root_only: bool = False) -> str:
    """Render a batch result the way contract test harnesses read it."""
    if result.proofs:
        return ";".join(to_hex(proof.abi_encode()) for proof in result.proofs)
    if final_root_only:
        return to_hex(encode(["bytes32"], [result.final_root]))
    return to_hex(encode(["bytes32[]"], [result.roots]))


__all__ = [
    "BatchResult",
    "batch_values",
    "run_batch",
    "encode_batch_output",
]
