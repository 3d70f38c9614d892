"""
Merkle Mountain Range
Append-only accumulator with compact peaks, bagged roots and inclusion proofs.

This module provides:
- Position arithmetic (heights, peaks, leaf/position mapping, proof paths)
- MerkleMountainRange: append, get_peaks, bag_peaks, get_proof, verify_proof
- verify_proof: pure verification, no store access
- SolidityProof: proof shaped for the on-chain verifier, ABI encoding
- run_batch: driver for contract test harnesses

Canonical Commitment Rules: see core.crypto.hasher.

Usage:
    from core.mmr import create_accumulator, verify_proof
    from core.crypto import encode_value

    mmr = create_accumulator()
    for v in ("1", "2", "3"):
        result = mmr.append_value(v)
    proof = mmr.get_proof(result.element_position)
    assert verify_proof(
        encode_value("3"), proof.element_position, proof.siblings_bytes,
        proof.peaks_bytes, proof.elements_count, result.root_bytes,
    )
"""
from .positions import (
    find_peaks,
    get_height,
    is_leaf,
    leaf_count,
    leaf_index,
    leaf_position,
    elements_count_for_leaves,
    is_valid_elements_count,
    proof_path,
)
from .models import AppendResult, MmrProof
from .verification import compute_peak, verify_digest_proof, verify_proof
from .engine import MerkleMountainRange
from .solidity import ABI_TYPES, SolidityProof
from .batch import BatchResult, batch_values, run_batch, encode_batch_output
from .factory import create_accumulator, create_store


__all__ = [
    # Position math
    "find_peaks",
    "get_height",
    "is_leaf",
    "leaf_count",
    "leaf_index",
    "leaf_position",
    "elements_count_for_leaves",
    "is_valid_elements_count",
    "proof_path",
    # Models
    "AppendResult",
    "MmrProof",
    # Verification
    "compute_peak",
    "verify_digest_proof",
    "verify_proof",
    # Engine
    "MerkleMountainRange",
    # Export
    "ABI_TYPES",
    "SolidityProof",
    "BatchResult",
    "batch_values",
    "run_batch",
    "encode_batch_output",
    # Construction
    "create_accumulator",
    "create_store",
]
