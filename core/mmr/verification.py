"""
MMR Proof Verification
Pure recomputation of a root from an element, its siblings and the peaks.

No store access: everything needed is in the arguments, which is exactly
what an external (on-chain) verifier receives.

Algorithm:
1. Validate the proof shape against ``elements_count`` (InvalidInput on mismatch)
2. Fold the element digest upward; left/right at each level and the
   parent position each hash is bound to come from the position
   arithmetic, not from the caller
3. The folded digest must equal the peak the path ends at
4. bag_peaks(peaks, elements_count) must equal the expected root

Steps 3 and 4 return False on mismatch; only malformed input raises.
"""
from __future__ import annotations

from typing import Optional, Sequence

from core.crypto.hasher import Hasher, KeccakHasher
from core.crypto.hashing import ensure_digest
from core.mmr.positions import (
    find_peaks,
    get_height,
    is_leaf,
    is_right_child,
    parent_offset,
    proof_path,
)
from core.schemas.errors import InvalidInputException


def _validate_shape(
    position: int,
    siblings: Sequence[bytes],
    peaks: Sequence[bytes],
    elements_count: int,
) -> tuple[int, int]:
    """Return (index of the expected peak, path depth) or raise InvalidInput."""
    peak_positions = find_peaks(elements_count)
    if not peak_positions:
        raise InvalidInputException(
            "Cannot verify against an empty accumulator", field_path="elements_count"
        )
    if position < 1 or position > elements_count:
        raise InvalidInputException(
            f"Position {position} out of range for {elements_count} elements",
            field_path="position",
        )
    if len(peaks) != len(peak_positions):
        raise InvalidInputException(
            f"Expected {len(peak_positions)} peaks for {elements_count} elements, "
            f"got {len(peaks)}",
            field_path="peaks",
        )

    path, peak_position = proof_path(position, elements_count)
    if len(siblings) != len(path):
        raise InvalidInputException(
            f"Expected {len(path)} siblings for position {position}, got {len(siblings)}",
            field_path="siblings",
        )

    for i, sibling in enumerate(siblings):
        ensure_digest(sibling, f"siblings[{i}]")
    for i, peak in enumerate(peaks):
        ensure_digest(peak, f"peaks[{i}]")

    return peak_positions.index(peak_position), len(path)


def compute_peak(
    digest: bytes,
    position: int,
    siblings: Sequence[bytes],
    hasher: Hasher,
) -> bytes:
    """Fold ``digest`` at ``position`` through ``siblings`` up to its peak."""
    current = digest
    pos = position
    height = get_height(position)
    for sibling in siblings:
        if is_right_child(pos):
            pos += 1
            current = hasher.hash_node(pos, sibling, current)
        else:
            pos += parent_offset(height)
            current = hasher.hash_node(pos, current, sibling)
        height += 1
    return current


def verify_digest_proof(
    digest: bytes,
    position: int,
    siblings: Sequence[bytes],
    peaks: Sequence[bytes],
    elements_count: int,
    expected_root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify that ``digest`` sits at ``position`` (leaf or internal node).

    Raises:
        InvalidInputException: On a malformed proof shape.
    """
    hasher = hasher or KeccakHasher()
    ensure_digest(digest, "digest")
    ensure_digest(expected_root, "expected_root")
    peak_index, _ = _validate_shape(position, siblings, peaks, elements_count)

    if compute_peak(digest, position, siblings, hasher) != peaks[peak_index]:
        return False
    return hasher.hash_peaks(peaks, elements_count) == expected_root


def verify_proof(
    value: bytes,
    position: int,
    siblings: Sequence[bytes],
    peaks: Sequence[bytes],
    elements_count: int,
    expected_root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify that leaf ``value`` was appended at ``position``.

    Args:
        value: Encoded leaf value (the bytes originally appended)
        position: Element position of the leaf
        siblings: Sibling digests bottom-up
        peaks: Peaks of the tree at ``elements_count``, highest first
        elements_count: Tree size the proof is relative to
        expected_root: Claimed bagged root
        hasher: Defaults to KeccakHasher

    Returns:
        True if the proof checks out, False otherwise

    Raises:
        InvalidInputException: If the shape is malformed or ``position``
            is not a leaf.
    """
    hasher = hasher or KeccakHasher()
    if position >= 1 and not is_leaf(position):
        raise InvalidInputException(
            f"Position {position} is an internal node; use verify_digest_proof",
            field_path="position",
        )
    return verify_digest_proof(
        hasher.hash_leaf(position, value),
        position,
        siblings,
        peaks,
        elements_count,
        expected_root,
        hasher=hasher,
    )


__all__ = [
    "compute_peak",
    "verify_digest_proof",
    "verify_proof",
]
