"""
MMR Position Arithmetic
Closed-form mapping between element positions, heights, leaves and peaks.

Positions are 1-based and count every node (leaf or internal) in append
order. An MMR holding ``n`` elements is a row of perfect binary trees
("mountains") of sizes 2**k - 1, largest first, one per set bit of the
leaf count. Everything here is pure integer arithmetic; nothing touches
a store.

    height 2:            7
                       /   \\
    height 1:        3       6      10
                    / \\     / \\    /  \\
    height 0:      1   2   4   5  8    9   11
"""
from __future__ import annotations

from core.schemas.errors import InvalidInputException, InvalidPositionException


def bit_length(n: int) -> int:
    """Number of bits needed to represent ``n``."""
    return n.bit_length()


def popcount(n: int) -> int:
    """Number of set bits in ``n``."""
    return bin(n).count("1")


def all_ones(n: int) -> bool:
    """True when ``n`` is positive and its binary form is all 1s (2**k - 1)."""
    return n > 0 and (n & (n + 1)) == 0


def sibling_offset(height: int) -> int:
    """Distance between a node and its sibling at ``height``."""
    return (2 << height) - 1


def parent_offset(height: int) -> int:
    """Distance from a left child at ``height`` to its parent."""
    return 2 << height


def get_height(position: int) -> int:
    """
    Height of the node at ``position`` (0 for leaves).

    Jumps left to the same height in the left-most mountain until the
    position is all ones; that mountain's root has height bit_length - 1.
    """
    if position < 1:
        raise InvalidPositionException(
            f"Element position must be >= 1, got {position}", position=position
        )
    pos = position
    while not all_ones(pos):
        pos -= (1 << (bit_length(pos) - 1)) - 1
    return bit_length(pos) - 1


def is_leaf(position: int) -> bool:
    """True when ``position`` holds a leaf."""
    return get_height(position) == 0


def is_right_child(position: int) -> bool:
    """True when the node at ``position`` is the right child of its parent."""
    return get_height(position + 1) > get_height(position)


def find_peaks(elements_count: int) -> list[int]:
    """
    Positions of the peaks of an MMR with ``elements_count`` elements.

    Ordered left to right (highest mountain first). Empty for 0.

    Raises:
        InvalidInputException: If no sequence of appends yields this count.

    Example:
        >>> find_peaks(11)
        [7, 10, 11]
    """
    if elements_count < 0:
        raise InvalidInputException(
            f"elements_count must be non-negative, got {elements_count}",
            field_path="elements_count",
        )

    peaks: list[int] = []
    remaining = elements_count
    mountain = (1 << elements_count.bit_length()) - 1
    shift = 0
    while mountain > 0:
        if mountain <= remaining:
            shift += mountain
            peaks.append(shift)
            remaining -= mountain
        mountain >>= 1

    if remaining:
        raise InvalidInputException(
            f"{elements_count} is not a valid MMR element count",
            field_path="elements_count",
        )
    return peaks


def is_valid_elements_count(elements_count: int) -> bool:
    """Check if ``elements_count`` is reachable by appends, without raising."""
    try:
        find_peaks(elements_count)
    except InvalidInputException:
        return False
    return True


def leaf_count(elements_count: int) -> int:
    """
    Number of leaves in an MMR with ``elements_count`` elements.

    Raises:
        InvalidInputException: If the count is not a valid MMR size.
    """
    return sum(
        1 << get_height(peak) for peak in find_peaks(elements_count)
    )


def elements_count_for_leaves(leaves: int) -> int:
    """
    Total elements after appending ``leaves`` leaves: 2L - popcount(L).

    Each carry of the binary counter adds one internal node.
    """
    if leaves < 0:
        raise InvalidInputException(
            f"Leaf count must be non-negative, got {leaves}", field_path="leaves"
        )
    return 2 * leaves - popcount(leaves)


def leaf_position(leaf_index: int) -> int:
    """Element position of the 1-based ``leaf_index``-th leaf."""
    if leaf_index < 1:
        raise InvalidPositionException(
            f"Leaf index must be >= 1, got {leaf_index}", position=leaf_index
        )
    return elements_count_for_leaves(leaf_index - 1) + 1


def leaf_index(position: int) -> int:
    """
    1-based leaf index of the leaf stored at ``position``.

    Raises:
        InvalidPositionException: If ``position`` is an internal node.
    """
    if not is_leaf(position):
        raise InvalidPositionException(
            f"Position {position} is an internal node, not a leaf",
            position=position,
        )
    # The element count just before a leaf is appended is always valid.
    return leaf_count(position - 1) + 1


def check_position(position: int, elements_count: int) -> None:
    """
    Ensure ``1 <= position <= elements_count``.

    Raises:
        InvalidPositionException: If the position is out of range.
    """
    if position < 1 or position > elements_count:
        raise InvalidPositionException(
            f"Position {position} out of range for {elements_count} elements",
            position=position,
            elements_count=elements_count,
        )


def proof_path(position: int, elements_count: int) -> tuple[list[int], int]:
    """
    Sibling positions from ``position`` up to the peak containing it.

    Returns:
        (sibling positions bottom-up, position of the reached peak)

    Raises:
        InvalidInputException: If ``elements_count`` is not a valid MMR size.
        InvalidPositionException: If ``position`` is out of range.

    Example:
        >>> proof_path(4, 7)
        ([5, 3], 7)
    """
    peaks = set(find_peaks(elements_count))
    check_position(position, elements_count)

    siblings: list[int] = []
    pos = position
    height = get_height(position)
    while pos not in peaks:
        if get_height(pos + 1) > height:
            siblings.append(pos - sibling_offset(height))
            pos += 1
        else:
            siblings.append(pos + sibling_offset(height))
            pos += parent_offset(height)
        height += 1
    return siblings, pos


__all__ = [
    "bit_length",
    "popcount",
    "all_ones",
    "sibling_offset",
    "parent_offset",
    "get_height",
    "is_leaf",
    "is_right_child",
    "find_peaks",
    "is_valid_elements_count",
    "leaf_count",
    "elements_count_for_leaves",
    "leaf_position",
    "leaf_index",
    "check_position",
    "proof_path",
]
