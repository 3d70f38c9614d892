"""
Node Models

The unit a NodeStore persists. Nodes are immutable once created: a leaf
keeps the encoded value it was appended with, an internal node keeps the
positions of its two children.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.crypto.hashing import digest_from_hex, ensure_digest, from_hex, to_hex
from core.schemas.errors import InvalidInputException


@dataclass(frozen=True)
class Node:
    """
    A single MMR node.

    Attributes:
        position: 1-based element position
        digest: 32-byte hash of the node
        height: 0 for leaves
        value: Encoded leaf value (leaves only)
        left: Position of the left child (internal nodes only)
        right: Position of the right child (internal nodes only)
    """
    position: int
    digest: bytes
    height: int = 0
    value: Optional[bytes] = None
    left: Optional[int] = None
    right: Optional[int] = None

    def __post_init__(self) -> None:
        if self.position < 1:
            raise InvalidInputException(
                f"Node position must be >= 1, got {self.position}",
                field_path="position",
            )
        ensure_digest(self.digest, "digest")
        if self.height == 0 and (self.left is not None or self.right is not None):
            raise InvalidInputException("Leaf nodes have no children", field_path="left")
        if self.height > 0 and (self.left is None or self.right is None):
            raise InvalidInputException(
                "Internal nodes need both child positions", field_path="left"
            )

    @property
    def is_leaf(self) -> bool:
        return self.height == 0

    @classmethod
    def leaf(cls, position: int, digest: bytes, value: bytes) -> "Node":
        return cls(position=position, digest=digest, height=0, value=value)

    @classmethod
    def parent(cls, position: int, digest: bytes, height: int) -> "Node":
        """Internal node; children sit at p - 2**h and p - 1."""
        return cls(
            position=position,
            digest=digest,
            height=height,
            left=position - (1 << height),
            right=position - 1,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "position": self.position,
            "digest": to_hex(self.digest),
            "height": self.height,
        }
        if self.value is not None:
            data["value"] = to_hex(self.value)
        if self.left is not None:
            data["left"] = self.left
            data["right"] = self.right
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        value = data.get("value")
        return cls(
            position=int(data["position"]),
            digest=digest_from_hex(data["digest"]),
            height=int(data.get("height", 0)),
            value=from_hex(value) if value is not None else None,
            left=data.get("left"),
            right=data.get("right"),
        )


__all__ = ["Node"]
