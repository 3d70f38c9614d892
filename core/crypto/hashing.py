"""
Hashing Utilities
Raw digest primitives and 0x-hex helpers.

This module provides:
- Keccak-256 (EVM flavour, via eth-utils) and SHA-256 for raw bytes
- Hex encoding/decoding with 0x prefix
- 32-byte digest validation

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Keccak-256 here is the pre-standard variant used by the EVM,
  NOT hashlib.sha3_256
"""
from __future__ import annotations

import hashlib

from eth_utils import keccak

from core.schemas.errors import InvalidInputException


DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute the EVM Keccak-256 hash of raw bytes.

    Matches Solidity's ``keccak256(abi.encodePacked(...))`` over the same bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=bytes(data))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        InvalidInputException: If string doesn't start with 0x, has odd length,
                               or contains invalid hex characters
    """
    if not isinstance(hex_string, str) or not hex_string.startswith("0x"):
        raise InvalidInputException(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise InvalidInputException(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise InvalidInputException(f"Invalid hex characters in string: {e}") from e


def ensure_digest(value: bytes, field_path: str = "digest") -> bytes:
    """
    Validate that ``value`` is exactly one 32-byte digest.

    Raises:
        InvalidInputException: On wrong type or length.
    """
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidInputException(
            f"{field_path} must be bytes, got {type(value).__name__}",
            field_path=field_path,
        )
    if len(value) != DIGEST_SIZE:
        raise InvalidInputException(
            f"{field_path} must be {DIGEST_SIZE} bytes, got {len(value)}",
            field_path=field_path,
        )
    return bytes(value)


def digest_from_hex(hex_string: str, field_path: str = "digest") -> bytes:
    """Decode a 0x-prefixed 32-byte digest."""
    return ensure_digest(from_hex(hex_string), field_path)


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "ensure_digest",
    "digest_from_hex",
]
