"""
Value Encoding
Reduce appended values to the fixed-width form external verifiers hash.

Every value is a 256-bit unsigned integer written as 32 big-endian,
zero-padded bytes, the same layout as Solidity's ``bytes32(uint256(x))``.
Prover and verifier must agree on this bit for bit.
"""
from __future__ import annotations

from core.schemas.errors import InvalidInputException


VALUE_SIZE = 32
MAX_VALUE = (1 << (8 * VALUE_SIZE)) - 1


def parse_value(value: int | str) -> int:
    """
    Parse an integer, a decimal string or a 0x-prefixed hex string.

    Raises:
        InvalidInputException: If the value is not a supported integer form.
    """
    if isinstance(value, bool):
        raise InvalidInputException("Booleans are not valid values", field_path="value")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise InvalidInputException(
                f"Not an integer value: {value!r}", field_path="value"
            ) from None

    raise InvalidInputException(
        f"Unsupported value type {type(value).__name__}", field_path="value"
    )


def encode_value(value: int | str) -> bytes:
    """
    Encode ``value`` as 32 big-endian bytes.

    Example:
        >>> encode_value("3").hex()
        '0000000000000000000000000000000000000000000000000000000000000003'

    Raises:
        InvalidInputException: If the value is negative or exceeds 2**256 - 1.
    """
    number = parse_value(value)
    if number < 0 or number > MAX_VALUE:
        raise InvalidInputException(
            f"Value out of range for uint256: {number}",
            field_path="value",
        )
    return number.to_bytes(VALUE_SIZE, "big")


def decode_value(data: bytes) -> int:
    """
    Decode 32 big-endian bytes back to an integer.

    Raises:
        InvalidInputException: If ``data`` is not exactly 32 bytes.
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) != VALUE_SIZE:
        raise InvalidInputException(
            f"Encoded value must be {VALUE_SIZE} bytes", field_path="value"
        )
    return int.from_bytes(data, "big")


__all__ = [
    "VALUE_SIZE",
    "MAX_VALUE",
    "parse_value",
    "encode_value",
    "decode_value",
]
