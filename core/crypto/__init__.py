"""
Core cryptographic utilities.

Provides the raw hash primitives, the pluggable Hasher capability used by
the MMR engine, and the fixed-width value encoding.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    keccak256,
    to_hex,
    from_hex,
    ensure_digest,
    digest_from_hex,
)
from .hasher import (
    EMPTY_BAG,
    Hasher,
    KeccakHasher,
    Sha256Hasher,
    HASHERS,
    get_hasher,
)
from .encoding import (
    VALUE_SIZE,
    MAX_VALUE,
    parse_value,
    encode_value,
    decode_value,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "ensure_digest",
    "digest_from_hex",
    "EMPTY_BAG",
    "Hasher",
    "KeccakHasher",
    "Sha256Hasher",
    "HASHERS",
    "get_hasher",
    "VALUE_SIZE",
    "MAX_VALUE",
    "parse_value",
    "encode_value",
    "decode_value",
]
