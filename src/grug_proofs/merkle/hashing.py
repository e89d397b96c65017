"""
Node Hashing

This module implements the hashing rules of the Grug Merkle tree:

- Keys and values are stored as their SHA-256 hashes
- Internal node: sha256(0x00 || left_or_zero || right_or_zero)
- Leaf node: sha256(0x01 || key_hash || value_hash)

The leading prefix byte separates the two node kinds, so a leaf preimage can
never be mistaken for an internal node preimage. An absent child is hashed as
32 zero bytes; it is never skipped.
"""

import base64
import binascii
import hashlib
from typing import Optional

from ..errors import IncorrectHashLength, MalformedProof

HASH_LENGTH = 32
HASH_BITS = HASH_LENGTH * 8

HASH_PREFIX_INTERNAL_NODE = b"\x00"
HASH_PREFIX_LEAF_NODE = b"\x01"

ZERO_HASH = b"\x00" * HASH_LENGTH

# A digest is a plain 32-byte `bytes` value.
Digest = bytes


def sha256(data: bytes) -> Digest:
    """Return the SHA2-256 hash of `data`."""
    return hashlib.sha256(data).digest()


def ensure_digest(value: bytes) -> Digest:
    """
    Check that `value` is a 32-byte digest and return it as `bytes`.

    Raises:
        IncorrectHashLength: If the value is not exactly 32 bytes long
    """
    if not isinstance(value, (bytes, bytearray)):
        raise MalformedProof(f"Expected bytes for a hash, got {type(value).__name__}")
    if len(value) != HASH_LENGTH:
        raise IncorrectHashLength(
            f"incorrect hash length: expected {HASH_LENGTH} bytes, got {len(value)}"
        )
    return bytes(value)


def hash_internal(left: Optional[Digest], right: Optional[Digest]) -> Digest:
    """
    Hash an internal node from its two optional child hashes.

    Args:
        left: Hash of the left child, or None if there is no left child
        right: Hash of the right child, or None if there is no right child

    Returns:
        32-byte node hash
    """
    hasher = hashlib.sha256()
    hasher.update(HASH_PREFIX_INTERNAL_NODE)
    hasher.update(left if left is not None else ZERO_HASH)
    hasher.update(right if right is not None else ZERO_HASH)
    return hasher.digest()


def hash_leaf(key_hash: Digest, value_hash: Digest) -> Digest:
    """
    Hash a leaf node from the hashes of its key and value.

    Args:
        key_hash: SHA-256 of the raw key
        value_hash: SHA-256 of the raw value

    Returns:
        32-byte node hash
    """
    hasher = hashlib.sha256()
    hasher.update(HASH_PREFIX_LEAF_NODE)
    hasher.update(key_hash)
    hasher.update(value_hash)
    return hasher.digest()


def digest_to_base64(digest: Digest) -> str:
    """Encode a digest in standard base64, the textual form used in JSON."""
    return base64.b64encode(digest).decode("ascii")


def digest_from_base64(text: str) -> Digest:
    """
    Decode a standard base64 string into a 32-byte digest.

    Raises:
        MalformedProof: If the text is not valid base64
        IncorrectHashLength: If the decoded value is not 32 bytes
    """
    if not isinstance(text, str):
        raise MalformedProof(f"Expected a base64 string, got {type(text).__name__}")
    # Line breaks are rejected; Grug nodes emit single-line base64.
    try:
        decoded = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedProof(f"Invalid base64 hash {text!r}: {e}")
    return ensure_digest(decoded)
