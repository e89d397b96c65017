"""
Bit Array Utilities

Bit-level access to byte buffers. The position of a key in the Grug Merkle
tree is the sequence of bits of its hash, read with `bit_at`.
"""


def bit_at(buffer: bytes, index: int) -> int:
    """
    Return the bit at position `index` of `buffer`.

    Bit i lives in byte i // 8, at offset i % 8 counted from the least
    significant bit of that byte.

    Args:
        buffer: Bytes to read from
        index: Bit position, 0 <= index < 8 * len(buffer)

    Returns:
        0 or 1

    Raises:
        IndexError: If index is outside the buffer

    Examples:
        >>> bit_at(b"\\x01", 0)
        1
        >>> bit_at(b"\\x01", 7)
        0
    """
    if index < 0 or index >= len(buffer) * 8:
        raise IndexError(f"Bit index {index} out of range for {len(buffer)} bytes")

    quotient, remainder = divmod(index, 8)
    return (buffer[quotient] >> remainder) & 1


def common_prefix_length(a: bytes, b: bytes) -> int:
    """Number of leading bits `a` and `b` share, walking from bit 0."""
    limit = min(len(a), len(b)) * 8
    for i in range(limit):
        if bit_at(a, i) != bit_at(b, i):
            return i
    return limit
