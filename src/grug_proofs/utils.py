"""
Byte String Helpers

Conversions between the textual forms of byte strings accepted on the
command line (hex, base64, plain text) and `bytes`.
"""

import base64
import binascii

from .merkle.hashing import HASH_LENGTH


def normalize_hex(hex_str: str) -> str:
    """
    Normalize a hex string to ensure proper formatting.

    Raises:
        ValueError: If the hex string contains invalid characters

    Examples:
        >>> normalize_hex("0x123")
        "0x0123"
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        return hex_str

    hex_part = hex_str[2:]
    if not all(c in "0123456789abcdefABCDEF" for c in hex_part):
        raise ValueError(f"Invalid hex string: {hex_str}")

    # Pad to even length
    if len(hex_part) % 2 == 1:
        hex_part = "0" + hex_part
    return "0x" + hex_part


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert a hex string (with or without '0x' prefix) to bytes.

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x12\\x34'
    """
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str


def parse_bytes_arg(text: str) -> bytes:
    """
    Parse a command line byte string.

    - "0x..." is hex
    - "b64:..." is standard base64
    - anything else is UTF-8 text

    Raises:
        ValueError: If a hex or base64 string is invalid

    Examples:
        >>> parse_bytes_arg("0x6869")
        b'hi'
        >>> parse_bytes_arg("b64:aGk=")
        b'hi'
        >>> parse_bytes_arg("hi")
        b'hi'
    """
    if text.startswith("0x"):
        return hex_to_bytes(normalize_hex(text))
    if text.startswith("b64:"):
        try:
            return base64.b64decode(text[4:], validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 string {text!r}: {e}")
    return text.encode("utf-8")


def parse_hash_arg(text: str) -> bytes:
    """
    Parse a 32-byte hash given as "0x" hex or as standard base64.

    Raises:
        ValueError: If the text doesn't decode to exactly 32 bytes
    """
    if text.startswith("0x"):
        value = hex_to_bytes(normalize_hex(text))
    else:
        try:
            value = base64.b64decode(text[4:] if text.startswith("b64:") else text, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 hash {text!r}: {e}")
    if len(value) != HASH_LENGTH:
        raise ValueError(f"Expected a {HASH_LENGTH}-byte hash, got {len(value)} bytes")
    return value
