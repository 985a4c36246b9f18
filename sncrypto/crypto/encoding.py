"""
Canonical text encodings for key material.

Key material travels through the rest of the encryption pipeline as text:
lowercase hexadecimal for derived keys and standard base64 for payloads.
These helpers are stateless and total over their input alphabet. Decoders
never truncate or substitute data; malformed input raises ``DecodeError``.

Conventions:
    - Hex input is case-insensitive, hex output is always lowercase
    - Text is UTF-8 encoded before base64 encoding and after decoding
    - Base64 decoding is strict (no silently discarded characters)
"""

import base64
import binascii
from typing import Union

from .errors import DecodeError

ByteLike = Union[bytes, bytearray, memoryview]


def bytes_to_hex(data: ByteLike) -> str:
    """
    Encode raw bytes as a lowercase hex string.

    Args:
        data: Bytes to encode

    Returns:
        Hex string of length ``2 * len(data)``

    Example:
        >>> bytes_to_hex(b"\\x00\\xff")
        '00ff'
    """
    return bytes(data).hex()


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Decode a hex string into raw bytes.

    Upper and lower case digits are both accepted.

    Args:
        hex_string: Even-length string over ``[0-9a-fA-F]``

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If the string has odd length or non-hex characters
    """
    if not isinstance(hex_string, str):
        raise DecodeError(f"Hex input must be a string, got {type(hex_string).__name__}")
    if len(hex_string) % 2:
        raise DecodeError("Hex string has odd length",
                          details={"length": len(hex_string)})
    # bytes.fromhex tolerates whitespace, which is outside the hex alphabet
    if any(c.isspace() for c in hex_string):
        raise DecodeError("Hex string contains whitespace")
    try:
        return bytes.fromhex(hex_string)
    except ValueError as e:
        raise DecodeError(f"Malformed hex string: {e}") from e


def bytes_to_base64(data: ByteLike) -> str:
    """Encode raw bytes as standard base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_to_bytes(b64_string: str) -> bytes:
    """
    Decode standard base64 text into raw bytes.

    Args:
        b64_string: Base64 text with padding

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If the input contains characters outside the base64
            alphabet or has invalid padding
    """
    try:
        return base64.b64decode(b64_string, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise DecodeError(f"Malformed base64 string: {e}") from e


def base64_encode(text: str) -> str:
    """
    Encode text as base64 over its UTF-8 bytes.

    Example:
        >>> base64_encode("héllo")
        'aMOpbGxv'
    """
    return bytes_to_base64(text.encode("utf-8"))


def base64_decode(b64_string: str) -> str:
    """
    Decode base64 text produced by :func:`base64_encode`.

    Raises:
        DecodeError: If the input is not valid base64 or the decoded bytes
            are not valid UTF-8
    """
    raw = base64_to_bytes(b64_string)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Decoded base64 payload is not UTF-8: {e}") from e
