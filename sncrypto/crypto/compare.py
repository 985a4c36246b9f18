"""
Constant-time comparison of secrets.

Used wherever derived key material, verifiers or MACs are compared, so
that the time taken does not reveal the position of the first difference.
"""

from typing import Any


def _as_bytes(value: Any) -> bytes:
    """
    Coerce an operand to bytes; text is compared by its UTF-8 encoding.

    Lone surrogates are passed through so every str is comparable.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        value = str(value)
    return value.encode("utf-8", "surrogatepass")


def timing_safe_equal(a: Any, b: Any) -> bool:
    """
    Compare two secrets in time independent of where they differ.

    How This Implementation Works:
    1. If the lengths differ, the first operand is compared against itself
       so the loop still runs over ``len(a)`` elements, and the result is
       forced to "not equal".
    2. Otherwise every position is XORed and OR-accumulated.
    3. The accumulator is checked against zero only after the loop.

    The length check itself is a branch, so the length of the operands is
    not hidden. Only the position of a mismatch is.

    Args:
        a: First operand (str, bytes, or anything with a str() form)
        b: Second operand

    Returns:
        True if the operands are equal, False otherwise

    Example:
        >>> timing_safe_equal("abc", "abc")
        True
        >>> timing_safe_equal("abc", "abd")
        False
        >>> timing_safe_equal("abc", "abcd")
        False
    """
    left = _as_bytes(a)
    right = _as_bytes(b)
    result = 0

    if len(left) != len(right):
        right = left
        result = 1

    for x, y in zip(left, right):
        result |= x ^ y

    return result == 0
