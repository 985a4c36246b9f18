"""
SNCrypto Error Taxonomy.

Every failure raised by the key derivation layer is an ``SNCryptoError``.
Errors always propagate to the caller; nothing in this package retries or
substitutes weaker cryptography when a primitive fails.

Error Code Categories:
    - 1xxx: Invalid caller parameters
    - 2xxx: Encoding / decoding errors
    - 3xxx: Hash and key derivation primitive failures
    - 4xxx: Secure random source failures

Example:
    >>> try:
    ...     service.generate_random_key(12)
    ... except InvalidParameter as e:
    ...     print(e.code)
    1001
"""

from typing import Any, Dict, Optional


class SNCryptoError(Exception):
    """
    Base exception for key derivation errors.

    Attributes:
        message: Human-readable description of the error
        code: Numeric code identifying the error category
        details: Extra diagnostic values (never key material)
    """

    default_code: Optional[int] = None

    def __init__(self, message: str, code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        base = self.message
        if self.code:
            base += f" (Code: {self.code})"
        return base


class InvalidParameter(SNCryptoError, ValueError):
    """Malformed caller input such as a bit length that is not a multiple of 8."""

    default_code = 1001


class DecodeError(SNCryptoError, ValueError):
    """Malformed hex, base64 or UTF-8 input on decode."""

    default_code = 2001


class PrimitiveFailure(SNCryptoError):
    """The hash or KDF backend rejected its input or failed to compute."""

    default_code = 3001


class EntropyUnavailable(SNCryptoError):
    """
    The secure random source is exhausted or unavailable.

    Fatal for key generation. Callers must not fall back to a
    non-cryptographic generator.
    """

    default_code = 4001
