#!/usr/bin/env python3
"""
SNCrypto Primitive Backends

This module defines the narrow primitive interface the key derivation layer
is written against, and the two concrete backends that implement it.

Architecture:
    KeyDerivationService (derivation, splitting, comparison)
            |
            v
    ICryptoPrimitives (pbkdf2, sha256, hmac256, secure random bytes)
            |
            +--> OpenSSLPrimitives  (platform crypto via the cryptography library)
            +--> HashlibPrimitives  (Python's hashlib / hmac / secrets)

Backend Selection:
    The backend is chosen once per process by capability detection. The
    OpenSSL backend runs a self test when it is constructed; if the platform
    library cannot be used the selector falls back to the hashlib backend and
    logs a warning. Both backends produce bit-identical output, so keys
    derived under one can always be reproduced under the other.

Conventions:
    - Text inputs (passwords, salts, messages) are UTF-8 encoded; text
      with lone surrogates raises InvalidParameter
    - Digests and derived keys are returned as lowercase hex strings
    - HMAC keys are given as hex strings
    - Output lengths are requested in bits and must be whole bytes

Author: SNCrypto Development Team
Version: 1.0.0
"""

# ============================================================================
# Import Statements
# ============================================================================

import hashlib
import hmac
import logging
import os
import secrets
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .encoding import bytes_to_hex, hex_to_bytes
from .errors import EntropyUnavailable, InvalidParameter, PrimitiveFailure

logger = logging.getLogger(__name__)


# PBKDF2 pseudorandom functions understood by both backends
SUPPORTED_PBKDF2_HASHES = ("sha256", "sha512")

# Backend names accepted by get_primitives()
BACKEND_AUTO = "auto"
BACKEND_OPENSSL = "openssl"
BACKEND_HASHLIB = "hashlib"
SUPPORTED_BACKENDS = (BACKEND_AUTO, BACKEND_OPENSSL, BACKEND_HASHLIB)

# SHA-256("abc") from FIPS 180-2, used by the OpenSSL self test
_SHA256_ABC = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def _check_pbkdf2_request(iterations: int, output_bits: int) -> int:
    """Validate a PBKDF2 request and return the output length in bytes."""
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 1:
        raise PrimitiveFailure(
            f"PBKDF2 iteration count must be a positive integer, got {iterations!r}",
            details={"iterations": iterations},
        )
    if (isinstance(output_bits, bool) or not isinstance(output_bits, int)
            or output_bits <= 0 or output_bits % 8):
        raise PrimitiveFailure(
            f"PBKDF2 output length must be a positive multiple of 8 bits, got {output_bits!r}",
            details={"output_bits": output_bits},
        )
    return output_bits // 8


def _encode_text(text: str) -> bytes:
    """UTF-8 encode caller text, rejecting strings that have no UTF-8 form."""
    if not isinstance(text, str):
        raise InvalidParameter(f"Expected text, got {type(text).__name__}")
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidParameter(f"Text is not encodable as UTF-8: {e.reason}") from e


def _read_entropy(n: int, source: Callable[[int], bytes]) -> bytes:
    """Read ``n`` bytes from a CSPRNG, surfacing failure as EntropyUnavailable."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidParameter(f"Random byte count must be a non-negative integer, got {n!r}")
    try:
        return source(n)
    except (OSError, NotImplementedError) as e:
        logger.error(f"Secure random source unavailable: {e}")
        raise EntropyUnavailable(f"Secure random source unavailable: {e}") from e


# ============================================================================
# Primitive Interface - Abstract Base Class
# ============================================================================


class ICryptoPrimitives(ABC):
    """
    Abstract interface for the primitives consumed by key derivation.

    Implementations own no derivation logic. They must be safe to call
    concurrently from multiple threads; neither shipped backend keeps
    mutable state after construction.

    Example:
        primitives: ICryptoPrimitives = get_primitives()
        digest = primitives.sha256("hello")
    """

    def __init__(self, pbkdf2_hash: str = "sha512"):
        """
        Args:
            pbkdf2_hash: Hash used as the PBKDF2 pseudorandom function
                ("sha256" or "sha512")

        Raises:
            InvalidParameter: If the hash name is not supported
        """
        if pbkdf2_hash not in SUPPORTED_PBKDF2_HASHES:
            raise InvalidParameter(
                f"Unsupported PBKDF2 hash: {pbkdf2_hash}. "
                f"Must be one of {', '.join(SUPPORTED_PBKDF2_HASHES)}"
            )
        self._pbkdf2_hash = pbkdf2_hash

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier of the backend variant."""

    @property
    def pbkdf2_hash(self) -> str:
        """Name of the hash used as the PBKDF2 pseudorandom function."""
        return self._pbkdf2_hash

    @abstractmethod
    def pbkdf2(self, password: str, salt: str, iterations: int, output_bits: int) -> str:
        """
        Derive key material with PBKDF2-HMAC.

        Args:
            password: Passphrase text
            salt: Salt text
            iterations: Cost factor (>= 1)
            output_bits: Output length in bits, a positive multiple of 8

        Returns:
            Lowercase hex string of ``output_bits // 4`` characters

        Raises:
            PrimitiveFailure: If the request cannot be satisfied
        """

    @abstractmethod
    def sha256(self, text: str) -> str:
        """Return the lowercase hex SHA-256 digest of UTF-8 encoded text."""

    @abstractmethod
    def hmac256(self, message: str, hex_key: str) -> str:
        """
        Compute HMAC-SHA-256 of a UTF-8 message under a hex encoded key.

        Raises:
            DecodeError: If ``hex_key`` is not valid hex
        """

    @abstractmethod
    def secure_random_bytes(self, n: int) -> bytes:
        """
        Return ``n`` cryptographically secure random bytes.

        Raises:
            EntropyUnavailable: If the secure random source cannot be read
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pbkdf2_hash={self._pbkdf2_hash!r})"


# ============================================================================
# OpenSSL Backend Implementation
# ============================================================================


class OpenSSLPrimitives(ICryptoPrimitives):
    """
    Primitive backend on the platform crypto library.

    Uses the ``cryptography`` package, which binds OpenSSL, for PBKDF2,
    SHA-256 and HMAC, and the operating system CSPRNG for randomness.

    Raises:
        RuntimeError: From the constructor if the platform library fails
            its self test (missing algorithms, FIPS restrictions, broken
            build). The selector treats this as "capability not present".
    """

    _HASHES = {
        "sha256": hashes.SHA256,
        "sha512": hashes.SHA512,
    }

    def __init__(self, pbkdf2_hash: str = "sha512"):
        super().__init__(pbkdf2_hash)
        self._self_test()

    @property
    def name(self) -> str:
        return BACKEND_OPENSSL

    def _self_test(self) -> None:
        """Check the platform library against reference values."""
        try:
            digest = self.sha256("abc")
            derived = self.pbkdf2("password", "salt", 2, 512)
        except (PrimitiveFailure, UnsupportedAlgorithm) as e:
            raise RuntimeError(f"OpenSSL primitives unusable: {e}") from e

        reference = hashlib.pbkdf2_hmac(self._pbkdf2_hash, b"password", b"salt", 2, 64).hex()
        if digest != _SHA256_ABC or derived != reference:
            raise RuntimeError("OpenSSL primitives failed known-answer self test")

    def pbkdf2(self, password: str, salt: str, iterations: int, output_bits: int) -> str:
        length = _check_pbkdf2_request(iterations, output_bits)
        password_bytes = _encode_text(password)
        salt_bytes = _encode_text(salt)
        try:
            kdf = PBKDF2HMAC(
                algorithm=self._HASHES[self._pbkdf2_hash](),
                length=length,
                salt=salt_bytes,
                iterations=iterations,
            )
            return bytes_to_hex(kdf.derive(password_bytes))
        except (ValueError, OverflowError, UnsupportedAlgorithm) as e:
            raise PrimitiveFailure(
                f"PBKDF2 derivation failed: {e}",
                details={"backend": self.name, "output_bits": output_bits},
            ) from e

    def sha256(self, text: str) -> str:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(_encode_text(text))
        return bytes_to_hex(digest.finalize())

    def hmac256(self, message: str, hex_key: str) -> str:
        key = hex_to_bytes(hex_key)
        data = _encode_text(message)
        try:
            mac = crypto_hmac.HMAC(key, hashes.SHA256())
            mac.update(data)
            return bytes_to_hex(mac.finalize())
        except (ValueError, UnsupportedAlgorithm) as e:
            raise PrimitiveFailure(f"HMAC-SHA-256 failed: {e}") from e

    def secure_random_bytes(self, n: int) -> bytes:
        return _read_entropy(n, os.urandom)


# ============================================================================
# Hashlib Backend Implementation
# ============================================================================


class HashlibPrimitives(ICryptoPrimitives):
    """
    Primitive backend on Python's own hashlib, hmac and secrets modules.

    Used when the platform library is unavailable or fails its self test.
    Output is identical to :class:`OpenSSLPrimitives`.
    """

    @property
    def name(self) -> str:
        return BACKEND_HASHLIB

    def pbkdf2(self, password: str, salt: str, iterations: int, output_bits: int) -> str:
        length = _check_pbkdf2_request(iterations, output_bits)
        password_bytes = _encode_text(password)
        salt_bytes = _encode_text(salt)
        try:
            derived = hashlib.pbkdf2_hmac(
                self._pbkdf2_hash,
                password_bytes,
                salt_bytes,
                iterations,
                length,
            )
        except (ValueError, OverflowError) as e:
            raise PrimitiveFailure(
                f"PBKDF2 derivation failed: {e}",
                details={"backend": self.name, "output_bits": output_bits},
            ) from e
        return bytes_to_hex(derived)

    def sha256(self, text: str) -> str:
        return hashlib.sha256(_encode_text(text)).hexdigest()

    def hmac256(self, message: str, hex_key: str) -> str:
        key = hex_to_bytes(hex_key)
        return hmac.new(key, _encode_text(message), hashlib.sha256).hexdigest()

    def secure_random_bytes(self, n: int) -> bytes:
        return _read_entropy(n, secrets.token_bytes)


# ============================================================================
# Backend Selection
# ============================================================================

_cache: Dict[Tuple[str, str], ICryptoPrimitives] = {}
_lock = threading.Lock()


def _create_primitives(preference: str, pbkdf2_hash: str) -> ICryptoPrimitives:
    """
    Create the backend for a preference.

    ``auto`` tries the OpenSSL backend first and falls back to hashlib if
    its self test fails. A forced ``openssl`` preference propagates the
    failure instead.
    """
    if preference == BACKEND_HASHLIB:
        return HashlibPrimitives(pbkdf2_hash)

    try:
        return OpenSSLPrimitives(pbkdf2_hash)
    except RuntimeError as e:
        if preference == BACKEND_OPENSSL:
            logger.error(f"OpenSSL primitives requested but unavailable: {e}")
            raise PrimitiveFailure(f"OpenSSL primitives unavailable: {e}") from e
        logger.warning(f"OpenSSL primitives not available, using hashlib backend: {e}")
        return HashlibPrimitives(pbkdf2_hash)


def get_primitives(preference: str = BACKEND_AUTO,
                   pbkdf2_hash: str = "sha512") -> ICryptoPrimitives:
    """
    Return the process-wide primitives backend for a preference.

    The backend is selected once per ``(preference, pbkdf2_hash)`` pair and
    cached; subsequent calls return the same instance.

    Args:
        preference: "auto", "openssl" or "hashlib"
        pbkdf2_hash: PBKDF2 pseudorandom function ("sha256" or "sha512")

    Returns:
        ICryptoPrimitives: The selected backend

    Raises:
        InvalidParameter: If the preference or hash name is unknown
        PrimitiveFailure: If "openssl" is forced and unavailable

    Example:
        >>> get_primitives().name
        'openssl'
    """
    if preference not in SUPPORTED_BACKENDS:
        raise InvalidParameter(
            f"Unknown primitives backend: {preference}. "
            f"Must be one of {', '.join(SUPPORTED_BACKENDS)}"
        )
    if pbkdf2_hash not in SUPPORTED_PBKDF2_HASHES:
        raise InvalidParameter(f"Unsupported PBKDF2 hash: {pbkdf2_hash}")

    key = (preference, pbkdf2_hash)
    primitives = _cache.get(key)
    if primitives is None:
        with _lock:
            primitives = _cache.get(key)
            if primitives is None:
                primitives = _create_primitives(preference, pbkdf2_hash)
                _cache[key] = primitives
                logger.info(
                    f"Crypto primitives initialized with {primitives.name} backend "
                    f"(pbkdf2-{pbkdf2_hash}, preference={preference})"
                )
    return primitives


def reset_primitives() -> None:
    """Forget cached backends so the next call re-runs selection."""
    with _lock:
        _cache.clear()


def available_backends() -> Dict[str, bool]:
    """
    Report which concrete backends can be constructed on this platform.

    Returns:
        Mapping of backend name to availability
    """
    status = {BACKEND_HASHLIB: True}
    try:
        OpenSSLPrimitives()
        status[BACKEND_OPENSSL] = True
    except RuntimeError:
        status[BACKEND_OPENSSL] = False
    return status
