#!/usr/bin/env python3
"""
SNCrypto Key Derivation Module

This module turns a user's passphrase and account parameters into the keys
the encryption pipeline runs on, and generates the random per-item keys
used to encrypt individual notes.

Key Derivation Features:
- Random key generation from the secure random source
- Item encryption keys (512 bits, split into two 256-bit halves)
- Deterministic passphrase key sets (768 bits, split into three keys)
- Constant-time comparison of secrets
- Canonical hex / base64 encodings

Compatibility Considerations:
- Key sets are contiguous thirds of one PBKDF2 output, in the fixed order
  (encryption key, authentication key, verifier). Reordering them, or
  changing how the remainder of an uneven split is dropped, changes every
  user's keys.
- The same passphrase, salt and cost always reproduce the same key set,
  independent of which primitives backend is active.

Module Structure:
- DerivationParameters: Validated passphrase, salt and cost
- DerivedKeySet: The three keys produced from one derivation
- KeyDerivationService: Blocking interface for all operations
- AsyncKeyDerivationService: Coroutine interface for event-loop callers

Example Usage:
    >>> from sncrypto.keys import KeyDerivationService
    >>> service = KeyDerivationService()
    >>> keys = service.generate_symmetric_key_pair("correct horse", "a1b2c3d4", 5000)
    >>> len(keys.encryption_key)
    64

Author: SNCrypto Development Team
Version: 1.0.0
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from ..crypto import encoding
from ..crypto.compare import timing_safe_equal
from ..crypto.errors import InvalidParameter
from ..crypto.primitives import ICryptoPrimitives, get_primitives
from .config import KeyDerivationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivationParameters:
    """
    Inputs of a passphrase derivation.

    Attributes:
        password: The user's passphrase
        salt: Per-user salt
        iterations: PBKDF2 cost factor (>= 1)

    Both strings are treated as opaque text and UTF-8 encoded before
    hashing.
    """
    password: str
    salt: str
    iterations: int

    def validate(self) -> None:
        """
        Raises:
            InvalidParameter: If any field is empty or out of range
        """
        if not isinstance(self.password, str) or not self.password:
            raise InvalidParameter("Password must be a non-empty string")
        if not isinstance(self.salt, str) or not self.salt:
            raise InvalidParameter("Salt must be a non-empty string")
        if (isinstance(self.iterations, bool) or not isinstance(self.iterations, int)
                or self.iterations < 1):
            raise InvalidParameter(
                f"Iterations must be an integer of at least 1, got {self.iterations!r}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DerivationParameters':
        """
        Build parameters from account data.

        Accepts the account field names ``pw_salt`` / ``pw_cost`` as well
        as ``salt`` / ``iterations``.

        Raises:
            InvalidParameter: If a field is missing
        """
        try:
            password = data["password"]
            salt = data["pw_salt"] if "pw_salt" in data else data["salt"]
            iterations = data["pw_cost"] if "pw_cost" in data else data["iterations"]
        except KeyError as e:
            raise InvalidParameter(f"Missing derivation parameter: {e.args[0]}") from e
        return cls(password=password, salt=salt, iterations=iterations)


class DerivedKeySet(NamedTuple):
    """
    Keys produced by one passphrase derivation.

    Unpacks as a 3-tuple. The field order is part of the account format.
    """
    encryption_key: str
    authentication_key: str
    verifier: str


def split_key_in_thirds(output: str) -> DerivedKeySet:
    """
    Partition derived key material into three contiguous thirds.

    Each part is ``len(output) // 3`` characters. Characters left over by
    the floor division are dropped, never appended to the last part.

    Args:
        output: Derived key material

    Returns:
        DerivedKeySet of three equal-length parts
    """
    split = len(output) // 3
    return DerivedKeySet(
        output[0:split],
        output[split:split * 2],
        output[split * 2:split * 3],
    )


def _check_even_length(key: str) -> int:
    """Return the midpoint of ``key``, rejecting odd-length input."""
    if len(key) % 2:
        raise InvalidParameter(
            "Key material must have even length to be split in half",
            details={"length": len(key)},
        )
    return len(key) // 2


class KeyDerivationService:
    """
    Derivation, splitting and comparison of symmetric keys.

    The service composes the primitives backend into the operations the
    encryption and session code calls. It holds no mutable state; one
    instance may be shared freely between threads.

    Attributes:
        config: The KeyDerivationConfig in effect
        primitives: The ICryptoPrimitives backend in use

    Usage:
        >>> service = KeyDerivationService()
        >>> item_key = service.generate_item_encryption_key()
        >>> encryption_key = service.first_half_of_key(item_key)
        >>> auth_key = service.second_half_of_key(item_key)

        >>> # Alternate output length, e.g. in tests
        >>> service = KeyDerivationService(
        ...     config=KeyDerivationConfig(pbkdf2_length_bits=384))
    """

    def __init__(self, primitives: Optional[ICryptoPrimitives] = None,
                 config: Optional[KeyDerivationConfig] = None):
        """
        Args:
            primitives: Backend to use. Defaults to the process-wide backend
                selected for ``config.backend``.
            config: Derivation configuration. Defaults to
                ``KeyDerivationConfig.default()``.
        """
        self._config = config if config is not None else KeyDerivationConfig.default()
        if primitives is None:
            primitives = get_primitives(self._config.backend, self._config.pbkdf2_hash)
        self._primitives = primitives

    @property
    def config(self) -> KeyDerivationConfig:
        return self._config

    @property
    def primitives(self) -> ICryptoPrimitives:
        return self._primitives

    @property
    def default_pbkdf2_length(self) -> int:
        """PBKDF2 output length in bits used for passphrase key sets."""
        return self._config.pbkdf2_length_bits

    # ------------------------------------------------------------------
    # Key generation
    # ------------------------------------------------------------------

    def generate_random_key(self, bit_length: int) -> str:
        """
        Generate a random key.

        Args:
            bit_length: Key size in bits, a positive multiple of 8

        Returns:
            Lowercase hex string of ``bit_length // 4`` characters

        Raises:
            InvalidParameter: If ``bit_length`` is not a positive multiple of 8
            EntropyUnavailable: If the secure random source fails
        """
        if (isinstance(bit_length, bool) or not isinstance(bit_length, int)
                or bit_length <= 0 or bit_length % 8):
            raise InvalidParameter(
                f"Bit length must be a positive multiple of 8, got {bit_length!r}"
            )
        return encoding.bytes_to_hex(self._primitives.secure_random_bytes(bit_length // 8))

    def generate_item_encryption_key(self) -> str:
        """
        Generate a key for encrypting a single item.

        A random salt and a random passphrase of the item key size are run
        through PBKDF2 at cost 1. The cost is low on purpose: the inputs are
        already random, so PBKDF2 only shapes them into the same fixed-format
        output the passphrase pathway produces.

        Returns:
            Hex key of ``config.item_key_bits // 4`` characters (128 by
            default), meant to be split with first_half_of_key and
            second_half_of_key

        Raises:
            EntropyUnavailable: If the secure random source fails
            PrimitiveFailure: If PBKDF2 fails
        """
        length = self._config.item_key_bits
        cost = self._config.item_key_cost
        salt = self.generate_random_key(length)
        passphrase = self.generate_random_key(length)
        return self._primitives.pbkdf2(passphrase, salt, cost, length)

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------

    def first_half_of_key(self, key: str) -> str:
        """
        Return the first half of an even-length key.

        Raises:
            InvalidParameter: If the key has odd length
        """
        return key[:_check_even_length(key)]

    def second_half_of_key(self, key: str) -> str:
        """
        Return the second half of an even-length key.

        Raises:
            InvalidParameter: If the key has odd length
        """
        return key[_check_even_length(key):]

    def split_key_in_half(self, key: str) -> Tuple[str, str]:
        """Return ``(first_half_of_key(key), second_half_of_key(key))``."""
        mid = _check_even_length(key)
        return key[:mid], key[mid:]

    # ------------------------------------------------------------------
    # Passphrase derivation
    # ------------------------------------------------------------------

    def generate_symmetric_key_pair(self, password: str, salt: str, cost: int) -> DerivedKeySet:
        """
        Derive the account key set from a passphrase.

        One PBKDF2 output of ``config.pbkdf2_length_bits`` bits is split into
        three contiguous thirds. Deterministic: the same arguments always
        return the same keys.

        Args:
            password: The user's passphrase
            salt: The account's salt
            cost: The account's PBKDF2 cost

        Returns:
            DerivedKeySet(encryption_key, authentication_key, verifier)

        Raises:
            InvalidParameter: If password or salt is empty or cost < 1
            PrimitiveFailure: If PBKDF2 fails
        """
        return self.derive_key_set(DerivationParameters(password, salt, cost))

    def derive_key_set(self, params: DerivationParameters) -> DerivedKeySet:
        """Same as :meth:`generate_symmetric_key_pair` for prepared parameters."""
        params.validate()
        length = self._config.pbkdf2_length_bits
        logger.debug(
            f"Deriving {length}-bit key set with {params.iterations} iterations "
            f"({self._primitives.name} backend)"
        )
        output = self._primitives.pbkdf2(params.password, params.salt, params.iterations, length)
        return split_key_in_thirds(output)

    # ------------------------------------------------------------------
    # Comparison and encodings
    # ------------------------------------------------------------------

    @staticmethod
    def timing_safe_equal(a: Any, b: Any) -> bool:
        """Constant-time equality; see :func:`sncrypto.crypto.compare.timing_safe_equal`."""
        return timing_safe_equal(a, b)

    def base64(self, text: str) -> str:
        return encoding.base64_encode(text)

    def base64_decode(self, b64_string: str) -> str:
        return encoding.base64_decode(b64_string)

    def base64_to_array_buffer(self, b64_string: str) -> bytes:
        return encoding.base64_to_bytes(b64_string)

    def array_buffer_to_base64(self, data: Union[bytes, bytearray]) -> str:
        return encoding.bytes_to_base64(data)

    def hex_string_to_array_buffer(self, hex_string: str) -> bytes:
        return encoding.hex_to_bytes(hex_string)

    def array_buffer_to_hex_string(self, data: Union[bytes, bytearray]) -> str:
        return encoding.bytes_to_hex(data)

    def sha256(self, text: str) -> str:
        return self._primitives.sha256(text)

    def hmac256(self, message: str, hex_key: str) -> str:
        return self._primitives.hmac256(message, hex_key)


class AsyncKeyDerivationService:
    """
    Coroutine interface to :class:`KeyDerivationService`.

    PBKDF2 and entropy reads run in a worker thread via
    ``asyncio.to_thread`` so they do not block the event loop. String
    operations run inline.

    Example:
        >>> service = AsyncKeyDerivationService()
        >>> keys = await service.generate_symmetric_key_pair("pw", "salt", 5000)
    """

    def __init__(self, service: Optional[KeyDerivationService] = None,
                 primitives: Optional[ICryptoPrimitives] = None,
                 config: Optional[KeyDerivationConfig] = None):
        if service is None:
            service = KeyDerivationService(primitives=primitives, config=config)
        self._service = service

    @property
    def service(self) -> KeyDerivationService:
        return self._service

    async def generate_random_key(self, bit_length: int) -> str:
        return await asyncio.to_thread(self._service.generate_random_key, bit_length)

    async def generate_item_encryption_key(self) -> str:
        return await asyncio.to_thread(self._service.generate_item_encryption_key)

    async def first_half_of_key(self, key: str) -> str:
        return self._service.first_half_of_key(key)

    async def second_half_of_key(self, key: str) -> str:
        return self._service.second_half_of_key(key)

    async def generate_symmetric_key_pair(self, password: str, salt: str,
                                          cost: int) -> DerivedKeySet:
        return await asyncio.to_thread(
            self._service.generate_symmetric_key_pair, password, salt, cost
        )

    async def timing_safe_equal(self, a: Any, b: Any) -> bool:
        return timing_safe_equal(a, b)

    async def base64(self, text: str) -> str:
        return self._service.base64(text)

    async def base64_decode(self, b64_string: str) -> str:
        return self._service.base64_decode(b64_string)

    async def base64_to_array_buffer(self, b64_string: str) -> bytes:
        return self._service.base64_to_array_buffer(b64_string)

    async def array_buffer_to_base64(self, data: Union[bytes, bytearray]) -> str:
        return self._service.array_buffer_to_base64(data)

    async def hex_string_to_array_buffer(self, hex_string: str) -> bytes:
        return self._service.hex_string_to_array_buffer(hex_string)

    async def array_buffer_to_hex_string(self, data: Union[bytes, bytearray]) -> str:
        return self._service.array_buffer_to_hex_string(data)

    async def sha256(self, text: str) -> str:
        return self._service.sha256(text)

    async def hmac256(self, message: str, hex_key: str) -> str:
        return self._service.hmac256(message, hex_key)
