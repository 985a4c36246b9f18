"""
SNCrypto Package

Key derivation layer for an end-to-end encrypted note-taking system:
derives, splits and compares the symmetric keys the encryption pipeline
runs on.

Subpackages:
    crypto: Primitive backends, encodings, constant-time comparison, errors
    keys: Key derivation service and its configuration

Version: 1.0.0
"""

from . import crypto
from . import keys
from .crypto import (
    DecodeError,
    EntropyUnavailable,
    InvalidParameter,
    PrimitiveFailure,
    SNCryptoError,
    timing_safe_equal,
)
from .keys import (
    AsyncKeyDerivationService,
    DerivationParameters,
    DerivedKeySet,
    KeyDerivationConfig,
    KeyDerivationService,
)

__all__ = [
    'crypto',
    'keys',
    'KeyDerivationService',
    'AsyncKeyDerivationService',
    'KeyDerivationConfig',
    'DerivationParameters',
    'DerivedKeySet',
    'timing_safe_equal',
    'SNCryptoError',
    'InvalidParameter',
    'DecodeError',
    'PrimitiveFailure',
    'EntropyUnavailable',
]

__version__ = "1.0.0"
