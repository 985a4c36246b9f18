# SNCrypto Keys Module
# Key derivation layer of the note encryption system
#
# This package provides the main interfaces for:
# - Random and item encryption key generation (derivation)
# - Deterministic passphrase key sets (derivation)
# - Derivation configuration (config)

from .config import KeyDerivationConfig, DEFAULT_PBKDF2_LENGTH
from .derivation import (
    AsyncKeyDerivationService,
    DerivationParameters,
    DerivedKeySet,
    KeyDerivationService,
    split_key_in_thirds,
)

__all__ = [
    # Service
    'KeyDerivationService',
    'AsyncKeyDerivationService',
    # Data types
    'DerivationParameters',
    'DerivedKeySet',
    'split_key_in_thirds',
    # Configuration
    'KeyDerivationConfig',
    'DEFAULT_PBKDF2_LENGTH',
]
