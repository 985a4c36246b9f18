"""
Key Derivation Configuration

Explicit configuration for the key derivation service. Every value the
service used to carry as implicit instance state (most importantly the
768-bit PBKDF2 output length) is passed in through this object instead.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

from ..crypto.errors import InvalidParameter
from ..crypto.primitives import SUPPORTED_BACKENDS, SUPPORTED_PBKDF2_HASHES

logger = logging.getLogger(__name__)

# Output length of generate_symmetric_key_pair, split into three 256-bit keys
DEFAULT_PBKDF2_LENGTH = 768

# Item keys are split in half into two 256-bit keys
DEFAULT_ITEM_KEY_BITS = 512
DEFAULT_ITEM_KEY_COST = 1


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class KeyDerivationConfig:
    """
    Configuration for key derivation operations.

    Attributes:
        pbkdf2_length_bits: PBKDF2 output length used for passphrase key sets
        pbkdf2_hash: PBKDF2 pseudorandom function ("sha256" or "sha512")
        item_key_bits: Length of generated item encryption keys. Items are
            encrypted with 512-bit keys split into two 256-bit halves; other
            lengths exist for tests and must be a multiple of 16 so the
            halves split evenly
        item_key_cost: PBKDF2 cost used for item encryption keys
        backend: Primitives backend preference ("auto", "openssl", "hashlib")
    """
    pbkdf2_length_bits: int = DEFAULT_PBKDF2_LENGTH
    pbkdf2_hash: str = "sha512"
    item_key_bits: int = DEFAULT_ITEM_KEY_BITS
    item_key_cost: int = DEFAULT_ITEM_KEY_COST
    backend: str = "auto"

    def __post_init__(self):
        self.validate()

    @classmethod
    def default(cls) -> 'KeyDerivationConfig':
        """Get default configuration."""
        return cls()

    def validate(self) -> None:
        """
        Check every field against its allowed range.

        Raises:
            InvalidParameter: If any field is out of range
        """
        for name in ("pbkdf2_length_bits", "item_key_bits"):
            value = getattr(self, name)
            if not _is_positive_int(value) or value % 8:
                raise InvalidParameter(
                    f"{name} must be a positive multiple of 8, got {value!r}"
                )
        if self.item_key_bits % 16:
            raise InvalidParameter(
                f"item_key_bits must be a multiple of 16 to split into halves, "
                f"got {self.item_key_bits!r}"
            )
        if not _is_positive_int(self.item_key_cost):
            raise InvalidParameter(
                f"item_key_cost must be at least 1, got {self.item_key_cost!r}"
            )
        if self.pbkdf2_hash not in SUPPORTED_PBKDF2_HASHES:
            raise InvalidParameter(f"Unsupported PBKDF2 hash: {self.pbkdf2_hash!r}")
        if self.backend not in SUPPORTED_BACKENDS:
            raise InvalidParameter(f"Unknown primitives backend: {self.backend!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KeyDerivationConfig':
        """
        Create configuration from a dictionary.

        Missing keys take their defaults; unknown keys are rejected so a
        misspelled option never silently changes derived keys.

        Raises:
            InvalidParameter: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameter(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'KeyDerivationConfig':
        """
        Load configuration from a JSON file.

        Raises:
            InvalidParameter: If the file is not a JSON object or holds
                invalid values
            OSError: If the file cannot be read
        """
        path = Path(path)
        with path.open('r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidParameter(f"Configuration file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidParameter(f"Configuration file {path} must hold a JSON object")

        config = cls.from_dict(data)
        logger.debug(f"Loaded key derivation configuration from {path}")
        return config
