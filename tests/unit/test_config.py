"""
Unit Tests for Key Derivation Configuration
"""

import dataclasses

import pytest

from sncrypto.crypto.errors import InvalidParameter
from sncrypto.keys.config import DEFAULT_PBKDF2_LENGTH, KeyDerivationConfig


class TestKeyDerivationConfig:
    """Test cases for KeyDerivationConfig."""

    def test_defaults(self):
        config = KeyDerivationConfig.default()
        assert config.pbkdf2_length_bits == DEFAULT_PBKDF2_LENGTH == 768
        assert config.pbkdf2_hash == "sha512"
        assert config.item_key_bits == 512
        assert config.item_key_cost == 1
        assert config.backend == "auto"

    def test_frozen(self):
        config = KeyDerivationConfig.default()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.pbkdf2_length_bits = 512

    @pytest.mark.parametrize("values", [
        {"pbkdf2_length_bits": 0},
        {"pbkdf2_length_bits": 770},
        {"item_key_bits": -512},
        {"item_key_bits": 8},
        {"item_key_bits": 520},
        {"item_key_cost": 0},
        {"item_key_cost": True},
        {"pbkdf2_hash": "md5"},
        {"backend": "rust"},
    ])
    def test_invalid_values(self, values):
        with pytest.raises(InvalidParameter):
            KeyDerivationConfig(**values)

    def test_dict_roundtrip(self):
        config = KeyDerivationConfig(pbkdf2_length_bits=384, backend="hashlib")
        assert KeyDerivationConfig.from_dict(config.to_dict()) == config

    def test_from_dict_partial(self):
        config = KeyDerivationConfig.from_dict({"pbkdf2_hash": "sha256"})
        assert config.pbkdf2_hash == "sha256"
        assert config.pbkdf2_length_bits == 768

    def test_from_dict_unknown_key(self):
        with pytest.raises(InvalidParameter):
            KeyDerivationConfig.from_dict({"pbkdf2_lenght_bits": 512})

    def test_load(self, config_file):
        path = config_file(pbkdf2_length_bits=1536, backend="hashlib")
        config = KeyDerivationConfig.load(path)
        assert config.pbkdf2_length_bits == 1536
        assert config.backend == "hashlib"

    def test_load_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InvalidParameter):
            KeyDerivationConfig.load(path)

    def test_load_not_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[768]")
        with pytest.raises(InvalidParameter):
            KeyDerivationConfig.load(path)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            KeyDerivationConfig.load(tmp_path / "missing.json")
