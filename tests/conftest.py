# SNCrypto Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sncrypto.crypto.primitives import (
    HashlibPrimitives,
    OpenSSLPrimitives,
    reset_primitives,
)
from sncrypto.keys import KeyDerivationConfig, KeyDerivationService


@pytest.fixture(autouse=True)
def fresh_primitives():
    """Re-run backend selection for every test."""
    reset_primitives()
    yield
    reset_primitives()


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture
def hashlib_primitives():
    """Primitives backed by hashlib."""
    return HashlibPrimitives()


@pytest.fixture
def openssl_primitives():
    """Primitives backed by the cryptography library."""
    return OpenSSLPrimitives()


@pytest.fixture(params=["openssl", "hashlib"])
def primitives(request):
    """Each concrete primitives backend in turn."""
    if request.param == "openssl":
        return OpenSSLPrimitives()
    return HashlibPrimitives()


@pytest.fixture
def service(primitives):
    """Key derivation service on each backend with default configuration."""
    return KeyDerivationService(primitives=primitives)


@pytest.fixture
def default_service():
    """Key derivation service with automatic backend selection."""
    return KeyDerivationService()


@pytest.fixture
def config_file(tmp_path):
    """Write a configuration file and return its path."""
    def _write(**values):
        import json
        path = tmp_path / "sncrypto.json"
        data = KeyDerivationConfig.default().to_dict()
        data.update(values)
        path.write_text(json.dumps(data))
        return path
    return _write
