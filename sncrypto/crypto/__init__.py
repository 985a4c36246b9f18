"""
SNCrypto - Primitive Layer.

This package provides the primitives the key derivation service is built on,
behind a single interface with interchangeable backends.

Modules:
    primitives: ICryptoPrimitives interface, OpenSSL and hashlib backends,
        and the process-wide backend selector
    encoding: Hex and base64 codecs for key material
    compare: Constant-time comparison
    errors: Error taxonomy shared by the whole package

Usage:
    >>> from sncrypto.crypto import get_primitives
    >>> primitives = get_primitives()
    >>> primitives.pbkdf2("password", "salt", 1000, 256)
    '...'

    >>> from sncrypto.crypto import timing_safe_equal
    >>> timing_safe_equal("abc", "abc")
    True
"""

from .compare import timing_safe_equal
from .encoding import (
    base64_decode,
    base64_encode,
    base64_to_bytes,
    bytes_to_base64,
    bytes_to_hex,
    hex_to_bytes,
)
from .errors import (
    DecodeError,
    EntropyUnavailable,
    InvalidParameter,
    PrimitiveFailure,
    SNCryptoError,
)
from .primitives import (
    HashlibPrimitives,
    ICryptoPrimitives,
    OpenSSLPrimitives,
    available_backends,
    get_primitives,
    reset_primitives,
)

__all__ = [
    # Primitive backends
    "ICryptoPrimitives",
    "OpenSSLPrimitives",
    "HashlibPrimitives",
    "get_primitives",
    "reset_primitives",
    "available_backends",
    # Encoding
    "base64_encode",
    "base64_decode",
    "base64_to_bytes",
    "bytes_to_base64",
    "bytes_to_hex",
    "hex_to_bytes",
    # Comparison
    "timing_safe_equal",
    # Errors
    "SNCryptoError",
    "InvalidParameter",
    "DecodeError",
    "PrimitiveFailure",
    "EntropyUnavailable",
]
