"""
Unit Tests for SNCrypto Encodings

Hex and base64 codecs used for key material.
"""

import pytest

from sncrypto.crypto.encoding import (
    base64_decode,
    base64_encode,
    base64_to_bytes,
    bytes_to_base64,
    bytes_to_hex,
    hex_to_bytes,
)
from sncrypto.crypto.errors import DecodeError


class TestHex:
    """Test cases for hex conversion."""

    def test_bytes_to_hex_lowercase(self):
        assert bytes_to_hex(b"\x00\x0f\xab\xff") == "000fabff"

    def test_bytes_to_hex_pads_single_digits(self):
        """Every byte becomes exactly two characters."""
        assert bytes_to_hex(bytes([1, 2, 3])) == "010203"

    def test_bytes_to_hex_accepts_bytearray(self):
        assert bytes_to_hex(bytearray(b"\xde\xad")) == "dead"

    def test_hex_to_bytes_case_insensitive(self):
        assert hex_to_bytes("DEADbeef") == hex_to_bytes("deadbeef") == b"\xde\xad\xbe\xef"

    def test_empty(self):
        assert hex_to_bytes("") == b""
        assert bytes_to_hex(b"") == ""

    @pytest.mark.parametrize("bad", ["abc", "zz", "0g", "de ad", "12\n"])
    def test_hex_to_bytes_malformed(self, bad):
        """Test that malformed hex raises DecodeError instead of truncating."""
        with pytest.raises(DecodeError):
            hex_to_bytes(bad)

    def test_hex_to_bytes_non_string(self):
        with pytest.raises(DecodeError):
            hex_to_bytes(b"dead")

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            hex_to_bytes("x")


class TestBase64:
    """Test cases for base64 conversion."""

    def test_base64_encode_ascii(self):
        assert base64_encode("hello") == "aGVsbG8="

    def test_base64_encode_utf8(self):
        """Non-ASCII text is encoded through its UTF-8 bytes."""
        assert base64_encode("héllo") == "aMOpbGxv"

    def test_base64_roundtrip(self):
        for text in ["", "a", "note title", "emoji \U0001f512", "日本語のノート"]:
            assert base64_decode(base64_encode(text)) == text

    def test_base64_to_bytes(self):
        assert base64_to_bytes("AAEC/w==") == b"\x00\x01\x02\xff"
        assert bytes_to_base64(b"\x00\x01\x02\xff") == "AAEC/w=="

    @pytest.mark.parametrize("bad", ["abc", "a$bc", "====", "aGVsbG8=!"])
    def test_base64_malformed(self, bad):
        with pytest.raises(DecodeError):
            base64_to_bytes(bad)

    def test_base64_decode_not_utf8(self):
        """Decoded bytes that are not UTF-8 raise DecodeError."""
        with pytest.raises(DecodeError):
            base64_decode(bytes_to_base64(b"\xff\xfe\xfd"))
