"""
Unit Tests for constant-time comparison.
"""

import pytest

from sncrypto.crypto.compare import timing_safe_equal


class TestTimingSafeEqual:
    """Test cases for timing_safe_equal."""

    def test_equal_strings(self):
        assert timing_safe_equal("abc", "abc") is True

    def test_last_character_differs(self):
        assert timing_safe_equal("abc", "abd") is False

    def test_first_character_differs(self):
        assert timing_safe_equal("xbc", "abc") is False

    def test_different_lengths(self):
        assert timing_safe_equal("abc", "abcd") is False
        assert timing_safe_equal("abcd", "abc") is False

    def test_prefix_is_not_equal(self):
        """A shorter operand that matches the other's prefix is still different."""
        assert timing_safe_equal("", "a") is False
        assert timing_safe_equal("a" * 64, "a" * 63) is False

    def test_empty(self):
        assert timing_safe_equal("", "") is True

    def test_bytes(self):
        assert timing_safe_equal(b"\x00\x01", b"\x00\x01") is True
        assert timing_safe_equal(b"\x00\x01", b"\x00\x02") is False

    def test_non_ascii(self):
        assert timing_safe_equal("clé", "clé") is True
        assert timing_safe_equal("clé", "cle") is False

    def test_lone_surrogates(self):
        """Text that is not valid UTF-8 still compares without raising."""
        assert timing_safe_equal("ab\ud800", "ab\ud800") is True
        assert timing_safe_equal("ab\ud800", "ab\ud801") is False
        assert timing_safe_equal("\udfff", "") is False

    @pytest.mark.parametrize("value", [123, 4.5, None])
    def test_coerces_with_str(self, value):
        """Non-text operands compare by their str() form."""
        assert timing_safe_equal(value, str(value)) is True

    def test_hex_keys(self):
        key = "0f" * 32
        assert timing_safe_equal(key, "0f" * 32)
        assert not timing_safe_equal(key, "0f" * 31 + "0e")
