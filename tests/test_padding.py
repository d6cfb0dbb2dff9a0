"""Tests for block padding schemes."""

import pytest

from cryptbox.common.exceptions import InvalidPaddingError
from cryptbox.common.padding import Padding


class TestPadding:
    def test_none_is_identity(self) -> None:
        assert Padding.NONE.pad(b"abc", 8) == b"abc"
        assert Padding.NONE.unpad(b"abc\x00", 8) == b"abc\x00"

    def test_zero_pads_at_least_one_byte(self) -> None:
        assert Padding.ZERO.pad(b"abc", 8) == b"abc" + bytes(5)
        assert Padding.ZERO.pad(b"12345678", 8) == b"12345678" + bytes(8)

    def test_zero_unpad_caps_at_block_size(self) -> None:
        data = b"a" + bytes(20)
        assert Padding.ZERO.unpad(data, 8) == b"a" + bytes(12)

    def test_zero_unpad_without_zeros_is_unchanged(self) -> None:
        assert Padding.ZERO.unpad(b"abcdefgh", 8) == b"abcdefgh"

    @pytest.mark.parametrize("padding", [Padding.PKCS5, Padding.PKCS7])
    def test_pkcs_pad(self, padding: Padding) -> None:
        assert padding.pad(b"", 8) == bytes([8]) * 8
        assert padding.pad(b"abc", 8) == b"abc" + bytes([5]) * 5
        assert padding.pad(b"12345678", 8) == b"12345678" + bytes([8]) * 8

    def test_pkcs7_roundtrip(self) -> None:
        for n in range(0, 33):
            data = bytes(range(n))
            assert Padding.PKCS7.unpad(Padding.PKCS7.pad(data, 16), 16) == data

    @pytest.mark.parametrize("data", [
        b"",
        b"abcdefg\x00",
        b"abc\x09",
        b"a" * 16 + b"\x11",
    ])
    def test_pkcs7_unpad_rejects(self, data: bytes) -> None:
        with pytest.raises(InvalidPaddingError):
            Padding.PKCS7.unpad(data, 16)

    def test_pkcs7_unpad_checks_last_byte_only(self) -> None:
        assert Padding.PKCS7.unpad(b"abcde\x01\x03", 8) == b"abcd"
