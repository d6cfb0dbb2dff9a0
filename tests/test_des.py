"""Tests for the DES facade."""

import pytest

from cryptbox.common.exceptions import InvalidIVError, InvalidKeyError, InvalidLengthError, InvalidPaddingError
from cryptbox.common.options import with_base64, with_hex
from cryptbox.crypto import des
from cryptbox.crypto.cipher import with_pkcs5, with_pkcs7

KEY = b"12345678"
IV = b"87654321"


class TestDES:
    @pytest.mark.parametrize("plain, expect", [
        ("", b"feb959b7d4642fcb"),
        ("123", b"2c388551d7f489ec"),
        ("你好，世界", b"6d5238e774243c6474950ff0c626c6cc"),
    ])
    def test_ecb(self, plain: str, expect: bytes) -> None:
        crypted = des.encrypt_ecb(plain, KEY, with_pkcs7(), with_hex())
        assert crypted == expect
        assert des.decrypt_ecb(crypted, KEY, with_pkcs7(), with_hex()).string() == plain

    @pytest.mark.parametrize("plain, expect", [
        ("", b"zazGg9qwr7w="),
        ("123", b"834errVfEYA="),
        ("你好，世界", b"uWwdcCpHqfA+15yakVhuCg=="),
    ])
    def test_cbc(self, plain: str, expect: bytes) -> None:
        crypted = des.encrypt_cbc(plain, KEY, IV, with_pkcs5(), with_base64())
        assert crypted == expect
        assert des.decrypt_cbc(crypted, KEY, IV, with_pkcs5(), with_base64()).string() == plain

    @pytest.mark.parametrize("plain, expect", [
        ("", b"305c3820937d9c2c"),
        ("123", b"0966032d9e709121"),
        ("你好，世界", b"dce990cd3ec87b98e7eddb44d32bff19"),
    ])
    def test_cfb(self, plain: str, expect: bytes) -> None:
        crypted = des.encrypt_cfb(plain, KEY, IV, with_pkcs7(), with_hex())
        assert crypted == expect
        assert des.decrypt_cfb(crypted, KEY, IV, with_pkcs7(), with_hex()).string() == plain

    @pytest.mark.parametrize("plain, expect", [
        ("", b"305c3820937d9c2c"),
        ("123", b"0966032d9e709121"),
        ("你好，世界", b"dce990cd3ec87b98a92a6101c1780f95"),
    ])
    def test_ofb(self, plain: str, expect: bytes) -> None:
        crypted = des.encrypt_ofb(plain, KEY, IV, with_pkcs7(), with_hex())
        assert crypted == expect
        assert des.decrypt_ofb(crypted, KEY, IV, with_pkcs7(), with_hex()).string() == plain

    @pytest.mark.parametrize("plain, expect", [
        ("", b"305c3820937d9c2c"),
        ("123", b"0966032d9e709121"),
        ("你好，世界", b"dce990cd3ec87b9852c9ec431ef03fe4"),
    ])
    def test_ctr(self, plain: str, expect: bytes) -> None:
        crypted = des.encrypt_ctr(plain, KEY, IV, with_pkcs7(), with_hex())
        assert crypted == expect
        assert des.decrypt_ctr(crypted, KEY, IV, with_pkcs7(), with_hex()).string() == plain

    def test_ctr_counter_wraps(self) -> None:
        iv = b"\xff" * 8
        plain = b"x" * 24
        crypted = des.encrypt_ctr(plain, KEY, iv)
        assert len(crypted) == 24
        assert des.decrypt_ctr(crypted, KEY, iv) == plain

    def test_ctr_without_padding_keeps_length(self) -> None:
        crypted = des.encrypt_ctr("odd", KEY, IV)
        assert len(crypted) == 3
        assert des.decrypt_ctr(crypted, KEY, IV) == b"odd"

    @pytest.mark.parametrize("key", [b"1234567", b"123456781234567812345678"])
    def test_invalid_key(self, key: bytes) -> None:
        with pytest.raises(InvalidKeyError):
            des.encrypt_ecb("123", key, with_pkcs7())

    def test_invalid_iv(self) -> None:
        with pytest.raises(InvalidIVError):
            des.encrypt_ofb("123", KEY, b"8765432112345678")

    def test_unaligned_ciphertext(self) -> None:
        with pytest.raises(InvalidLengthError):
            des.decrypt_ecb(b"1234567", KEY, with_pkcs7())

    def test_wrong_key_fails_pkcs7_or_garbles(self) -> None:
        crypted = des.encrypt_cbc("secret message", KEY, IV, with_pkcs7())
        try:
            plain = des.decrypt_cbc(crypted, b"87654321", IV, with_pkcs7())
        except InvalidPaddingError:
            return
        assert plain != b"secret message"
