"""Tests for the 3DES facade."""

import pytest

from cryptbox.common.exceptions import InvalidKeyError
from cryptbox.common.options import with_base64, with_hex
from cryptbox.crypto import des, triple_des
from cryptbox.crypto.cipher import with_pkcs7

KEY = b"12345678ABCDEFGH87654321"
IV = b"87654321"


class TestTripleDES:
    @pytest.mark.parametrize("plain, expect", [
        ("", b"49f56002c0693348"),
        ("123", b"2589ca52e7133935"),
        ("你好，世界", b"d47726a9c2516805014a0946142dbbb6"),
    ])
    def test_ecb(self, plain: str, expect: bytes) -> None:
        crypted = triple_des.encrypt_ecb(plain, KEY, with_pkcs7(), with_hex())
        assert crypted == expect
        assert triple_des.decrypt_ecb(crypted, KEY, with_pkcs7(), with_hex()).string() == plain

    @pytest.mark.parametrize("plain, expect", [
        ("", b"RqrKM6PhxeQ="),
        ("123", b"Ue6JrNHvxio="),
        ("你好，世界", b"6B8PWNGlAAd3Qcw1J3TiUA=="),
    ])
    def test_cbc(self, plain: str, expect: bytes) -> None:
        crypted = triple_des.encrypt_cbc(plain, KEY, IV, with_pkcs7(), with_base64())
        assert crypted == expect
        assert triple_des.decrypt_cbc(crypted, KEY, IV, with_pkcs7(), with_base64()).string() == plain

    @pytest.mark.parametrize("name", ["ecb", "cbc", "cfb", "ofb", "ctr"])
    def test_repeated_key_matches_single_des(self, name: str) -> None:
        des_key = b"12345678"
        args = () if name == "ecb" else (IV,)
        plain = "你好，世界, 3DES with K1 = K2 = K3"

        single = getattr(des, f"encrypt_{name}")(plain, des_key, *args, with_pkcs7())
        triple = getattr(triple_des, f"encrypt_{name}")(plain, des_key * 3, *args, with_pkcs7())
        assert single == triple

    @pytest.mark.parametrize("name", ["cfb", "ofb", "ctr"])
    def test_stream_modes_roundtrip(self, name: str) -> None:
        encrypt = getattr(triple_des, f"encrypt_{name}")
        decrypt = getattr(triple_des, f"decrypt_{name}")

        crypted = encrypt("odd length input", KEY, IV, with_hex())
        assert len(crypted) == 2 * len("odd length input")
        assert decrypt(crypted, KEY, IV, with_hex()) == b"odd length input"

    def test_invalid_key(self) -> None:
        with pytest.raises(InvalidKeyError):
            triple_des.encrypt_ecb("123", b"12345678", with_pkcs7())
