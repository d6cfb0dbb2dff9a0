"""Tests for RSA encryption, signatures and key handling."""

import random

import pytest
from cryptography.hazmat.primitives import hashes

from cryptbox.common.exceptions import (
    DecryptionError,
    HashUnavailableError,
    InvalidKeyError,
    InvalidLengthError,
    MessageTooLongError,
    RandomError,
    VerificationError,
)
from cryptbox.common.options import with_base64, with_hex
from cryptbox.crypto import hash, rsa
from cryptbox.storage import with_key_random


class TestRSAEncryption:
    def test_pkcs1v15_roundtrip(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_pkcs1v15("你好，世界", with_base64())
        assert private_key.decrypt_pkcs1v15(crypted, with_base64()).string() == "你好，世界"

    def test_pkcs1v15_is_randomized(self, rsa_keys) -> None:
        _, public_key = rsa_keys
        assert public_key.encrypt_pkcs1v15("123") != public_key.encrypt_pkcs1v15("123")

    def test_pkcs1v15_message_too_long(self, rsa_keys) -> None:
        _, public_key = rsa_keys
        assert len(public_key.encrypt_pkcs1v15(b"x" * (256 - 11))) == 256
        with pytest.raises(MessageTooLongError):
            public_key.encrypt_pkcs1v15(b"x" * (256 - 10))

    def test_oaep_roundtrip_with_label(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_oaep("123", b"label", with_hex())
        assert private_key.decrypt_oaep(crypted, b"label", with_hex()) == b"123"

        with pytest.raises(DecryptionError):
            private_key.decrypt_oaep(crypted, b"other", with_hex())

    @pytest.mark.parametrize("hash_id", ["sha1", "sha512", hashes.SHA384()])
    def test_oaep_hash_option(self, rsa_keys, hash_id) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_oaep("123", None, rsa.with_hash(hash_id))
        assert private_key.decrypt_oaep(crypted, None, rsa.with_hash(hash_id)) == b"123"

    def test_oaep_message_too_long(self, rsa_keys) -> None:
        _, public_key = rsa_keys
        limit = 256 - 2 * 32 - 2
        public_key.encrypt_oaep(b"x" * limit, b"")
        with pytest.raises(MessageTooLongError):
            public_key.encrypt_oaep(b"x" * (limit + 1), b"")

    def test_oaep_unknown_hash(self, rsa_keys) -> None:
        _, public_key = rsa_keys
        with pytest.raises(HashUnavailableError):
            public_key.encrypt_oaep("123", None, rsa.with_hash("md4"))

    def test_oaep_label_comes_before_options(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_oaep("123", b"", with_hex())
        assert private_key.decrypt_oaep(crypted, None, with_hex()) == b"123"

        with pytest.raises(TypeError):
            public_key.encrypt_oaep("123", with_hex())

    def test_decrypt_garbage(self, rsa_keys) -> None:
        private_key, _ = rsa_keys
        with pytest.raises(DecryptionError):
            private_key.decrypt_pkcs1v15(b"\x01" * 256)

    def test_decrypt_wrong_length(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_pkcs1v15("123")

        with pytest.raises(DecryptionError):
            private_key.decrypt_pkcs1v15(crypted[:-1])

    def test_decrypt_empty_message(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        assert private_key.decrypt_pkcs1v15(public_key.encrypt_pkcs1v15("")) == b""


class TestRSARandomSource:
    def test_fixed_source_fixes_pkcs1v15(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        fixed = rsa.with_random(lambda n: b"\x01" * n)

        crypted = public_key.encrypt_pkcs1v15("123", fixed)
        assert public_key.encrypt_pkcs1v15("123", fixed) == crypted
        assert private_key.decrypt_pkcs1v15(crypted) == b"123"

    def test_fixed_source_fixes_oaep(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        fixed = rsa.with_random(lambda n: b"\x01" * n)

        crypted = public_key.encrypt_oaep("123", b"label", fixed)
        assert public_key.encrypt_oaep("123", b"label", fixed) == crypted
        assert private_key.decrypt_oaep(crypted, b"label") == b"123"

    def test_fixed_source_fixes_pss(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha256("message")
        fixed = rsa.with_random(lambda n: b"\x01" * n)

        signature = private_key.sign_pss(digest, fixed)
        assert private_key.sign_pss(digest, fixed) == signature
        public_key.verify_pss(digest, signature)

    def test_short_source(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        short = rsa.with_random(lambda n: b"\x01" * (n - 1))

        with pytest.raises(RandomError):
            public_key.encrypt_pkcs1v15("123", short)
        with pytest.raises(RandomError):
            public_key.encrypt_oaep("123", b"", short)
        with pytest.raises(RandomError):
            private_key.sign_pss(hash.sha256("message"), short)

    def test_seeded_key_generation(self) -> None:
        first, _ = rsa.generate_keys(1024, with_key_random(random.Random(7).randbytes))
        second, _ = rsa.generate_keys(1024, with_key_random(random.Random(7).randbytes))
        other, _ = rsa.generate_keys(1024, with_key_random(random.Random(8).randbytes))

        assert first == second
        assert first != other


class TestRSASessionKey:
    def test_recovers_session_key(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        session_key = b"0123456789abcdef"
        crypted = public_key.encrypt_pkcs1v15(session_key)

        out = bytearray(16)
        private_key.decrypt_pkcs1v15_session_key(crypted, out)
        assert bytes(out) == session_key

    def test_wrong_length_keeps_random_contents(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_pkcs1v15(b"short")

        out = bytearray(b"R" * 16)
        private_key.decrypt_pkcs1v15_session_key(crypted, out)
        assert out == bytearray(b"R" * 16)

    def test_bad_padding_is_silent(self, rsa_keys) -> None:
        private_key, _ = rsa_keys
        out = bytearray(b"R" * 16)
        private_key.decrypt_pkcs1v15_session_key(b"\x01" * 256, out)
        assert out == bytearray(b"R" * 16)

    def test_shape_errors(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        crypted = public_key.encrypt_pkcs1v15(b"key")

        with pytest.raises(DecryptionError):
            private_key.decrypt_pkcs1v15_session_key(crypted[:-1], bytearray(16))
        with pytest.raises(DecryptionError):
            private_key.decrypt_pkcs1v15_session_key(crypted, bytearray(250))


class TestRSASignatures:
    def test_pkcs1v15(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha256("message")

        signature = private_key.sign_pkcs1v15(digest, with_hex())
        public_key.verify_pkcs1v15(digest, signature, with_hex())

        # PKCS#1 v1.5 signatures are deterministic.
        assert private_key.sign_pkcs1v15(digest, with_hex()) == signature

        with pytest.raises(VerificationError):
            public_key.verify_pkcs1v15(hash.sha256("other"), signature, with_hex())

    def test_pss(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha256("message")

        signature = private_key.sign_pss(digest, with_base64())
        public_key.verify_pss(digest, signature, with_base64())

        with pytest.raises(VerificationError):
            public_key.verify_pss(hash.sha256("other"), signature, with_base64())

    @pytest.mark.parametrize("salt", [rsa.SALT_LENGTH_EQUALS_HASH, 20])
    def test_pss_salt_length(self, rsa_keys, salt: int) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha256("message")

        signature = private_key.sign_pss(digest, rsa.with_salt(salt))
        public_key.verify_pss(digest, signature, rsa.with_salt(salt))
        # Auto-detection on verify accepts any salt length.
        public_key.verify_pss(digest, signature)

    def test_crypto_hash_option(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha512("message")

        signature = private_key.sign_pkcs1v15(digest, rsa.with_crypto_hash("sha512"))
        public_key.verify_pkcs1v15(digest, signature, rsa.with_crypto_hash(hashes.SHA512()))

        with pytest.raises(VerificationError):
            public_key.verify_pkcs1v15(digest, signature)

    def test_digest_length_mismatch(self, rsa_keys) -> None:
        private_key, _ = rsa_keys
        with pytest.raises(InvalidLengthError):
            private_key.sign_pss(hash.sha1("message"))
        with pytest.raises(InvalidLengthError):
            private_key.sign_pss(hash.sha256("message"), rsa.with_salt(256))

    def test_unknown_crypto_hash(self, rsa_keys) -> None:
        private_key, _ = rsa_keys
        with pytest.raises(HashUnavailableError):
            private_key.sign_pkcs1v15(hash.sha256("message"), rsa.with_crypto_hash("md4"))

    def test_tampered_signature(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        digest = hash.sha256("message")
        signature = bytearray(private_key.sign_pss(digest))
        signature[-1] ^= 1

        with pytest.raises(VerificationError):
            public_key.verify_pss(digest, bytes(signature))


class TestRSAKeys:
    def test_generate_sizes(self) -> None:
        private_key, public_key = rsa.generate_keys(1024)
        assert private_key.size() == 128
        assert public_key.size() == 128
        assert private_key.public_key() == public_key

    def test_generate_rejects_tiny_modulus(self) -> None:
        with pytest.raises(InvalidKeyError):
            rsa.generate_keys(256)

    def test_equality(self, rsa_keys) -> None:
        private_key, public_key = rsa_keys
        other_private, other_public = rsa.generate_keys(1024)

        assert private_key == rsa.PrivateKey(private_key.key)
        assert private_key != other_private
        assert public_key != other_public
        assert private_key != public_key
