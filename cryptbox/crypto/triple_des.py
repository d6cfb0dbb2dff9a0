"""
Triple DES (3DES-EDE) Encryption/Decryption

Three-key 3DES with a 24-byte key in ECB, CBC, CFB, OFB and CTR modes.
"""

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES

from cryptbox.common.utils import Bytes, BytesLike

from . import cipher
from .cipher import BlockFamily, CipherOption, Mode

BLOCK_SIZE = 8
KEY_SIZE = 24

TRIPLE_DES = BlockFamily(
    "3des",
    key_sizes=(KEY_SIZE,),
    block_size=BLOCK_SIZE,
    algorithm=TripleDES,
    native_ctr=False,
)


def encrypt_ecb(plain: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Encrypt with 3DES in ECB mode.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 24-byte key
        opts: Padding and encoding options

    Returns:
        Ciphertext
    """
    return cipher.encrypt(TRIPLE_DES, Mode.ECB, plain, key, None, *opts)


def decrypt_ecb(crypted: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(TRIPLE_DES, Mode.ECB, crypted, key, None, *opts)


def encrypt_cbc(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with 3DES in CBC mode; iv is 8 bytes."""
    return cipher.encrypt(TRIPLE_DES, Mode.CBC, plain, key, iv, *opts)


def decrypt_cbc(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(TRIPLE_DES, Mode.CBC, crypted, key, iv, *opts)


def encrypt_cfb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.encrypt(TRIPLE_DES, Mode.CFB, plain, key, iv, *opts)


def decrypt_cfb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(TRIPLE_DES, Mode.CFB, crypted, key, iv, *opts)


def encrypt_ofb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.encrypt(TRIPLE_DES, Mode.OFB, plain, key, iv, *opts)


def decrypt_ofb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(TRIPLE_DES, Mode.OFB, crypted, key, iv, *opts)


def encrypt_ctr(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with 3DES in CTR mode; iv is the initial counter block."""
    return cipher.encrypt(TRIPLE_DES, Mode.CTR, plain, key, iv, *opts)


def decrypt_ctr(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(TRIPLE_DES, Mode.CTR, crypted, key, iv, *opts)
