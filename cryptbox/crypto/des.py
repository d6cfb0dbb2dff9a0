"""
DES Encryption/Decryption

Single DES with an 8-byte key in ECB, CBC, CFB, OFB and CTR modes. DES is
broken; it is offered for interoperability with legacy data only.

The backend exposes DES as TripleDES keyed with K1 = K2 = K3, which is
equivalent to single DES. CTR is built here from ECB keystream blocks because
the backend offers no CTR mode for this algorithm.
"""

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES

from cryptbox.common.utils import Bytes, BytesLike

from . import cipher
from .cipher import BlockFamily, CipherOption, Mode

BLOCK_SIZE = 8
KEY_SIZE = 8


def _single_des_key(key: bytes) -> bytes:
    return key * 3


DES = BlockFamily(
    "des",
    key_sizes=(KEY_SIZE,),
    block_size=BLOCK_SIZE,
    algorithm=TripleDES,
    key_schedule=_single_des_key,
    native_ctr=False,
)


def encrypt_ecb(plain: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Encrypt with DES in ECB mode.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 8-byte key
        opts: Padding and encoding options

    Returns:
        Ciphertext
    """
    return cipher.encrypt(DES, Mode.ECB, plain, key, None, *opts)


def decrypt_ecb(crypted: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(DES, Mode.ECB, crypted, key, None, *opts)


def encrypt_cbc(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Encrypt with DES in CBC mode.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 8-byte key
        iv: 8-byte initialization vector
        opts: Padding and encoding options

    Returns:
        Ciphertext
    """
    return cipher.encrypt(DES, Mode.CBC, plain, key, iv, *opts)


def decrypt_cbc(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(DES, Mode.CBC, crypted, key, iv, *opts)


def encrypt_cfb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.encrypt(DES, Mode.CFB, plain, key, iv, *opts)


def decrypt_cfb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(DES, Mode.CFB, crypted, key, iv, *opts)


def encrypt_ofb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.encrypt(DES, Mode.OFB, plain, key, iv, *opts)


def decrypt_ofb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(DES, Mode.OFB, crypted, key, iv, *opts)


def encrypt_ctr(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with DES in CTR mode; iv is the initial counter block."""
    return cipher.encrypt(DES, Mode.CTR, plain, key, iv, *opts)


def decrypt_ctr(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(DES, Mode.CTR, crypted, key, iv, *opts)
