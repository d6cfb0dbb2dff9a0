"""
AES Encryption/Decryption

AES-128/192/256 (16, 24 or 32 byte keys) in ECB, CBC, CFB, OFB, CTR and GCM
modes. Padding and output encoding are chosen with options:

    encrypt_cbc("hello", key, iv, with_pkcs7(), with_hex())

GCM output is ciphertext || 16-byte tag; with_additional() sets the
associated data and padding options are ignored.
"""

from cryptography.hazmat.primitives.ciphers import algorithms

from cryptbox.common.rand import generate_bytes
from cryptbox.common.utils import Bytes, BytesLike

from . import cipher
from .cipher import BlockFamily, CipherOption, Mode

BLOCK_SIZE = 16

AES = BlockFamily("aes", key_sizes=(16, 24, 32), block_size=BLOCK_SIZE, algorithm=algorithms.AES)


def encrypt_ecb(plain: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Encrypt with AES in ECB mode.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 16, 24 or 32 byte key
        opts: Padding and encoding options

    Returns:
        Ciphertext
    """
    return cipher.encrypt(AES, Mode.ECB, plain, key, None, *opts)


def decrypt_ecb(crypted: BytesLike, key: BytesLike, *opts: CipherOption) -> Bytes:
    """Decrypt AES-ECB ciphertext produced by encrypt_ecb()."""
    return cipher.decrypt(AES, Mode.ECB, crypted, key, None, *opts)


def encrypt_cbc(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Encrypt with AES in CBC mode.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 16, 24 or 32 byte key
        iv: 16-byte initialization vector
        opts: Padding and encoding options

    Returns:
        Ciphertext
    """
    return cipher.encrypt(AES, Mode.CBC, plain, key, iv, *opts)


def decrypt_cbc(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Decrypt AES-CBC ciphertext produced by encrypt_cbc()."""
    return cipher.decrypt(AES, Mode.CBC, crypted, key, iv, *opts)


def encrypt_cfb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with AES in full-block CFB mode."""
    return cipher.encrypt(AES, Mode.CFB, plain, key, iv, *opts)


def decrypt_cfb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(AES, Mode.CFB, crypted, key, iv, *opts)


def encrypt_ofb(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with AES in OFB mode."""
    return cipher.encrypt(AES, Mode.OFB, plain, key, iv, *opts)


def decrypt_ofb(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(AES, Mode.OFB, crypted, key, iv, *opts)


def encrypt_ctr(plain: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    """Encrypt with AES in CTR mode; iv is the initial counter block."""
    return cipher.encrypt(AES, Mode.CTR, plain, key, iv, *opts)


def decrypt_ctr(crypted: BytesLike, key: BytesLike, iv: BytesLike, *opts: CipherOption) -> Bytes:
    return cipher.decrypt(AES, Mode.CTR, crypted, key, iv, *opts)


def encrypt_gcm(plain: BytesLike, key: BytesLike, nonce: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Seal plaintext with AES-GCM.

    Args:
        plain: Plaintext (text is encoded as UTF-8)
        key: 16, 24 or 32 byte key
        nonce: Nonce, 12 bytes by convention (8 to 128 accepted)
        opts: with_additional() and encoding options

    Returns:
        Ciphertext followed by the 16-byte authentication tag
    """
    return cipher.encrypt_gcm(AES, plain, key, nonce, *opts)


def decrypt_gcm(crypted: BytesLike, key: BytesLike, nonce: BytesLike, *opts: CipherOption) -> Bytes:
    """
    Open an AES-GCM ciphertext || tag.

    Raises:
        AuthenticationError: If ciphertext, nonce, key or additional data
            differ from those used to seal
    """
    return cipher.decrypt_gcm(AES, crypted, key, nonce, *opts)


def nonce() -> Bytes:
    """Generate a 12-byte GCM nonce from the OS CSPRNG."""
    return Bytes(generate_bytes(cipher.GCM_STANDARD_NONCE_SIZE))


def generate_gcm_nonce() -> Bytes:
    """Alias of nonce()."""
    return nonce()
