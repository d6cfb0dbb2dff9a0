"""
Cryptographic facades for cryptbox.

This package provides:
- AES, DES and 3DES in ECB/CBC/CFB/OFB/CTR modes, plus AES-GCM
- MD5/SHA digests, CRC-32/64 and FNV checksums, HMAC
- PEM/DER key codecs (PKCS#1, PKCS#8, PKIX)
- RSA encryption and signatures, Ed25519 signatures
"""

from . import cipher, aes, des, triple_des, hash, hmac, x509
from . import rsa, ed25519
from .cipher import with_zero, with_pkcs5, with_pkcs7, with_additional

__all__ = [
    'cipher',
    'aes',
    'des',
    'triple_des',
    'hash',
    'hmac',
    'x509',
    'rsa',
    'ed25519',
    'with_zero',
    'with_pkcs5',
    'with_pkcs7',
    'with_additional',
]
