"""
cryptbox

A uniform facade over standard cryptographic primitives:
- AES, DES and 3DES block ciphers in ECB/CBC/CFB/OFB/CTR and AES-GCM
- RSA encryption/signatures and Ed25519 signatures
- MD5/SHA digests, HMAC, CRC-32/64 and FNV checksums
- PEM key persistence (PKCS#1, PKCS#8, PKIX)
- padding (zero, PKCS#5/#7), output encodings (hex, base64) and random bytes
"""

__version__ = "1.0.0"

from . import common, crypto, storage
from .common import Bytes, Encoding, Padding, with_hex, with_base64
from .crypto import with_zero, with_pkcs5, with_pkcs7, with_additional
