"""
Key persistence for cryptbox.
"""

from .keystore import (
    KeyConfig,
    KeyStore,
    with_key_random,
    with_key_seed,
    with_key_encode_private,
    with_key_encode_public,
    with_key_decode_private,
    with_key_decode_public,
)

__all__ = [
    'KeyConfig',
    'KeyStore',
    'with_key_random',
    'with_key_seed',
    'with_key_encode_private',
    'with_key_encode_public',
    'with_key_decode_private',
    'with_key_decode_public',
]
