"""
PEM/DER Key Codec

Encodes asymmetric keys as DER wrapped in a single PEM block and decodes them
back. The codecs are generic over the key category: RSA and Ed25519 keys go
through the same functions, and decoders take the expected key class so a
file holding the wrong kind of key is rejected.

Block types:
    RSA PRIVATE KEY   PKCS#1 RSA private key
    PRIVATE KEY       PKCS#8 private key (any algorithm)
    RSA PUBLIC KEY    PKCS#1 RSA public key
    PUBLIC KEY        PKIX SubjectPublicKeyInfo (any algorithm)
"""

import base64
import binascii
import re
import textwrap
from typing import Callable, Tuple, Type, TypeVar

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from cryptbox.common.exceptions import KeyFormatError
from cryptbox.common.utils import BytesLike, to_bytes

PEM_RSA_PRIVATE = "RSA PRIVATE KEY"
PEM_PRIVATE = "PRIVATE KEY"
PEM_RSA_PUBLIC = "RSA PUBLIC KEY"
PEM_PUBLIC = "PUBLIC KEY"

PEM_LINE_LENGTH = 64

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----\r?\n(.*?)-----END \1-----",
    re.DOTALL,
)

K = TypeVar("K")

# Key -> PEM bytes
KeyEncoder = Callable[[object], bytes]
# (PEM bytes, expected key class) -> key
KeyDecoder = Callable[[bytes, Type[K]], K]


def pem_encode(block_type: str, der: bytes) -> bytes:
    """
    Wrap DER bytes in a PEM block.

    Args:
        block_type: Label such as "PUBLIC KEY"
        der: DER payload

    Returns:
        PEM text as bytes, base64 body wrapped at 64 columns
    """
    body = base64.b64encode(der).decode('ascii')
    lines = textwrap.wrap(body, PEM_LINE_LENGTH) if body else []

    pem = [f"-----BEGIN {block_type}-----"]
    pem.extend(lines)
    pem.append(f"-----END {block_type}-----")
    return ("\n".join(pem) + "\n").encode('ascii')


def pem_decode(pem: BytesLike) -> Tuple[str, bytes]:
    """
    Extract the first PEM block.

    Args:
        pem: PEM text

    Returns:
        Tuple of (block_type, der)

    Raises:
        KeyFormatError: If no block is found or its body is not base64
    """
    match = _PEM_BLOCK.search(to_bytes(pem))
    if match is None:
        raise KeyFormatError("no PEM block found")

    block_type = match.group(1).decode('ascii')
    body = b"".join(match.group(2).split())
    try:
        der = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError(f"PEM block {block_type!r} has a malformed body") from e

    return block_type, der


def _check_type(key, expected: Type[K]) -> K:
    if not isinstance(key, expected):
        raise KeyFormatError(
            f"expected {expected.__name__}, found {type(key).__name__}"
        )
    return key


def _expect_block(pem: BytesLike, block_type: str) -> bytes:
    found, der = pem_decode(pem)
    if found != block_type:
        raise KeyFormatError(f"expected PEM block {block_type!r}, found {found!r}")
    return pem_encode(block_type, der)


def _serialize(encode: Callable[[], bytes], what: str) -> bytes:
    try:
        return encode()
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyFormatError(f"cannot encode key as {what}: {e}") from e


def _load_private(pem: bytes, expected: Type[K]) -> K:
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyFormatError(f"cannot parse private key: {e}") from e
    return _check_type(key, expected)


def _load_public(pem: bytes, expected: Type[K]) -> K:
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyFormatError(f"cannot parse public key: {e}") from e
    return _check_type(key, expected)


def encode_pkcs1_private_key(key) -> bytes:
    """Encode an RSA private key as a PKCS#1 "RSA PRIVATE KEY" block."""
    der = _serialize(
        lambda: key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        "PKCS#1",
    )
    return pem_encode(PEM_RSA_PRIVATE, der)


def decode_pkcs1_private_key(pem: BytesLike, expected: Type[K]) -> K:
    """
    Decode a PKCS#1 "RSA PRIVATE KEY" block.

    Args:
        pem: PEM text
        expected: Key class the result must be an instance of

    Raises:
        KeyFormatError: On missing/wrong block, bad DER or wrong key class
    """
    return _load_private(_expect_block(pem, PEM_RSA_PRIVATE), expected)


def encode_pkcs8_private_key(key) -> bytes:
    """Encode any private key as an unencrypted PKCS#8 "PRIVATE KEY" block."""
    der = _serialize(
        lambda: key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        "PKCS#8",
    )
    return pem_encode(PEM_PRIVATE, der)


def decode_pkcs8_private_key(pem: BytesLike, expected: Type[K]) -> K:
    """Decode an unencrypted PKCS#8 "PRIVATE KEY" block into an expected key."""
    return _load_private(_expect_block(pem, PEM_PRIVATE), expected)


def encode_pkcs1_public_key(key) -> bytes:
    """Encode an RSA public key as a PKCS#1 "RSA PUBLIC KEY" block."""
    der = _serialize(
        lambda: key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.PKCS1,
        ),
        "PKCS#1",
    )
    return pem_encode(PEM_RSA_PUBLIC, der)


def decode_pkcs1_public_key(pem: BytesLike, expected: Type[K]) -> K:
    """Decode a PKCS#1 "RSA PUBLIC KEY" block into an expected key."""
    return _load_public(_expect_block(pem, PEM_RSA_PUBLIC), expected)


def encode_pkix_public_key(key) -> bytes:
    """Encode any public key as a PKIX "PUBLIC KEY" block."""
    der = _serialize(
        lambda: key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ),
        "PKIX",
    )
    return pem_encode(PEM_PUBLIC, der)


def decode_pkix_public_key(pem: BytesLike, expected: Type[K]) -> K:
    """Decode a PKIX "PUBLIC KEY" block into an expected key."""
    return _load_public(_expect_block(pem, PEM_PUBLIC), expected)
