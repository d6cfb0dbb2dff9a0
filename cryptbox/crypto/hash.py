"""
Message Digests and Checksums

Cryptographic digests (MD5, SHA-1, SHA-224/256/384/512) return Bytes,
optionally re-encoded with with_hex()/with_base64(). CRC-32 and CRC-64
return unsigned integers. FNV-1/FNV-1a return integers at 32 and 64 bits
and 16 big-endian bytes at 128 bits.
"""

import hashlib
import zlib
from typing import Any, Callable, Dict, NamedTuple, Type

from crc import Calculator, Configuration
from cryptography.hazmat.primitives import hashes

from cryptbox.common.exceptions import HashUnavailableError
from cryptbox.common.options import EncodedConfig, Option
from cryptbox.common.utils import Bytes, BytesLike, to_bytes


class HashSpec(NamedTuple):
    """A digest known by name: its hashlib constructor and cryptography class."""

    new: Callable[..., Any]
    algorithm: Type[hashes.HashAlgorithm]


HASHES: Dict[str, HashSpec] = {
    "md5": HashSpec(hashlib.md5, hashes.MD5),
    "sha1": HashSpec(hashlib.sha1, hashes.SHA1),
    "sha224": HashSpec(hashlib.sha224, hashes.SHA224),
    "sha256": HashSpec(hashlib.sha256, hashes.SHA256),
    "sha384": HashSpec(hashlib.sha384, hashes.SHA384),
    "sha512": HashSpec(hashlib.sha512, hashes.SHA512),
}


def lookup(name: str) -> HashSpec:
    """
    Resolve a digest name such as "sha256" or "SHA-256".

    Raises:
        HashUnavailableError: If the name is unknown
    """
    key = name.lower().replace("-", "").replace("_", "")
    try:
        return HASHES[key]
    except KeyError:
        raise HashUnavailableError(f"hash {name!r} is not available") from None


def resolve_algorithm(hash_id) -> hashes.HashAlgorithm:
    """
    Turn a hash name or cryptography HashAlgorithm into a HashAlgorithm instance.

    Raises:
        HashUnavailableError: If hash_id is neither a known name nor an algorithm
    """
    if isinstance(hash_id, hashes.HashAlgorithm):
        return hash_id
    if isinstance(hash_id, type) and issubclass(hash_id, hashes.HashAlgorithm):
        return hash_id()
    if isinstance(hash_id, str):
        return lookup(hash_id).algorithm()
    raise HashUnavailableError(f"unsupported hash identifier {hash_id!r}")


def digest(name: str, data: BytesLike, *opts: Option) -> Bytes:
    """
    Hash data with the digest called name.

    Args:
        name: Digest name ("md5", "sha1", "sha224", "sha256", "sha384", "sha512")
        data: Input bytes (text is encoded as UTF-8)
        opts: Encoding options

    Returns:
        Digest, encoded as configured
    """
    conf = EncodedConfig().apply(*opts)
    h = lookup(name).new()
    h.update(to_bytes(data))
    return Bytes(conf.encoding.encode(h.digest()))


def md5(data: BytesLike, *opts: Option) -> Bytes:
    return digest("md5", data, *opts)


def sha1(data: BytesLike, *opts: Option) -> Bytes:
    return digest("sha1", data, *opts)


def sha224(data: BytesLike, *opts: Option) -> Bytes:
    return digest("sha224", data, *opts)


def sha256(data: BytesLike, *opts: Option) -> Bytes:
    return digest("sha256", data, *opts)


def sha384(data: BytesLike, *opts: Option) -> Bytes:
    return digest("sha384", data, *opts)


def sha512(data: BytesLike, *opts: Option) -> Bytes:
    return digest("sha512", data, *opts)


# CRC tables, as reflected CRCs with all-ones init and final xor.
TABLE_IEEE = Configuration(
    width=32,
    polynomial=0x04C11DB7,
    init_value=0xFFFFFFFF,
    final_xor_value=0xFFFFFFFF,
    reverse_input=True,
    reverse_output=True,
)
TABLE_CASTAGNOLI = Configuration(
    width=32,
    polynomial=0x1EDC6F41,
    init_value=0xFFFFFFFF,
    final_xor_value=0xFFFFFFFF,
    reverse_input=True,
    reverse_output=True,
)
TABLE_KOOPMAN = Configuration(
    width=32,
    polynomial=0x741B8CD7,
    init_value=0xFFFFFFFF,
    final_xor_value=0xFFFFFFFF,
    reverse_input=True,
    reverse_output=True,
)
TABLE_ISO = Configuration(
    width=64,
    polynomial=0x000000000000001B,
    init_value=0xFFFFFFFFFFFFFFFF,
    final_xor_value=0xFFFFFFFFFFFFFFFF,
    reverse_input=True,
    reverse_output=True,
)
TABLE_ECMA = Configuration(
    width=64,
    polynomial=0x42F0E1EBA9EA3693,
    init_value=0xFFFFFFFFFFFFFFFF,
    final_xor_value=0xFFFFFFFFFFFFFFFF,
    reverse_input=True,
    reverse_output=True,
)


def _checksum(data: BytesLike, table: Configuration) -> int:
    return Calculator(table, optimized=True).checksum(to_bytes(data))


def crc32(data: BytesLike, table: Configuration = TABLE_IEEE) -> int:
    """
    CRC-32 of data with the given table.

    Args:
        data: Input bytes
        table: TABLE_IEEE, TABLE_CASTAGNOLI or TABLE_KOOPMAN

    Returns:
        Checksum as an unsigned 32-bit integer
    """
    if table is TABLE_IEEE:
        return zlib.crc32(to_bytes(data)) & 0xFFFFFFFF
    if table.width != 32:
        raise ValueError(f"crc32: table width {table.width} != 32")
    return _checksum(data, table)


def crc32_ieee(data: BytesLike) -> int:
    return crc32(data, TABLE_IEEE)


def crc64(data: BytesLike, table: Configuration = TABLE_ISO) -> int:
    """
    CRC-64 of data with the given table.

    Args:
        data: Input bytes
        table: TABLE_ISO or TABLE_ECMA

    Returns:
        Checksum as an unsigned 64-bit integer
    """
    if table.width != 64:
        raise ValueError(f"crc64: table width {table.width} != 64")
    return _checksum(data, table)


def crc64_iso(data: BytesLike) -> int:
    return crc64(data, TABLE_ISO)


def crc64_ecma(data: BytesLike) -> int:
    return crc64(data, TABLE_ECMA)


FNV32_OFFSET = 0x811C9DC5
FNV32_PRIME = 0x01000193
FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x00000100000001B3
FNV128_OFFSET = 0x6C62272E07BB014262B821756295C58D
FNV128_PRIME = 0x0000000001000000000000000000013B


def _fnv1(data: bytes, offset: int, prime: int, mask: int) -> int:
    hash_value = offset
    for byte in data:
        hash_value = (hash_value * prime) & mask
        hash_value ^= byte
    return hash_value


def _fnv1a(data: bytes, offset: int, prime: int, mask: int) -> int:
    hash_value = offset
    for byte in data:
        hash_value ^= byte
        hash_value = (hash_value * prime) & mask
    return hash_value


def fnv32(data: BytesLike) -> int:
    """FNV-1 32-bit hash."""
    return _fnv1(to_bytes(data), FNV32_OFFSET, FNV32_PRIME, (1 << 32) - 1)


def fnv32a(data: BytesLike) -> int:
    """FNV-1a 32-bit hash."""
    return _fnv1a(to_bytes(data), FNV32_OFFSET, FNV32_PRIME, (1 << 32) - 1)


def fnv64(data: BytesLike) -> int:
    """FNV-1 64-bit hash."""
    return _fnv1(to_bytes(data), FNV64_OFFSET, FNV64_PRIME, (1 << 64) - 1)


def fnv64a(data: BytesLike) -> int:
    """FNV-1a 64-bit hash."""
    return _fnv1a(to_bytes(data), FNV64_OFFSET, FNV64_PRIME, (1 << 64) - 1)


def fnv128(data: BytesLike, *opts: Option) -> Bytes:
    """
    FNV-1 128-bit hash.

    Returns:
        16 big-endian bytes, encoded as configured
    """
    conf = EncodedConfig().apply(*opts)
    value = _fnv1(to_bytes(data), FNV128_OFFSET, FNV128_PRIME, (1 << 128) - 1)
    return Bytes(conf.encoding.encode(value.to_bytes(16, 'big')))


def fnv128a(data: BytesLike, *opts: Option) -> Bytes:
    """
    FNV-1a 128-bit hash.

    Returns:
        16 big-endian bytes, encoded as configured
    """
    conf = EncodedConfig().apply(*opts)
    value = _fnv1a(to_bytes(data), FNV128_OFFSET, FNV128_PRIME, (1 << 128) - 1)
    return Bytes(conf.encoding.encode(value.to_bytes(16, 'big')))
