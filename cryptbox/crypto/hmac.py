"""
HMAC over the digests of cryptbox.crypto.hash.

    hmac_sha256("key", "message", with_hex())
"""

import hmac as _hmac

from cryptbox.common.options import EncodedConfig, Option
from cryptbox.common.utils import Bytes, BytesLike, to_bytes

from .hash import lookup


def hmac(name: str, key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    """
    Compute HMAC-name(key, data).

    Args:
        name: Digest name, e.g. "sha256"
        key: MAC key (text is encoded as UTF-8)
        data: Message
        opts: Encoding options

    Returns:
        Tag, encoded as configured

    Raises:
        HashUnavailableError: If name is not a known digest
    """
    conf = EncodedConfig().apply(*opts)
    mac = _hmac.new(to_bytes(key), digestmod=lookup(name).new)
    mac.update(to_bytes(data))
    return Bytes(conf.encoding.encode(mac.digest()))


def hmac_md5(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("md5", key, data, *opts)


def hmac_sha1(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("sha1", key, data, *opts)


def hmac_sha224(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("sha224", key, data, *opts)


def hmac_sha256(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("sha256", key, data, *opts)


def hmac_sha384(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("sha384", key, data, *opts)


def hmac_sha512(key: BytesLike, data: BytesLike, *opts: Option) -> Bytes:
    return hmac("sha512", key, data, *opts)


def verify(name: str, key: BytesLike, data: BytesLike, tag: BytesLike, *opts: Option) -> bool:
    """
    Check tag against HMAC-name(key, data) in constant time.

    tag is read with the same encoding options used to produce it.
    """
    conf = EncodedConfig().apply(*opts)
    expected = hmac(name, key, data)
    return _hmac.compare_digest(expected, conf.encoding.decode(tag))
