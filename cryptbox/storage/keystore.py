"""
Asymmetric Key Store

Writes, reads, stores and loads key pairs as PEM. The store is generic over
the key category: each algorithm module builds a KeyStore with its wrapper
classes and the cryptography key classes it expects to find on disk.

Key files are created exclusively with mode 0644, so storing over an
existing file fails with FileExistsError.
"""

import logging
import secrets
from typing import BinaryIO, Callable, Generic, Optional, Type, TypeVar

from cryptbox.common.exceptions import CryptboxException
from cryptbox.common.options import BaseConfig
from cryptbox.common.rand import Reader
from cryptbox.common.utils import BytesLike, to_bytes, write_to, write_to_file
from cryptbox.crypto import x509

log = logging.getLogger(__name__)

PrivateT = TypeVar("PrivateT")
PublicT = TypeVar("PublicT")


class KeyConfig(BaseConfig):
    random: Reader = secrets.token_bytes
    seed: Optional[bytes] = None
    encode_private: Callable = x509.encode_pkcs8_private_key
    encode_public: Callable = x509.encode_pkix_public_key
    decode_private: Callable = x509.decode_pkcs8_private_key
    decode_public: Callable = x509.decode_pkix_public_key


KeyOption = Callable[[KeyConfig], None]


def with_key_random(random: Reader) -> KeyOption:
    """Use random(n) -> n bytes as the key generation source."""
    def apply(conf: KeyConfig) -> None:
        conf.random = random
    return apply


def with_key_seed(seed: BytesLike) -> KeyOption:
    """Derive the key pair deterministically from seed (Ed25519 only)."""
    def apply(conf: KeyConfig) -> None:
        conf.seed = to_bytes(seed)
    return apply


def with_key_encode_private(encoder: x509.KeyEncoder) -> KeyOption:
    """Serialize private keys with encoder, e.g. x509.encode_pkcs1_private_key."""
    def apply(conf: KeyConfig) -> None:
        conf.encode_private = encoder
    return apply


def with_key_encode_public(encoder: x509.KeyEncoder) -> KeyOption:
    """Serialize public keys with encoder, e.g. x509.encode_pkcs1_public_key."""
    def apply(conf: KeyConfig) -> None:
        conf.encode_public = encoder
    return apply


def with_key_decode_private(decoder: x509.KeyDecoder) -> KeyOption:
    """Parse private keys with decoder, e.g. x509.decode_pkcs1_private_key."""
    def apply(conf: KeyConfig) -> None:
        conf.decode_private = decoder
    return apply


def with_key_decode_public(decoder: x509.KeyDecoder) -> KeyOption:
    """Parse public keys with decoder, e.g. x509.decode_pkcs1_public_key."""
    def apply(conf: KeyConfig) -> None:
        conf.decode_public = decoder
    return apply


class KeyStore(Generic[PrivateT, PublicT]):
    """
    PEM persistence for one key category.

    Args:
        name: Algorithm label used in log messages
        private_type: cryptography private key class expected on decode
        public_type: cryptography public key class expected on decode
        wrap_private: Builds the wrapper for a decoded private key
        wrap_public: Builds the wrapper for a decoded public key

    Wrappers expose the underlying cryptography key as .key.
    """

    def __init__(
        self,
        name: str,
        private_type: Type,
        public_type: Type,
        wrap_private: Callable[[object], PrivateT],
        wrap_public: Callable[[object], PublicT],
    ):
        self.name = name
        self.private_type = private_type
        self.public_type = public_type
        self.wrap_private = wrap_private
        self.wrap_public = wrap_public

    def encode_private_key(self, key: PrivateT, *opts: KeyOption) -> bytes:
        conf = KeyConfig().apply(*opts)
        return conf.encode_private(key.key)

    def encode_public_key(self, key: PublicT, *opts: KeyOption) -> bytes:
        conf = KeyConfig().apply(*opts)
        return conf.encode_public(key.key)

    def parse_private_key(self, pem: BytesLike, *opts: KeyOption) -> PrivateT:
        """
        Decode a private key from PEM bytes.

        Raises:
            KeyFormatError: If the PEM block, DER or key category is wrong
        """
        conf = KeyConfig().apply(*opts)
        return self.wrap_private(conf.decode_private(to_bytes(pem), self.private_type))

    def parse_public_key(self, pem: BytesLike, *opts: KeyOption) -> PublicT:
        """
        Decode a public key from PEM bytes.

        Raises:
            KeyFormatError: If the PEM block, DER or key category is wrong
        """
        conf = KeyConfig().apply(*opts)
        return self.wrap_public(conf.decode_public(to_bytes(pem), self.public_type))

    def write_private_key(self, sink: BinaryIO, key: PrivateT, *opts: KeyOption) -> int:
        """Serialize key and write all of it to sink; returns bytes written."""
        return write_to(sink, self.encode_private_key(key, *opts))

    def write_public_key(self, sink: BinaryIO, key: PublicT, *opts: KeyOption) -> int:
        """Serialize key and write all of it to sink; returns bytes written."""
        return write_to(sink, self.encode_public_key(key, *opts))

    def read_private_key(self, source: BinaryIO, *opts: KeyOption) -> PrivateT:
        """Read source to the end and decode a private key."""
        return self.parse_private_key(source.read(), *opts)

    def read_public_key(self, source: BinaryIO, *opts: KeyOption) -> PublicT:
        """Read source to the end and decode a public key."""
        return self.parse_public_key(source.read(), *opts)

    def store_private_key(self, path: str, key: PrivateT, *opts: KeyOption) -> int:
        """
        Write a private key to a new file.

        Args:
            path: Target path, must not exist
            key: Private key wrapper
            opts: Codec options

        Returns:
            Number of bytes written

        Raises:
            FileExistsError: If path already exists
        """
        n = write_to_file(path, self.encode_private_key(key, *opts))
        log.debug("%s: stored private key to %s (%d bytes)", self.name, path, n)
        return n

    def store_public_key(self, path: str, key: PublicT, *opts: KeyOption) -> int:
        """Write a public key to a new file; see store_private_key()."""
        n = write_to_file(path, self.encode_public_key(key, *opts))
        log.debug("%s: stored public key to %s (%d bytes)", self.name, path, n)
        return n

    def load_private_key(self, path: str, *opts: KeyOption) -> PrivateT:
        """
        Load a private key from a PEM file.

        Raises:
            OSError: If the file cannot be read
            KeyFormatError: If the contents are not the expected key
        """
        with open(path, "rb") as f:
            key = self.read_private_key(f, *opts)
        log.debug("%s: loaded private key from %s", self.name, path)
        return key

    def load_public_key(self, path: str, *opts: KeyOption) -> PublicT:
        """Load a public key from a PEM file; see load_private_key()."""
        with open(path, "rb") as f:
            key = self.read_public_key(f, *opts)
        log.debug("%s: loaded public key from %s", self.name, path)
        return key

    def must_load_private_key(self, path: str, *opts: KeyOption) -> PrivateT:
        """
        Like load_private_key(), but any failure is fatal.

        Raises:
            RuntimeError: Chained to the underlying I/O or format error
        """
        try:
            return self.load_private_key(path, *opts)
        except (OSError, CryptboxException) as e:
            log.error("%s: failed to load private key from %s: %s", self.name, path, e)
            raise RuntimeError(f"{self.name}: cannot load private key {path}") from e

    def must_load_public_key(self, path: str, *opts: KeyOption) -> PublicT:
        """Like load_public_key(), but any failure is fatal."""
        try:
            return self.load_public_key(path, *opts)
        except (OSError, CryptboxException) as e:
            log.error("%s: failed to load public key from %s: %s", self.name, path, e)
            raise RuntimeError(f"{self.name}: cannot load public key {path}") from e
