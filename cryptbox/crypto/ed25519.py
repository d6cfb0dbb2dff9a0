"""
Ed25519 Digital Signatures

    private_key, public_key = generate_keys()
    signature = private_key.sign("message", with_hex())
    public_key.verify("message", signature, with_hex())

A 32-byte seed passed with with_key_seed() derives the same key pair every
time. Signing always produces pure Ed25519. The backend cannot verify the
pre-hashed (Ed25519ph) or context (Ed25519ctx) variants, so verify() raises
HashUnavailableError when either is requested.
"""

from typing import Any, Callable, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from cryptbox.common.exceptions import HashUnavailableError, InvalidKeyError, VerificationError
from cryptbox.common.options import EncodedConfig
from cryptbox.common.rand import read_full
from cryptbox.common.utils import Bytes, BytesLike, to_bytes, zeroize
from cryptbox.storage.keystore import KeyConfig, KeyOption, KeyStore

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64


class Ed25519Config(EncodedConfig):
    crypto_hash: Any = None
    context: bytes = b""


Ed25519Option = Callable[[Ed25519Config], None]


def with_crypto_hash(hash_id) -> Ed25519Option:
    """Request Ed25519ph with the given pre-hash."""
    def apply(conf: Ed25519Config) -> None:
        conf.crypto_hash = hash_id
    return apply


def with_context(context: BytesLike) -> Ed25519Option:
    """Request Ed25519ctx with the given context string."""
    def apply(conf: Ed25519Config) -> None:
        conf.context = to_bytes(context)
    return apply


def _check_variant(conf: Ed25519Config) -> None:
    if conf.crypto_hash is not None:
        raise HashUnavailableError(f"ed25519: pre-hash {conf.crypto_hash!r} (Ed25519ph) is not available")
    if conf.context:
        raise HashUnavailableError("ed25519: context signatures (Ed25519ctx) are not available")


class PublicKey:
    """Ed25519 public key."""

    def __init__(self, key: ed25519.Ed25519PublicKey):
        self._key = key

    @property
    def key(self) -> ed25519.Ed25519PublicKey:
        return self._key

    def bytes(self) -> Bytes:
        """Raw 32-byte public key."""
        return Bytes(self._key.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw))

    def verify(self, data: BytesLike, signature: BytesLike, *opts: Ed25519Option) -> None:
        """
        Verify a signature over data.

        Args:
            data: Signed message
            signature: Signature, encoded as configured
            opts: Encoding options

        Raises:
            DecodeError: If signature is not valid for the configured encoding
            HashUnavailableError: If Ed25519ph or Ed25519ctx was requested
            VerificationError: If the signature does not match
        """
        conf = Ed25519Config().apply(*opts)
        signature = conf.encoding.decode(signature)
        _check_variant(conf)

        try:
            self._key.verify(signature, to_bytes(data))
        except InvalidSignature as e:
            raise VerificationError("ed25519: verification failed") from e

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.bytes() == other.bytes()

    def __hash__(self) -> int:
        return hash(self.bytes())

    def __repr__(self) -> str:
        return f"ed25519.PublicKey({self.bytes().hex()})"


class PrivateKey:
    """Ed25519 private key."""

    def __init__(self, key: ed25519.Ed25519PrivateKey):
        self._key = key

    @property
    def key(self) -> ed25519.Ed25519PrivateKey:
        return self._key

    def seed(self) -> Bytes:
        """The 32-byte seed the key was derived from."""
        return Bytes(self._key.private_bytes(
            serialization.Encoding.Raw,
            serialization.PrivateFormat.Raw,
            serialization.NoEncryption(),
        ))

    def bytes(self) -> Bytes:
        """64-byte private key: seed followed by the public key."""
        return Bytes(self.seed() + self.public_key().bytes())

    def public_key(self) -> PublicKey:
        return PublicKey(self._key.public_key())

    def sign(self, data: BytesLike, *opts: Ed25519Option) -> Bytes:
        """
        Sign data. Ed25519 is deterministic, so equal inputs give equal signatures.

        Args:
            data: Message to sign
            opts: Encoding options; the pre-hash and context options are
                ignored and the signature is always pure Ed25519

        Returns:
            64-byte signature, encoded as configured
        """
        conf = Ed25519Config().apply(*opts)

        signature = self._key.sign(to_bytes(data))
        return Bytes(conf.encoding.encode(signature))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.seed() == other.seed()

    def __hash__(self) -> int:
        return hash(self.public_key())

    def __repr__(self) -> str:
        return f"ed25519.PrivateKey({self.public_key().bytes().hex()})"


def generate_keys(*opts: KeyOption) -> Tuple[PrivateKey, PublicKey]:
    """
    Generate an Ed25519 key pair.

    Args:
        opts: with_key_seed() for a deterministic pair, or with_key_random()
            to replace the OS CSPRNG

    Returns:
        Tuple of (private_key, public_key)

    Raises:
        InvalidKeyError: If a seed is given that is not 32 bytes
        RandomError: If the random source returns a short read
    """
    conf = KeyConfig().apply(*opts)

    if conf.seed:
        if len(conf.seed) != SEED_SIZE:
            raise InvalidKeyError(f"ed25519: len(seed) {len(conf.seed)} != {SEED_SIZE}")
        key = ed25519.Ed25519PrivateKey.from_private_bytes(conf.seed)
    else:
        seed = bytearray(read_full(conf.random, SEED_SIZE))
        try:
            key = ed25519.Ed25519PrivateKey.from_private_bytes(bytes(seed))
        finally:
            zeroize(seed)

    private_key = PrivateKey(key)
    return private_key, private_key.public_key()


_store = KeyStore("ed25519", ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey, PrivateKey, PublicKey)

encode_private_key = _store.encode_private_key
encode_public_key = _store.encode_public_key
parse_private_key = _store.parse_private_key
parse_public_key = _store.parse_public_key
write_private_key = _store.write_private_key
write_public_key = _store.write_public_key
read_private_key = _store.read_private_key
read_public_key = _store.read_public_key
store_private_key = _store.store_private_key
store_public_key = _store.store_public_key
load_private_key = _store.load_private_key
load_public_key = _store.load_public_key
must_load_private_key = _store.must_load_private_key
must_load_public_key = _store.must_load_public_key
