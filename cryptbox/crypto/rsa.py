"""
RSA Encryption and Digital Signatures

Key pairs are wrapped in PrivateKey/PublicKey, which carry the operations:

    private_key, public_key = generate_keys(2048)
    crypted = public_key.encrypt_oaep("secret", b"", with_base64())
    plain = private_key.decrypt_oaep(crypted, b"", with_base64())

    digest = hash.sha256("message")
    signature = private_key.sign_pss(digest)
    public_key.verify_pss(digest, signature)

Signing takes a precomputed digest of the message; its length must match the
configured crypto hash (SHA-256 by default).

Key objects, PKCS#1 v1.5 signing and all verification run on cryptography.
Operations that draw randomness (padding, PSS salts, key generation) and the
padding checks of decryption run on pycryptodome, which takes the configured
random source and reports bad padding explicitly.
"""

import functools
import secrets
from typing import Any, Callable, Optional, Tuple

from Crypto.Cipher import PKCS1_OAEP, PKCS1_v1_5
from Crypto.Hash import MD5, SHA1, SHA224, SHA256, SHA384, SHA512, SHA3_224, SHA3_256, SHA3_384, SHA3_512
from Crypto.PublicKey import RSA
from Crypto.Signature import pss
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils

from cryptbox.common.exceptions import (
    DecryptionError,
    HashUnavailableError,
    InvalidKeyError,
    InvalidLengthError,
    MessageTooLongError,
    VerificationError,
)
from cryptbox.common.options import EncodedConfig
from cryptbox.common.rand import Reader, read_full
from cryptbox.common.utils import Bytes, BytesLike, to_bytes
from cryptbox.storage.keystore import KeyConfig, KeyOption, KeyStore

from .hash import resolve_algorithm

PUBLIC_EXPONENT = 65537

# PSS salt lengths.
SALT_LENGTH_AUTO = 0
SALT_LENGTH_EQUALS_HASH = -1

# pycryptodome hash modules, keyed by cryptography algorithm name.
ENGINE_HASHES = {
    "md5": MD5,
    "sha1": SHA1,
    "sha224": SHA224,
    "sha256": SHA256,
    "sha384": SHA384,
    "sha512": SHA512,
    "sha3-224": SHA3_224,
    "sha3-256": SHA3_256,
    "sha3-384": SHA3_384,
    "sha3-512": SHA3_512,
}


class RSAConfig(EncodedConfig):
    random: Reader = secrets.token_bytes
    hash: Any = hashes.SHA256()
    crypto_hash: Any = hashes.SHA256()
    salt_length: int = SALT_LENGTH_AUTO


RSAOption = Callable[[RSAConfig], None]


def with_random(random: Reader) -> RSAOption:
    """
    Set the random source for encryption padding and PSS salts.

    random(n) must return n bytes; a short read raises RandomError.
    """
    def apply(conf: RSAConfig) -> None:
        conf.random = random
    return apply


def with_hash(hash_id) -> RSAOption:
    """Set the OAEP hash (a name such as "sha1" or a HashAlgorithm)."""
    def apply(conf: RSAConfig) -> None:
        conf.hash = hash_id
    return apply


def with_crypto_hash(hash_id) -> RSAOption:
    """Set the digest identity used by PKCS#1 v1.5 and PSS signatures."""
    def apply(conf: RSAConfig) -> None:
        conf.crypto_hash = hash_id
    return apply


def with_salt(salt_length: int) -> RSAOption:
    """
    Set the PSS salt length.

    SALT_LENGTH_AUTO (0) signs with the largest salt and detects it when
    verifying; SALT_LENGTH_EQUALS_HASH (-1) uses the digest length.
    """
    def apply(conf: RSAConfig) -> None:
        conf.salt_length = salt_length
    return apply


def _algorithm(hash_id) -> hashes.HashAlgorithm:
    try:
        return resolve_algorithm(hash_id)
    except UnsupportedAlgorithm as e:
        raise HashUnavailableError(f"rsa: hash {hash_id!r} is not available") from e


def _engine_hash(algorithm: hashes.HashAlgorithm):
    try:
        return ENGINE_HASHES[algorithm.name]
    except KeyError:
        raise HashUnavailableError(f"rsa: hash {algorithm.name} is not available") from None


def _randfunc(random: Reader) -> Reader:
    return functools.partial(read_full, random)


def _label(label: Optional[BytesLike]) -> bytes:
    if callable(label):
        raise TypeError("rsa: oaep label must be bytes, pass options after the label")
    return to_bytes(label) if label else b""


def _pss(conf: RSAConfig, algorithm: hashes.HashAlgorithm) -> padding.PSS:
    if conf.salt_length == SALT_LENGTH_AUTO:
        salt_length = padding.PSS.AUTO
    elif conf.salt_length == SALT_LENGTH_EQUALS_HASH:
        salt_length = padding.PSS.DIGEST_LENGTH
    else:
        salt_length = conf.salt_length
    return padding.PSS(mgf=padding.MGF1(algorithm), salt_length=salt_length)


def _pss_salt_length(conf: RSAConfig, key_size: int, digest_size: int) -> int:
    if conf.salt_length == SALT_LENGTH_AUTO:
        # Largest salt that fits: emLen - hLen - 2 with emBits = modBits - 1.
        return (key_size + 6) // 8 - digest_size - 2
    if conf.salt_length == SALT_LENGTH_EQUALS_HASH:
        return digest_size
    return conf.salt_length


def _check_digest(digest: bytes, algorithm: hashes.HashAlgorithm) -> None:
    if len(digest) != algorithm.digest_size:
        raise InvalidLengthError(
            f"rsa: len(digest) {len(digest)} != {algorithm.name} size {algorithm.digest_size}"
        )


class _Prehashed:
    """A finished digest presented as a pycryptodome hash object."""

    def __init__(self, module, digest: bytes):
        self._module = module
        self._digest = digest
        self.digest_size = module.digest_size

    def digest(self) -> bytes:
        return self._digest

    def new(self, data=None):
        return self._module.new(data)


def _engine_public(key: rsa.RSAPublicKey) -> RSA.RsaKey:
    numbers = key.public_numbers()
    return RSA.construct((numbers.n, numbers.e))


def _engine_private(key: rsa.RSAPrivateKey) -> RSA.RsaKey:
    numbers = key.private_numbers()
    public = numbers.public_numbers
    return RSA.construct((public.n, public.e, numbers.d, numbers.p, numbers.q), consistency_check=False)


def _from_engine(engine: RSA.RsaKey) -> rsa.RSAPrivateKey:
    p, q, d = engine.p, engine.q, engine.d
    numbers = rsa.RSAPrivateNumbers(
        p=p,
        q=q,
        d=d,
        dmp1=rsa.rsa_crt_dmp1(d, p),
        dmq1=rsa.rsa_crt_dmq1(d, q),
        iqmp=rsa.rsa_crt_iqmp(p, q),
        public_numbers=rsa.RSAPublicNumbers(engine.e, engine.n),
    )
    return numbers.private_key()


class PublicKey:
    """RSA public key with encryption and verification operations."""

    def __init__(self, key: rsa.RSAPublicKey):
        self._key = key
        self._engine = _engine_public(key)

    @property
    def key(self) -> rsa.RSAPublicKey:
        return self._key

    def size(self) -> int:
        """Modulus length in bytes."""
        return (self._key.key_size + 7) // 8

    def encrypt_pkcs1v15(self, msg: BytesLike, *opts: RSAOption) -> Bytes:
        """
        Encrypt with RSAES-PKCS1-v1_5.

        Args:
            msg: Message, at most size() - 11 bytes
            opts: Random source and encoding options

        Returns:
            Ciphertext

        Raises:
            MessageTooLongError: If msg does not fit the modulus
            RandomError: If the random source returns a short read
        """
        conf = RSAConfig().apply(*opts)
        msg = to_bytes(msg)

        if len(msg) > self.size() - 11:
            raise MessageTooLongError(
                f"rsa: message of {len(msg)} bytes too long for pkcs1v15 with {self.size()}-byte modulus"
            )

        cipher = PKCS1_v1_5.new(self._engine, randfunc=_randfunc(conf.random))
        crypted = cipher.encrypt(msg)
        return Bytes(conf.encoding.encode(crypted))

    def encrypt_oaep(self, msg: BytesLike, label: Optional[BytesLike], *opts: RSAOption) -> Bytes:
        """
        Encrypt with RSAES-OAEP using the configured hash for OAEP and MGF1.

        Args:
            msg: Message, at most size() - 2 * hash size - 2 bytes
            label: OAEP label (None or b"" for none), must match on decrypt
            opts: Hash, random source and encoding options

        Returns:
            Ciphertext

        Raises:
            MessageTooLongError: If msg does not fit the modulus
            HashUnavailableError: If the hash is unknown
            RandomError: If the random source returns a short read
        """
        conf = RSAConfig().apply(*opts)
        label = _label(label)
        algorithm = _algorithm(conf.hash)
        module = _engine_hash(algorithm)
        msg = to_bytes(msg)

        limit = self.size() - 2 * algorithm.digest_size - 2
        if len(msg) > limit:
            raise MessageTooLongError(
                f"rsa: message of {len(msg)} bytes too long for oaep, limit {limit}"
            )

        cipher = PKCS1_OAEP.new(self._engine, hashAlgo=module, label=label, randfunc=_randfunc(conf.random))
        crypted = cipher.encrypt(msg)
        return Bytes(conf.encoding.encode(crypted))

    def verify_pkcs1v15(self, hashed: BytesLike, signature: BytesLike, *opts: RSAOption) -> None:
        """
        Verify an RSASSA-PKCS1-v1_5 signature over a precomputed digest.

        Raises:
            DecodeError: If signature is not valid for the configured encoding
            VerificationError: If the signature does not match
        """
        conf = RSAConfig().apply(*opts)
        signature = conf.encoding.decode(signature)
        algorithm = _algorithm(conf.crypto_hash)

        try:
            self._key.verify(signature, to_bytes(hashed), padding.PKCS1v15(), utils.Prehashed(algorithm))
        except (InvalidSignature, ValueError) as e:
            raise VerificationError("rsa: pkcs1v15 verification failed") from e

    def verify_pss(self, digest: BytesLike, signature: BytesLike, *opts: RSAOption) -> None:
        """
        Verify an RSASSA-PSS signature over a precomputed digest.

        Raises:
            DecodeError: If signature is not valid for the configured encoding
            HashUnavailableError: If the crypto hash is unknown
            VerificationError: If the signature does not match
        """
        conf = RSAConfig().apply(*opts)
        signature = conf.encoding.decode(signature)
        algorithm = _algorithm(conf.crypto_hash)

        try:
            self._key.verify(signature, to_bytes(digest), _pss(conf, algorithm), utils.Prehashed(algorithm))
        except (InvalidSignature, ValueError) as e:
            raise VerificationError("rsa: pss verification failed") from e

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._key.public_numbers() == other._key.public_numbers()

    def __hash__(self) -> int:
        return hash(self._key.public_numbers())

    def __repr__(self) -> str:
        return f"rsa.PublicKey({self._key.key_size} bits)"


class PrivateKey:
    """RSA private key with decryption and signing operations."""

    def __init__(self, key: rsa.RSAPrivateKey):
        self._key = key
        self._engine = _engine_private(key)

    @property
    def key(self) -> rsa.RSAPrivateKey:
        return self._key

    def size(self) -> int:
        """Modulus length in bytes."""
        return (self._key.key_size + 7) // 8

    def public_key(self) -> PublicKey:
        return PublicKey(self._key.public_key())

    def decrypt_pkcs1v15(self, crypted: BytesLike, *opts: RSAOption) -> Bytes:
        """
        Decrypt RSAES-PKCS1-v1_5 ciphertext.

        Raises:
            DecodeError: If crypted is not valid for the configured encoding
            DecryptionError: If crypted has the wrong length or bad padding
        """
        conf = RSAConfig().apply(*opts)
        crypted = conf.encoding.decode(crypted)

        failed = object()
        try:
            plain = PKCS1_v1_5.new(self._engine).decrypt(crypted, failed)
        except ValueError as e:
            raise DecryptionError(f"rsa: pkcs1v15 decryption failed: {e}") from e

        if plain is failed:
            raise DecryptionError("rsa: pkcs1v15 decryption failed")
        return Bytes(plain)

    def decrypt_pkcs1v15_session_key(self, crypted: BytesLike, out: bytearray, *opts: RSAOption) -> None:
        """
        Decrypt a PKCS1-v1_5 encrypted session key into out.

        Callers fill out with random bytes first. out is overwritten only
        when the padding is valid and the recovered key has exactly len(out)
        bytes; otherwise it keeps its random contents and no error is
        raised, so a padding failure is indistinguishable from success.

        Raises:
            DecodeError: If crypted is not valid for the configured encoding
            DecryptionError: If out cannot fit the modulus or crypted has
                the wrong length
        """
        conf = RSAConfig().apply(*opts)
        crypted = conf.encoding.decode(crypted)

        k = self.size()
        if len(out) + 11 > k:
            raise DecryptionError(f"rsa: session key of {len(out)} bytes does not fit {k}-byte modulus")
        if len(crypted) != k:
            raise DecryptionError(f"rsa: len(crypted) {len(crypted)} != modulus size {k}")

        # The sentinel comes back unchanged on bad padding or a length mismatch.
        cipher = PKCS1_v1_5.new(self._engine)
        out[:] = cipher.decrypt(crypted, bytes(out), expected_pt_len=len(out))

    def decrypt_oaep(self, crypted: BytesLike, label: Optional[BytesLike], *opts: RSAOption) -> Bytes:
        """
        Decrypt RSAES-OAEP ciphertext.

        Raises:
            DecodeError: If crypted is not valid for the configured encoding
            HashUnavailableError: If the hash is unknown
            DecryptionError: If decryption fails or label differs
        """
        conf = RSAConfig().apply(*opts)
        label = _label(label)
        crypted = conf.encoding.decode(crypted)
        module = _engine_hash(_algorithm(conf.hash))

        try:
            plain = PKCS1_OAEP.new(self._engine, hashAlgo=module, label=label).decrypt(crypted)
        except ValueError as e:
            raise DecryptionError("rsa: oaep decryption failed") from e

        return Bytes(plain)

    def sign_pkcs1v15(self, hashed: BytesLike, *opts: RSAOption) -> Bytes:
        """
        Sign a precomputed digest with RSASSA-PKCS1-v1_5.

        Args:
            hashed: Digest of the message under the crypto hash
            opts: Crypto hash and encoding options

        Returns:
            Signature

        Raises:
            HashUnavailableError: If the crypto hash is unknown
            InvalidLengthError: If hashed is not a digest of the crypto hash
        """
        conf = RSAConfig().apply(*opts)
        algorithm = _algorithm(conf.crypto_hash)
        hashed = to_bytes(hashed)
        _check_digest(hashed, algorithm)

        signature = self._key.sign(hashed, padding.PKCS1v15(), utils.Prehashed(algorithm))
        return Bytes(conf.encoding.encode(signature))

    def sign_pss(self, digest: BytesLike, *opts: RSAOption) -> Bytes:
        """
        Sign a precomputed digest with RSASSA-PSS.

        The salt is drawn from the configured random source, so a fixed
        source yields a fixed signature.

        Args:
            digest: Digest of the message under the crypto hash
            opts: Crypto hash, salt length, random source and encoding options

        Returns:
            Signature

        Raises:
            HashUnavailableError: If the crypto hash is unknown
            InvalidLengthError: If digest is not a digest of the crypto hash,
                or the salt does not fit the modulus
            RandomError: If the random source returns a short read
        """
        conf = RSAConfig().apply(*opts)
        algorithm = _algorithm(conf.crypto_hash)
        module = _engine_hash(algorithm)
        digest = to_bytes(digest)
        _check_digest(digest, algorithm)

        signer = pss.new(
            self._engine,
            mask_func=lambda seed, length: pss.MGF1(seed, length, module),
            salt_bytes=_pss_salt_length(conf, self._key.key_size, algorithm.digest_size),
            rand_func=_randfunc(conf.random),
        )
        try:
            signature = signer.sign(_Prehashed(module, digest))
        except ValueError as e:
            raise InvalidLengthError(f"rsa: pss salt does not fit {self.size()}-byte modulus") from e

        return Bytes(conf.encoding.encode(signature))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._key.private_numbers() == other._key.private_numbers()

    def __hash__(self) -> int:
        return hash(self._key.public_key().public_numbers())

    def __repr__(self) -> str:
        return f"rsa.PrivateKey({self._key.key_size} bits)"


def generate_keys(bits: int, *opts: KeyOption) -> Tuple[PrivateKey, PublicKey]:
    """
    Generate an RSA key pair.

    Args:
        bits: Modulus size, at least 1024; typically 2048 or 4096
        opts: Key options; with_key_random() replaces the OS CSPRNG, and a
            deterministic source yields the same pair every time

    Returns:
        Tuple of (private_key, public_key)

    Raises:
        InvalidKeyError: If bits is rejected
        RandomError: If the random source returns a short read
    """
    conf = KeyConfig().apply(*opts)

    try:
        engine = RSA.generate(bits, randfunc=_randfunc(conf.random), e=PUBLIC_EXPONENT)
    except ValueError as e:
        raise InvalidKeyError(f"rsa: cannot generate {bits}-bit key: {e}") from e

    private_key = PrivateKey(_from_engine(engine))
    return private_key, private_key.public_key()


_store = KeyStore("rsa", rsa.RSAPrivateKey, rsa.RSAPublicKey, PrivateKey, PublicKey)

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
