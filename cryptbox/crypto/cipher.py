"""
Block-cipher mode engine shared by the AES, DES and 3DES facades.

Every call follows the same pipeline:

    encrypt: validate key/IV -> clone -> pad -> mode transform -> encode
    decrypt: validate key/IV -> decode -> mode transform -> unpad

The caller's buffer is never used as working storage. The block transforms
themselves come from the cryptography package.
"""

from enum import Enum
from typing import Callable, Optional, Sequence, Type

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, BlockCipherAlgorithm, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
except ImportError:
    # cryptography < 45 keeps CFB and OFB with the other modes.
    from cryptography.hazmat.primitives.ciphers.modes import CFB, OFB

from cryptbox.common.exceptions import (
    AuthenticationError,
    InvalidIVError,
    InvalidKeyError,
    InvalidLengthError,
    InvalidNonceError,
)
from cryptbox.common.options import EncodedConfig
from cryptbox.common.padding import Padding
from cryptbox.common.utils import Bytes, BytesLike, clone, to_bytes

GCM_STANDARD_NONCE_SIZE = 12
GCM_MIN_NONCE_SIZE = 8
GCM_MAX_NONCE_SIZE = 128
GCM_TAG_SIZE = 16


class CipherConfig(EncodedConfig):
    padding: Padding = Padding.NONE
    additional: bytes = b""


CipherOption = Callable[[CipherConfig], None]


def with_zero() -> CipherOption:
    """Pad with zero bytes."""
    def apply(conf: CipherConfig) -> None:
        conf.padding = Padding.ZERO
    return apply


def with_pkcs5() -> CipherOption:
    """Pad with PKCS#5 (same bytes as PKCS#7)."""
    def apply(conf: CipherConfig) -> None:
        conf.padding = Padding.PKCS5
    return apply


def with_pkcs7() -> CipherOption:
    """Pad with PKCS#7."""
    def apply(conf: CipherConfig) -> None:
        conf.padding = Padding.PKCS7
    return apply


def with_additional(additional: BytesLike) -> CipherOption:
    """Set the associated data authenticated by GCM."""
    def apply(conf: CipherConfig) -> None:
        conf.additional = to_bytes(additional)
    return apply


class Mode(Enum):
    ECB = "ecb"
    CBC = "cbc"
    CFB = "cfb"
    OFB = "ofb"
    CTR = "ctr"

    @property
    def needs_iv(self) -> bool:
        return self is not Mode.ECB

    @property
    def block_aligned(self) -> bool:
        return self in (Mode.ECB, Mode.CBC)

    def new(self, iv: Optional[bytes]) -> modes.Mode:
        if self is Mode.ECB:
            return modes.ECB()
        if self is Mode.CBC:
            return modes.CBC(iv)
        if self is Mode.CFB:
            return CFB(iv)
        if self is Mode.OFB:
            return OFB(iv)
        return modes.CTR(iv)


class BlockFamily:
    """
    A block cipher the facade knows how to drive.

    Args:
        name: Label used in error messages
        key_sizes: Accepted key lengths in bytes
        block_size: Block size in bytes
        algorithm: cryptography algorithm class built from the key
        key_schedule: Maps the user key to the key handed to algorithm
        native_ctr: Whether the backend offers CTR for this algorithm
    """

    def __init__(
        self,
        name: str,
        key_sizes: Sequence[int],
        block_size: int,
        algorithm: Type[BlockCipherAlgorithm],
        key_schedule: Callable[[bytes], bytes] = bytes,
        native_ctr: bool = True,
    ):
        self.name = name
        self.key_sizes = tuple(key_sizes)
        self.block_size = block_size
        self.algorithm = algorithm
        self.key_schedule = key_schedule
        self.native_ctr = native_ctr

    def new_algorithm(self, key: BytesLike) -> BlockCipherAlgorithm:
        key = to_bytes(key)
        if len(key) not in self.key_sizes:
            raise InvalidKeyError(
                f"{self.name}: invalid key size {len(key)}, expect one of {list(self.key_sizes)}"
            )
        return self.algorithm(self.key_schedule(key))

    def check_iv(self, iv: Optional[BytesLike]) -> bytes:
        if iv is None:
            raise InvalidIVError(f"{self.name}: iv is required")

        iv = to_bytes(iv)
        if len(iv) != self.block_size:
            raise InvalidIVError(
                f"{self.name}: len(iv) {len(iv)} != block size {self.block_size}"
            )
        return iv

    def __repr__(self) -> str:
        return f"BlockFamily({self.name!r})"


def _ctr_keystream(algorithm: BlockCipherAlgorithm, iv: bytes, length: int, block_size: int) -> bytes:
    # Counter blocks are the IV read as one big-endian integer, incremented per block.
    blocks = -(-length // block_size)
    counter = int.from_bytes(iv, 'big')
    modulus = 1 << (8 * block_size)

    counters = b''.join(
        ((counter + i) % modulus).to_bytes(block_size, 'big') for i in range(blocks)
    )

    encryptor = Cipher(algorithm, modes.ECB()).encryptor()
    stream = encryptor.update(counters) + encryptor.finalize()
    return stream[:length]


def _transform(
    family: BlockFamily,
    algorithm: BlockCipherAlgorithm,
    mode: Mode,
    iv: Optional[bytes],
    src: bytes,
    encrypt: bool,
) -> bytes:
    if mode is Mode.CTR and not family.native_ctr:
        stream = _ctr_keystream(algorithm, iv, len(src), family.block_size)
        return bytes(a ^ b for a, b in zip(src, stream))

    cipher = Cipher(algorithm, mode.new(iv))
    context = cipher.encryptor() if encrypt else cipher.decryptor()
    return context.update(src) + context.finalize()


def encrypt(
    family: BlockFamily,
    mode: Mode,
    plain: BytesLike,
    key: BytesLike,
    iv: Optional[BytesLike],
    *opts: CipherOption,
) -> Bytes:
    """
    Encrypt plain with family in mode.

    Args:
        family: Block cipher family
        mode: Block mode
        plain: Plaintext bytes (or text, encoded as UTF-8)
        key: Cipher key
        iv: Initialization vector (ignored for ECB)
        opts: Padding and encoding options

    Returns:
        Ciphertext, encoded as configured

    Raises:
        InvalidKeyError: If key length is not accepted
        InvalidIVError: If iv is missing or has the wrong length
        InvalidLengthError: If padded input is not block aligned in ECB/CBC
    """
    conf = CipherConfig().apply(*opts)

    algorithm = family.new_algorithm(key)
    if mode.needs_iv:
        iv = family.check_iv(iv)

    src = conf.padding.pad(clone(plain), family.block_size)
    if mode.block_aligned and len(src) % family.block_size != 0:
        raise InvalidLengthError(
            f"{family.name}: encrypt {mode.value} len(src) {len(src)} % block size {family.block_size} != 0"
        )

    dst = _transform(family, algorithm, mode, iv, src, encrypt=True)
    return Bytes(conf.encoding.encode(dst))


def decrypt(
    family: BlockFamily,
    mode: Mode,
    crypted: BytesLike,
    key: BytesLike,
    iv: Optional[BytesLike],
    *opts: CipherOption,
) -> Bytes:
    """
    Decrypt crypted with family in mode.

    Raises:
        InvalidKeyError: If key length is not accepted
        InvalidIVError: If iv is missing or has the wrong length
        DecodeError: If crypted is not valid for the configured encoding
        InvalidLengthError: If ciphertext is not block aligned in ECB/CBC
        InvalidPaddingError: If PKCS#7 unpadding fails
    """
    conf = CipherConfig().apply(*opts)

    algorithm = family.new_algorithm(key)
    if mode.needs_iv:
        iv = family.check_iv(iv)

    src = conf.encoding.decode(crypted)
    if mode.block_aligned and len(src) % family.block_size != 0:
        raise InvalidLengthError(
            f"{family.name}: decrypt {mode.value} len(src) {len(src)} % block size {family.block_size} != 0"
        )

    dst = _transform(family, algorithm, mode, iv, src, encrypt=False)
    return Bytes(conf.padding.unpad(dst, family.block_size))


def _check_nonce(nonce: Optional[BytesLike]) -> bytes:
    if nonce is None:
        raise InvalidNonceError("gcm: nonce is required")

    nonce = to_bytes(nonce)
    if not GCM_MIN_NONCE_SIZE <= len(nonce) <= GCM_MAX_NONCE_SIZE:
        raise InvalidNonceError(
            f"gcm: len(nonce) {len(nonce)} not in [{GCM_MIN_NONCE_SIZE}, {GCM_MAX_NONCE_SIZE}]"
        )
    return nonce


def encrypt_gcm(
    family: BlockFamily,
    plain: BytesLike,
    key: BytesLike,
    nonce: BytesLike,
    *opts: CipherOption,
) -> Bytes:
    """
    Seal plain with GCM; the result is ciphertext || 16-byte tag.

    Padding options are ignored. with_additional() sets associated data.
    """
    conf = CipherConfig().apply(*opts)

    family.new_algorithm(key)
    nonce = _check_nonce(nonce)

    aead = AESGCM(to_bytes(key))
    dst = aead.encrypt(nonce, bytes(clone(plain)), conf.additional or None)
    return Bytes(conf.encoding.encode(dst))


def decrypt_gcm(
    family: BlockFamily,
    crypted: BytesLike,
    key: BytesLike,
    nonce: BytesLike,
    *opts: CipherOption,
) -> Bytes:
    """
    Open a GCM ciphertext || tag.

    Raises:
        AuthenticationError: If the tag does not authenticate the ciphertext,
            nonce, key and associated data
    """
    conf = CipherConfig().apply(*opts)

    family.new_algorithm(key)
    nonce = _check_nonce(nonce)
    src = conf.encoding.decode(crypted)

    aead = AESGCM(to_bytes(key))
    try:
        dst = aead.decrypt(nonce, src, conf.additional or None)
    except InvalidTag as e:
        raise AuthenticationError(f"{family.name}: gcm authentication failed") from e

    return Bytes(dst)
