"""
Random byte and string generation.

The default source is the operating system CSPRNG via the secrets module.
with_weak() switches to a seeded PRNG that draws from the 62-character
alphanumeric alphabet. The weak source exists for IV and key placeholders
in demos and tests; never use it for production keys.
"""

import logging
import random
import secrets
import threading
import time
from typing import Callable, Optional

from .exceptions import RandomError
from .options import BaseConfig

log = logging.getLogger(__name__)

WORDS = b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Source of random bytes: called with n, returns n bytes.
Reader = Callable[[int], bytes]

_weak_source = random.Random(time.time_ns())
_weak_lock = threading.Lock()
_weak_warned = False


class RandConfig(BaseConfig):
    weak: bool = False


RandOption = Callable[[RandConfig], None]


def with_weak() -> RandOption:
    """Use the non-cryptographic PRNG instead of the OS CSPRNG."""
    def apply(conf: RandConfig) -> None:
        conf.weak = True
    return apply


def read_full(reader: Reader, n: int) -> bytes:
    """
    Read exactly n bytes from reader.

    Raises:
        RandomError: If the reader returns fewer or more than n bytes
    """
    data = reader(n)
    if len(data) != n:
        raise RandomError(f"random source returned {len(data)} of {n} bytes")
    return bytes(data)


def append_bytes(dst: Optional[bytearray], n: int) -> bytearray:
    """
    Append n weak alphanumeric bytes to dst.

    Args:
        dst: Buffer to extend (a new one is created when None)
        n: Number of bytes to append

    Returns:
        dst with n printable bytes appended
    """
    global _weak_warned

    if dst is None:
        dst = bytearray()

    with _weak_lock:
        if not _weak_warned:
            log.warning("weak random source in use; output is not suitable for keys")
            _weak_warned = True

        for _ in range(n):
            dst.append(WORDS[_weak_source.randrange(len(WORDS))])

    return dst


def generate_bytes(n: int, *opts: RandOption) -> bytes:
    """
    Generate n random bytes.

    Args:
        n: Number of bytes
        opts: with_weak() to use the alphanumeric PRNG

    Returns:
        n bytes from the selected source
    """
    conf = RandConfig().apply(*opts)
    if conf.weak:
        return bytes(append_bytes(bytearray(), n))

    return read_full(secrets.token_bytes, n)


def generate_string(n: int, *opts: RandOption) -> str:
    """Generate an alphanumeric string of length n."""
    conf = RandConfig().apply(*opts)
    if conf.weak:
        return append_bytes(bytearray(), n).decode('ascii')

    return ''.join(chr(secrets.choice(WORDS)) for _ in range(n))
