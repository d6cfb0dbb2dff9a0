"""
Byte utilities for cryptbox.

Bytes is the value type returned by every facade call: a plain immutable
byte string with a few helpers for rendering and persisting it.
"""

import base64
import os
from typing import BinaryIO, Union

# Files are created exclusively so an existing key is never overwritten.
FILE_FLAGS = os.O_CREAT | os.O_EXCL | os.O_WRONLY
FILE_MODE = 0o644

BytesLike = Union[bytes, bytearray, memoryview, str]


def to_bytes(data: BytesLike) -> bytes:
    """
    Coerce a text or bytes-like value to bytes.

    Text is encoded as UTF-8 so callers can pass literals like "你好，世界".
    """
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)


def clone(data: BytesLike) -> bytearray:
    """
    Return a mutable copy of data that does not alias the caller's buffer.

    Args:
        data: Bytes to copy

    Returns:
        A fresh bytearray holding the same bytes
    """
    return bytearray(to_bytes(data))


def zeroize(buffer: bytearray) -> None:
    """Overwrite buffer with zeros in place."""
    buffer[:] = bytes(len(buffer))


def write_to(sink: BinaryIO, data: bytes) -> int:
    """
    Write all of data to a binary sink.

    Raises:
        OSError: If the sink accepts fewer bytes than given
    """
    n = sink.write(data)
    if n is not None and n != len(data):
        raise OSError(f"short write: wrote {n} of {len(data)} bytes")
    return len(data)


def write_to_file(path: str, data: bytes) -> int:
    """
    Write data to a new file at path with mode 0644.

    The file is opened with create|exclusive|write-only, so this fails with
    FileExistsError when path is already taken. The descriptor is closed on
    every exit path.

    Args:
        path: Target file path
        data: Bytes to write

    Returns:
        Number of bytes written
    """
    fd = os.open(path, FILE_FLAGS, FILE_MODE)
    with os.fdopen(fd, 'wb') as f:
        return write_to(f, data)


class Bytes(bytes):
    """
    Immutable byte string with hex/base64 views and file helpers.

    Bytes subclasses bytes, so it compares equal to plain bytes with the
    same content and can be passed anywhere bytes are accepted. Text is
    encoded as UTF-8.
    """

    def __new__(cls, data: BytesLike = b""):
        return super().__new__(cls, to_bytes(data))

    def base64(self) -> str:
        """Standard-alphabet base64 with '=' padding."""
        return base64.b64encode(self).decode('ascii')

    def string(self) -> str:
        """Decode as UTF-8 text."""
        return self.decode('utf-8')

    def clone(self) -> "Bytes":
        return Bytes(bytearray(self))

    def write_to(self, sink: BinaryIO) -> int:
        return write_to(sink, self)

    def write_to_file(self, path: str) -> int:
        return write_to_file(path, self)

    def __repr__(self) -> str:
        return f"Bytes({bytes(self)!r})"
