"""
Block padding schemes.

PKCS5 is the historical name of PKCS7 for 8-byte blocks; both members share
one code path and differ only in their label.
"""

from enum import Enum

from .exceptions import InvalidPaddingError


class Padding(Enum):
    NONE = "none"
    ZERO = "zero"
    PKCS5 = "pkcs5"
    PKCS7 = "pkcs7"

    def pad(self, data: bytes, block_size: int) -> bytes:
        """
        Pad data up to a multiple of block_size.

        ZERO and PKCS5/PKCS7 always append between 1 and block_size bytes,
        so block-aligned input gains a full block.

        Args:
            data: Bytes to pad
            block_size: Cipher block size in bytes

        Returns:
            Padded bytes
        """
        if self is Padding.NONE:
            return bytes(data)

        count = block_size - (len(data) % block_size)
        if self is Padding.ZERO:
            return bytes(data) + bytes(count)
        return bytes(data) + bytes([count]) * count

    def unpad(self, data: bytes, block_size: int) -> bytes:
        """
        Remove padding added by pad().

        ZERO strips trailing zero bytes, at most block_size of them. PKCS5
        and PKCS7 read the pad length from the last byte and strip that many
        bytes; only the last byte is validated.

        Args:
            data: Padded bytes
            block_size: Cipher block size in bytes

        Returns:
            Unpadded bytes

        Raises:
            InvalidPaddingError: If the PKCS#7 pad length is 0, exceeds the
                data length or exceeds block_size
        """
        if self is Padding.NONE:
            return bytes(data)

        if self is Padding.ZERO:
            end = len(data)
            while end > 0 and data[end - 1] == 0 and len(data) - end < block_size:
                end -= 1
            return bytes(data[:end])

        if not data:
            raise InvalidPaddingError("unpad empty data")

        number = data[-1]
        if number == 0:
            raise InvalidPaddingError("unpad number 0 is invalid")
        if number > len(data):
            raise InvalidPaddingError(f"unpad number {number} > length {len(data)}")
        if number > block_size:
            raise InvalidPaddingError(f"unpad number {number} > block size {block_size}")

        return bytes(data[:-number])
