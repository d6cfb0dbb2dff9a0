"""
Output encodings applied after a cryptographic step.

NONE passes bytes through, HEX renders lowercase hex without separators and
BASE64 uses the standard alphabet with '=' padding and no line wrapping.
Decoding accepts only the exact inverse of the encoder.
"""

import base64
import binascii
from enum import Enum

from .exceptions import DecodeError
from .utils import BytesLike, to_bytes


class Encoding(Enum):
    NONE = "none"
    HEX = "hex"
    BASE64 = "base64"

    def encode(self, data: BytesLike) -> bytes:
        """
        Encode data.

        Args:
            data: Raw bytes

        Returns:
            Encoded bytes (ASCII for HEX and BASE64)
        """
        data = to_bytes(data)
        if self is Encoding.HEX:
            return binascii.hexlify(data)
        if self is Encoding.BASE64:
            return base64.b64encode(data)
        return data

    def decode(self, data: BytesLike) -> bytes:
        """
        Decode data produced by encode().

        Args:
            data: Encoded bytes or ASCII text

        Returns:
            Raw bytes

        Raises:
            DecodeError: If data is not valid for this encoding
        """
        data = to_bytes(data)
        if self is Encoding.HEX and data != data.lower():
            raise DecodeError("hex decode failed: uppercase digits")
        try:
            if self is Encoding.HEX:
                return binascii.unhexlify(data)
            if self is Encoding.BASE64:
                return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"{self.value} decode failed: {e}") from e
        return data
