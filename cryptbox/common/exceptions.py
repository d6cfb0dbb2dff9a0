"""
Custom exceptions for cryptbox.

Every failure raised by the facade derives from CryptboxException so callers
can catch the whole family at once. Errors caused by malformed input also
derive from ValueError. File and sink failures are not wrapped: the built-in
OSError family propagates as-is.
"""


class CryptboxException(Exception):
    """Base exception for cryptbox errors."""
    pass


class InvalidKeyError(CryptboxException, ValueError):
    """Key length is not accepted by the cipher."""
    pass


class InvalidIVError(CryptboxException, ValueError):
    """IV is missing or its length differs from the block size."""
    pass


class InvalidNonceError(InvalidIVError):
    """GCM nonce is missing or has a length the primitive rejects."""
    pass


class InvalidLengthError(CryptboxException, ValueError):
    """Input is not block aligned where the mode requires it."""
    pass


class InvalidPaddingError(CryptboxException, ValueError):
    """Padding bytes are malformed."""
    pass


class AuthenticationError(CryptboxException):
    """AEAD tag did not authenticate the ciphertext."""
    pass


class DecryptionError(CryptboxException):
    """RSA decryption failed."""
    pass


class VerificationError(CryptboxException):
    """Signature verification failed."""
    pass


class MessageTooLongError(CryptboxException, ValueError):
    """Message does not fit in the RSA modulus."""
    pass


class EncodeError(CryptboxException, ValueError):
    """Data could not be encoded."""
    pass


class DecodeError(CryptboxException, ValueError):
    """Hex or base64 input is malformed."""
    pass


class HashUnavailableError(CryptboxException):
    """Requested hash is unknown or unsupported by the backend."""
    pass


class KeyFormatError(CryptboxException, ValueError):
    """PEM block missing, DER unparsable or key of the wrong category."""
    pass


class RandomError(CryptboxException):
    """Random source returned fewer bytes than requested."""
    pass
