"""
Cipher Errors

This module defines the exception taxonomy raised by the cipher core.
Construction-time errors are unrecoverable for the instance being built;
the caller must supply corrected parameters and construct again.
"""

from typing import Tuple


class CipherError(Exception):
    """Base class for every failure raised by the cipher core."""


class InvalidKeyLength(CipherError, ValueError):
    """
    Raised when a key is not one of the lengths accepted by the block cipher.

    Attributes:
        got: Length of the rejected key in bytes
        allowed: Accepted key lengths in bytes
    """

    def __init__(self, got: int, allowed: Tuple[int, ...]):
        self.got = got
        self.allowed = tuple(allowed)
        bits = ", ".join(str(size * 8) for size in self.allowed)
        super().__init__(
            f"illegal key length [{got}]. key length for AES must be {bits} bit"
        )


class InvalidIVLength(CipherError, ValueError):
    """
    Raised when an initialization vector does not match the block size.

    Attributes:
        got: Length of the rejected IV in bytes
        required: The block size in bytes
    """

    def __init__(self, got: int, required: int):
        self.got = got
        self.required = required
        super().__init__(
            f"illegal initial vector size [{got}]byte. "
            f"initial vector size must be [{required}]byte"
        )


class CipherInitError(CipherError):
    """Raised when the block primitive rejects the key material."""


class MalformedCiphertext(CipherError, ValueError):
    """
    Raised when a ciphertext is empty or not aligned on the block size.

    Attributes:
        got: Length of the rejected ciphertext in bytes
        block_size: The block size in bytes
    """

    def __init__(self, got: int, block_size: int):
        self.got = got
        self.block_size = block_size
        super().__init__(
            f"ciphertext length [{got}] must be a positive multiple of [{block_size}]"
        )


class InvalidPadding(CipherError, ValueError):
    """Raised when padding cannot be removed from a decrypted buffer."""
