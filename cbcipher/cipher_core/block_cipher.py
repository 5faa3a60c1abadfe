"""
Block Cipher Implementation

This module provides the capability contract shared by every buffer cipher
in the package, and the AES block primitive the chaining modes are built on.
The primitive itself is not reimplemented: the key schedule and the
per-block transform come from pycryptodomex.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from Cryptodome.Cipher import AES

from ..errors import CipherInitError, InvalidKeyLength

# AES block size in bytes
BLOCK_SIZE = AES.block_size

# Accepted AES key sizes in bytes (AES-128, AES-192, AES-256)
KEY_SIZES: Tuple[int, ...] = (16, 24, 32)


class BlockCipher(ABC):
    """
    Capability contract for ciphers operating on whole in-memory buffers.

    Callers depend on this interface rather than on a concrete algorithm.
    Implementations must not mutate any state from ``encrypt`` or
    ``decrypt`` so a single instance can be shared between threads.
    """

    block_size: int = BLOCK_SIZE

    @abstractmethod
    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Encrypt a buffer.

        Args:
            plaintext: The data to encrypt, of any length

        Returns:
            The ciphertext

        Raises:
            CipherError: If the buffer cannot be encrypted
        """

    @abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt a buffer produced by :meth:`encrypt`.

        Args:
            ciphertext: The data to decrypt

        Returns:
            The original plaintext

        Raises:
            CipherError: If the buffer cannot be decrypted
        """


def validate_key(key: bytes) -> bytes:
    """
    Check that key has one of the lengths accepted by AES.

    Args:
        key: The candidate key

    Returns:
        The key as an immutable bytes object

    Raises:
        InvalidKeyLength: If the key is not 16, 24 or 32 bytes long
    """
    key = bytes(key)
    if len(key) not in KEY_SIZES:
        raise InvalidKeyLength(len(key), KEY_SIZES)
    return key


class AESBlockPrimitive:
    """
    Single-block AES transform with a pre-expanded key schedule.

    The underlying ECB object only holds the key schedule, so encrypting or
    decrypting does not change its state and each call returns a freshly
    allocated buffer.
    """

    block_size = BLOCK_SIZE

    def __init__(self, key: bytes):
        """
        Expand key into the AES key schedule.

        Args:
            key: A 16, 24 or 32 byte key

        Raises:
            InvalidKeyLength: If the key length is not accepted by AES
            CipherInitError: If the library refuses the key material
        """
        key = validate_key(key)
        try:
            self._ecb = AES.new(key, AES.MODE_ECB)
        except (ValueError, TypeError) as e:
            raise CipherInitError("failed to create AES cipher block") from e
        self.key_size = len(key)

    def encrypt_blocks(self, data: bytes) -> bytes:
        """
        Encrypt block-aligned data, each block independently.

        Args:
            data: One or more whole blocks

        Returns:
            The encrypted blocks, same length as data
        """
        if len(data) % self.block_size != 0:
            raise ValueError(f"Data must be a multiple of {self.block_size} bytes")
        return self._ecb.encrypt(data)

    def decrypt_blocks(self, data: bytes) -> bytes:
        """
        Decrypt block-aligned data, each block independently.

        Args:
            data: One or more whole blocks

        Returns:
            The decrypted blocks, same length as data
        """
        if len(data) % self.block_size != 0:
            raise ValueError(f"Data must be a multiple of {self.block_size} bytes")
        return self._ecb.decrypt(data)

    def encrypt_block(self, block: bytes) -> bytes:
        """
        Encrypt exactly one block.

        Args:
            block: The plaintext block (must be block_size bytes)

        Returns:
            The encrypted ciphertext block
        """
        if len(block) != self.block_size:
            raise ValueError(f"Plaintext must be exactly {self.block_size} bytes")
        return self._ecb.encrypt(block)

    def decrypt_block(self, block: bytes) -> bytes:
        """
        Decrypt exactly one block.

        Args:
            block: The ciphertext block (must be block_size bytes)

        Returns:
            The decrypted plaintext block
        """
        if len(block) != self.block_size:
            raise ValueError(f"Ciphertext must be exactly {self.block_size} bytes")
        return self._ecb.decrypt(block)


def encrypt_block(plaintext: bytes, key: bytes) -> bytes:
    """
    Convenience function to encrypt a single block.

    Args:
        plaintext: The plaintext block to encrypt
        key: The AES key

    Returns:
        The encrypted ciphertext block
    """
    return AESBlockPrimitive(key).encrypt_block(plaintext)


def decrypt_block(ciphertext: bytes, key: bytes) -> bytes:
    """
    Convenience function to decrypt a single block.

    Args:
        ciphertext: The ciphertext block to decrypt
        key: The AES key

    Returns:
        The decrypted plaintext block
    """
    return AESBlockPrimitive(key).decrypt_block(ciphertext)
