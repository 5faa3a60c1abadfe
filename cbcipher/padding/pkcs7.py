"""
PKCS#7 Padding

Padding codecs used by the chaining modes. The default codec removes
padding by trusting the trailing byte, exactly as the buffers produced by
:meth:`PKCS7Padding.pad` require. :class:`StrictPKCS7Padding` validates the
whole padding run and can be swapped in without touching the chaining code.
"""

from abc import ABC, abstractmethod

from Cryptodome.Util.Padding import pad as _pad
from Cryptodome.Util.Padding import unpad as _unpad

from ..errors import InvalidPadding


class PaddingCodec(ABC):
    """Pad and unpad buffers to a multiple of a fixed block size."""

    def __init__(self, block_size: int = 16):
        if not 0 < block_size < 256:
            raise ValueError("Block size must be between 1 and 255 bytes")
        self.block_size = block_size

    @abstractmethod
    def pad(self, data: bytes) -> bytes:
        """Return a new buffer with padding appended to data."""

    @abstractmethod
    def unpad(self, data: bytes) -> bytes:
        """Return a new buffer with the padding of data removed."""


class PKCS7Padding(PaddingCodec):
    """
    PKCS#7 padding as described in RFC 5652, section 6.3.

    ``unpad`` reads the pad count from the last byte and truncates. It
    does not verify the remaining padding bytes, and a count larger than
    the buffer leaves nothing.
    """

    def pad(self, data: bytes) -> bytes:
        """
        Append n bytes of value n, where n is in [1, block_size].

        Args:
            data: The buffer to pad

        Returns:
            The padded buffer, always longer than data
        """
        return _pad(bytes(data), self.block_size, style='pkcs7')

    def unpad(self, data: bytes) -> bytes:
        """
        Strip as many bytes as the trailing byte says.

        Args:
            data: A padded buffer

        Returns:
            The buffer without its padding

        Raises:
            InvalidPadding: If data is empty
        """
        if not data:
            raise InvalidPadding("cannot unpad an empty buffer")
        pad_size = data[-1]
        return bytes(data[:max(len(data) - pad_size, 0)])


class StrictPKCS7Padding(PKCS7Padding):
    """
    PKCS#7 padding that rejects anything :meth:`pad` could not have produced.
    """

    def unpad(self, data: bytes) -> bytes:
        """
        Validate and strip PKCS#7 padding.

        Args:
            data: A padded buffer

        Returns:
            The buffer without its padding

        Raises:
            InvalidPadding: If the buffer is not aligned, the pad count is
                outside [1, block_size], or a padding byte differs from it
        """
        if not data:
            raise InvalidPadding("cannot unpad an empty buffer")
        try:
            return _unpad(bytes(data), self.block_size, style='pkcs7')
        except ValueError as e:
            raise InvalidPadding(str(e)) from e


def pad(data: bytes, block_size: int = 16) -> bytes:
    """Convenience function to PKCS#7 pad data."""
    return PKCS7Padding(block_size).pad(data)


def unpad(data: bytes, block_size: int = 16, strict: bool = False) -> bytes:
    """
    Convenience function to remove PKCS#7 padding.

    Args:
        data: A padded buffer
        block_size: Block size the buffer was padded to
        strict: Validate the whole padding run instead of trusting the last byte

    Returns:
        The buffer without its padding
    """
    codec = StrictPKCS7Padding(block_size) if strict else PKCS7Padding(block_size)
    return codec.unpad(data)
