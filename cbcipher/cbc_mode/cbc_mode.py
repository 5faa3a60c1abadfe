"""
CBC Mode with PKCS#7 Padding

This module implements AES in Cipher Block Chaining mode on whole in-memory
buffers. Each instance owns one expanded key and one IV, and reuses them for
every call; producing a fresh IV per message is left to the caller.
"""

from typing import Optional

from Cryptodome.Util.strxor import strxor

from ..cipher_core.block_cipher import (
    BLOCK_SIZE,
    AESBlockPrimitive,
    BlockCipher,
    validate_key,
)
from ..errors import CipherInitError, InvalidIVLength, MalformedCiphertext
from ..padding.pkcs7 import PaddingCodec, PKCS7Padding


class AesCbcPkcs7Cipher(BlockCipher):
    """
    AES/CBC/PKCS#7 buffer cipher.

    Instances are immutable after construction and can be shared between
    threads: ``encrypt`` and ``decrypt`` only read the key schedule and the
    IV, and allocate their own working buffers.
    """

    def __init__(self, key: bytes, iv: bytes, padding: Optional[PaddingCodec] = None):
        """
        Validate the key and IV and expand the key.

        Args:
            key: AES key, 16, 24 or 32 bytes
            iv: Initialization vector, exactly one block (16 bytes)
            padding: Padding codec; defaults to :class:`PKCS7Padding`

        Raises:
            InvalidKeyLength: If the key length is not 16, 24 or 32
            InvalidIVLength: If the IV is not exactly one block
            CipherInitError: If the key schedule cannot be built, or the
                padding codec uses another block size
        """
        key = validate_key(key)
        iv = bytes(iv)
        if len(iv) != BLOCK_SIZE:
            raise InvalidIVLength(len(iv), BLOCK_SIZE)

        if padding is None:
            padding = PKCS7Padding(BLOCK_SIZE)
        elif padding.block_size != BLOCK_SIZE:
            raise CipherInitError(f"padding codec must use a {BLOCK_SIZE} byte block size")

        self._block = AESBlockPrimitive(key)
        self._iv = iv
        self._padding = padding

    @property
    def iv(self) -> bytes:
        return self._iv

    @property
    def key_size(self) -> int:
        """Key size in bytes (16, 24 or 32)."""
        return self._block.key_size

    @property
    def padding(self) -> PaddingCodec:
        return self._padding

    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Pad and encrypt plaintext.

        The output is always a whole number of blocks and at least one byte
        longer than plaintext: an already aligned plaintext gains a full
        block of padding.

        Args:
            plaintext: The data to encrypt, of any length (including empty)

        Returns:
            The ciphertext
        """
        padded = self._padding.pad(plaintext)

        encrypted = bytearray()
        prev = self._iv
        for i in range(0, len(padded), BLOCK_SIZE):
            prev = self._block.encrypt_block(strxor(padded[i:i + BLOCK_SIZE], prev))
            encrypted += prev
        return bytes(encrypted)

    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt ciphertext and remove its padding.

        Every block only depends on itself and the previous ciphertext
        block, so the whole buffer is block-decrypted at once and XORed with
        the IV followed by all ciphertext blocks but the last.

        Args:
            ciphertext: Data produced by :meth:`encrypt` with the same key and IV

        Returns:
            The plaintext

        Raises:
            MalformedCiphertext: If ciphertext is empty or not block aligned
            InvalidPadding: If the padding codec rejects the decrypted data
        """
        ciphertext = bytes(ciphertext)
        if not ciphertext or len(ciphertext) % BLOCK_SIZE != 0:
            raise MalformedCiphertext(len(ciphertext), BLOCK_SIZE)

        decrypted = self._block.decrypt_blocks(ciphertext)
        chain = self._iv + ciphertext[:-BLOCK_SIZE]
        return self._padding.unpad(strxor(decrypted, chain))


def encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Encrypt data using AES/CBC/PKCS#7.

    Args:
        plaintext: The plaintext to encrypt
        key: The AES key (16, 24 or 32 bytes)
        iv: The initialization vector (16 bytes)

    Returns:
        The ciphertext
    """
    return AesCbcPkcs7Cipher(key, iv).encrypt(plaintext)


def decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Decrypt data using AES/CBC/PKCS#7.

    Args:
        ciphertext: The ciphertext to decrypt
        key: The AES key used for encryption
        iv: The initialization vector used for encryption

    Returns:
        The decrypted plaintext
    """
    return AesCbcPkcs7Cipher(key, iv).decrypt(ciphertext)


if __name__ == "__main__":
    import base64

    key = bytes.fromhex("1234567890" * 6 + "1234")
    iv = bytes.fromhex("1234567890ABCDEF1234567890ABCDEF")
    cipher = AesCbcPkcs7Cipher(key, iv)

    for plaintext in (b"a", b"a" * 16):
        ciphertext = cipher.encrypt(plaintext)
        print(f"Plaintext: {plaintext}")
        print(f"Ciphertext: {base64.b64encode(ciphertext).decode('ascii')}")
        assert cipher.decrypt(ciphertext) == plaintext

    print("CBC mode round trip completed successfully!")
