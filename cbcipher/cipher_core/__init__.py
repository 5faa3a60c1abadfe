"""
Cipher Core Package

This package holds the capability contract every buffer cipher implements
and the AES block primitive that chaining modes are built on.
"""

from .block_cipher import (
    BLOCK_SIZE,
    KEY_SIZES,
    AESBlockPrimitive,
    BlockCipher,
    decrypt_block,
    encrypt_block,
    validate_key,
)

__all__ = [
    'BLOCK_SIZE',
    'KEY_SIZES',
    'AESBlockPrimitive',
    'BlockCipher',
    'decrypt_block',
    'encrypt_block',
    'validate_key',
]
