"""
cbcipher - AES/CBC/PKCS#7 Buffer Cipher Library

This library encrypts and decrypts whole in-memory buffers with AES in
Cipher Block Chaining mode and PKCS#7 padding, behind a small capability
contract so callers do not depend on a concrete cipher family.

Key Features:
- AES-128, AES-192 and AES-256 keys
- CBC chaining over a caller-supplied IV
- Trusting PKCS#7 unpadding by default, strict unpadding on request
- Typed errors for every malformed key, IV or ciphertext
- TOML configuration, rotating log files and resource lifecycle helpers

"""

from .cbc_mode import AesCbcPkcs7Cipher, decrypt, encrypt
from .cipher_core import BLOCK_SIZE, KEY_SIZES, BlockCipher
from .errors import (
    CipherError,
    CipherInitError,
    InvalidIVLength,
    InvalidKeyLength,
    InvalidPadding,
    MalformedCiphertext,
)
from .padding import PKCS7Padding, StrictPKCS7Padding

__version__ = '0.1.0'
__author__ = 'cbcipher Team'

__all__ = [
    'AesCbcPkcs7Cipher',
    'BLOCK_SIZE',
    'BlockCipher',
    'CipherError',
    'CipherInitError',
    'InvalidIVLength',
    'InvalidKeyLength',
    'InvalidPadding',
    'KEY_SIZES',
    'MalformedCiphertext',
    'PKCS7Padding',
    'StrictPKCS7Padding',
    'decrypt',
    'encrypt',
]
