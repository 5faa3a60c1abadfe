"""
Cipher Block Chaining Package

This package implements AES in CBC mode with PKCS#7 padding behind the
:class:`~cbcipher.cipher_core.BlockCipher` contract.
"""

from .cbc_mode import AesCbcPkcs7Cipher, encrypt, decrypt

__all__ = ['AesCbcPkcs7Cipher', 'encrypt', 'decrypt']
