"""
Padding Package

This package implements the padding codecs that bring arbitrary buffers to
a whole number of cipher blocks and back.
"""

from .pkcs7 import PaddingCodec, PKCS7Padding, StrictPKCS7Padding, pad, unpad

__all__ = ['PaddingCodec', 'PKCS7Padding', 'StrictPKCS7Padding', 'pad', 'unpad']
