"""
Configuration Package

This package loads environment-specific TOML settings, with environment
variable overrides, and builds ciphers from the key material they hold.
"""

from .configuration import Configuration, ConfigurationError, Encoding, parse_duration
from .settings import (
    CipherSettings,
    LogSettings,
    load_cipher_settings,
    load_log_settings,
    new_cipher,
)

__all__ = [
    'Configuration',
    'ConfigurationError',
    'Encoding',
    'parse_duration',
    'CipherSettings',
    'LogSettings',
    'load_cipher_settings',
    'load_log_settings',
    'new_cipher',
]
