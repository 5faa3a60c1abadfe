"""
Validated Settings

Pydantic models for the ``[log]`` and ``[cipher]`` tables, and a factory
that builds a cipher from the key material held in configuration.
"""

import logging
from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, ValidationError, field_validator

from ..cbc_mode.cbc_mode import AesCbcPkcs7Cipher
from ..cipher_core.block_cipher import BLOCK_SIZE
from ..padding.pkcs7 import StrictPKCS7Padding
from .configuration import Configuration, ConfigurationError, Encoding, parse_duration

logger = logging.getLogger(__name__)


class LogSettings(BaseModel):
    """The ``[log]`` table."""

    basename: str
    rotation_counts: int = 7
    rotation_interval: timedelta = timedelta(days=1)
    output_stdout: bool = False
    format: Literal["text", "json"] = "text"
    level: int = logging.INFO

    @field_validator("rotation_interval", mode="before")
    @classmethod
    def convert_rotation_interval(cls, value):
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("rotation_interval")
    @classmethod
    def check_rotation_interval(cls, value: timedelta) -> timedelta:
        if value.total_seconds() < 1:
            raise ValueError("rotation interval must be at least one second")
        return value

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        if isinstance(value, str):
            level = logging.getLevelNamesMapping().get(value.upper())
            if level is None:
                raise ValueError(f"illegal log level [{value}]")
            return level
        return value


class CipherSettings(BaseModel):
    """The ``[cipher]`` table. Key and IV are encoded with ``encoding``."""

    key: str
    iv: str
    encoding: Encoding = Encoding.HEX
    strict_padding: bool = False


def load_log_settings(config: Configuration, section: str = "log") -> LogSettings:
    try:
        return LogSettings(**config.get_section(section))
    except ValidationError as e:
        raise ConfigurationError(f"invalid [{section}] settings") from e


def load_cipher_settings(config: Configuration, section: str = "cipher") -> CipherSettings:
    try:
        return CipherSettings(**config.get_section(section))
    except ValidationError as e:
        raise ConfigurationError(f"invalid [{section}] settings") from e


def new_cipher(config: Configuration, section: str = "cipher") -> AesCbcPkcs7Cipher:
    """
    Build an AES/CBC/PKCS#7 cipher from a configuration table.

    Raises:
        ConfigurationError: If the table is missing or malformed
        CipherError: If the decoded key or IV is rejected by the cipher
    """
    settings = load_cipher_settings(config, section)
    key = config.get_bytes(f"{section}.key", settings.encoding)
    iv = config.get_bytes(f"{section}.iv", settings.encoding)

    padding = StrictPKCS7Padding(BLOCK_SIZE) if settings.strict_padding else None
    cipher = AesCbcPkcs7Cipher(key, iv, padding=padding)
    logger.debug(
        "Configured AES-%d/CBC cipher from [%s] (strict padding: %s)",
        cipher.key_size * 8, section, settings.strict_padding,
    )
    return cipher
