"""
Configuration

Settings are read from ``<environment_name>.toml``, looked up in a list of
search paths. Any key can be overridden with an environment variable named
after the application and the dotted key, e.g. ``database.host`` becomes
``MYAPP_DATABASE_HOST`` for an application named ``myapp``, or
``DATABASE_HOST`` when no application name is set.
"""

import logging
import os
import re
import tomllib
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Optional

from ..resource import Resource

logger = logging.getLogger(__name__)

_DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}
_NUMBER = re.compile(r'\d+(?:\.\d*)?|\.\d+')
_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')
_DURATION = re.compile(r'(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|ms|s|m|h))+')

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off', '')


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or a value cannot be converted."""


class Encoding(str, Enum):
    """Encoding used to turn a configured string into bytes."""

    UTF8 = 'utf-8'
    HEX = 'hex'

    def __str__(self) -> str:
        return self.value


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration such as ``"90s"``, ``"1h30m"`` or ``"250ms"``.

    A bare number is taken as seconds.

    Raises:
        ValueError: If text is not a duration
    """
    s = text.strip()
    sign = 1
    if s[:1] in ('-', '+'):
        sign = -1 if s[0] == '-' else 1
        s = s[1:]

    if _NUMBER.fullmatch(s):
        return timedelta(seconds=sign * float(s))
    if not _DURATION.fullmatch(s):
        raise ValueError(f"invalid duration [{text}]")
    seconds = sum(float(value) * _DURATION_UNITS[unit]
                  for value, unit in _DURATION_PART.findall(s))
    return timedelta(seconds=sign * seconds)


class Configuration(Resource):
    """Application settings loaded from a TOML file."""

    def __init__(self,
                 app_name: str = '',
                 environment_name: str = '',
                 search_paths: Optional[Iterable[os.PathLike]] = None):
        """
        Create an unloaded configuration.

        Args:
            app_name: Application name, used as the environment variable prefix
            environment_name: Environment name, which is also the file name
                (without the ``.toml`` suffix)
            search_paths: Directories searched, in order, for the file
        """
        self.app_name = app_name
        self.environment_name = environment_name
        self.search_paths = [Path(p) for p in (search_paths or [])]
        self.path: Optional[Path] = None
        self._data: Dict[str, Any] = {}

    @classmethod
    def from_reader(cls, fp: BinaryIO, app_name: str = '') -> "Configuration":
        """Build a loaded configuration from a binary TOML stream."""
        try:
            data = tomllib.load(fp)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"failed to parse configuration from {fp!r}") from e
        config = cls(app_name=app_name)
        config._data = data
        return config

    @classmethod
    def from_string(cls, text: str, app_name: str = '') -> "Configuration":
        """Build a loaded configuration from a TOML document."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError("failed to parse configuration") from e
        config = cls(app_name=app_name)
        config._data = data
        return config

    @property
    def name(self) -> str:
        return 'configuration'

    def initialize(self) -> None:
        """
        Find and load ``<environment_name>.toml``.

        Raises:
            ConfigurationError: If the environment name is blank, or the
                file is missing or unparsable
        """
        if not self.environment_name.strip():
            raise ConfigurationError("environment name is missing")

        filename = f"{self.environment_name}.toml"
        for directory in self.search_paths:
            candidate = directory / filename
            if candidate.is_file():
                break
        else:
            raise ConfigurationError(
                f"failed to read config file: [{filename}] not found in "
                f"{[str(p) for p in self.search_paths]}"
            )

        try:
            with candidate.open('rb') as f:
                self._data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"failed to parse config file: [{candidate}]") from e

        self.path = candidate
        logger.debug("Loaded configuration from %s", candidate)

    def finalize(self) -> None:
        pass

    def _env_name(self, key: str) -> str:
        if self.app_name:
            key = f"{self.app_name}_{key}"
        return key.replace('.', '_').replace('-', '_').upper()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the raw value of a dotted key.

        An environment override, when set, always wins and is returned as a
        string. Without an application name the variable is the bare key,
        e.g. ``DATABASE_HOST``.
        """
        value = os.environ.get(self._env_name(key))
        if value is not None:
            return value
        return self._lookup(key, default)

    def _lookup(self, key: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_section(self, key: str) -> Dict[str, Any]:
        """
        Return the table at key as a dict, with environment overrides applied
        to the keys it contains.
        """
        node = self._lookup(key)
        if node is None:
            return {}
        if not isinstance(node, dict):
            raise ConfigurationError(f"[{key}] is not a table")
        return {
            name: self.get_section(f"{key}.{name}") if isinstance(value, dict)
            else self.get(f"{key}.{name}")
            for name, value in node.items()
        }

    def get_string(self, key: str) -> str:
        value = self.get(key)
        return '' if value is None else str(value)

    def get_int(self, key: str) -> int:
        value = self.get(key)
        if value is None:
            return 0
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"[{key}] is not an integer: {value!r}") from e

    def get_bool(self, key: str) -> bool:
        value = self.get(key)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigurationError(f"[{key}] is not a boolean: {value!r}")

    def get_string_list(self, key: str) -> List[str]:
        """Return a list value; a string value is split on whitespace."""
        value = self.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        return [str(v) for v in value]

    def get_duration(self, key: str) -> timedelta:
        """
        Return a duration value.

        Strings use Go duration syntax (``"1h30m"``). Plain numbers are taken
        as seconds, not as nanoseconds the way Go's viper reads them.
        """
        value = self.get(key)
        if value is None:
            return timedelta(0)
        if isinstance(value, timedelta):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(seconds=value)
        try:
            return parse_duration(str(value))
        except ValueError as e:
            raise ConfigurationError(f"[{key}] is not a duration: {value!r}") from e

    def get_bytes(self, key: str, encoding: Encoding = Encoding.UTF8) -> bytes:
        """
        Decode a string value into bytes.

        Args:
            key: Dotted key of the value
            encoding: How the string represents the bytes

        Returns:
            The decoded bytes

        Raises:
            ConfigurationError: If the encoding is unsupported or the value
                does not decode
        """
        value = self.get_string(key)
        try:
            encoding = Encoding(encoding)
        except ValueError as e:
            raise ConfigurationError(f"unsupported encoding [{encoding}]") from e

        if encoding is Encoding.UTF8:
            return value.encode('utf-8')
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise ConfigurationError(f"[{key}] is not valid hex") from e
