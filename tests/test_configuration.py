"""
Tests for the TOML configuration layer.
"""

import base64
import io
from datetime import timedelta

import pytest
from Cryptodome.Cipher import AES

from cbcipher import InvalidIVLength, InvalidPadding, StrictPKCS7Padding
from cbcipher.conf import (
    Configuration,
    ConfigurationError,
    Encoding,
    load_log_settings,
    new_cipher,
    parse_duration,
)

KEY = bytes.fromhex("1234567890123456789012345678901234567890123456789012345678901234")
IV = bytes.fromhex("1234567890ABCDEF1234567890ABCDEF")

CONFIG = """
[app]
name = "sandbox"
port = 8080
debug = true
hosts = ["a.example", "b.example"]
timeout = "1m30s"
secret = "s3cr3t"
hex_secret = "deadbeef"

[database]
host = "localhost"

[cipher]
key = "1234567890123456789012345678901234567890123456789012345678901234"
iv = "1234567890ABCDEF1234567890ABCDEF"
"""


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "development.toml").write_text(CONFIG)
    return tmp_path


def test_initialize_reads_environment_file(config_dir):
    config = Configuration("myapp", "development", [config_dir])
    config.initialize()

    assert config.name == "configuration"
    assert config.path == config_dir / "development.toml"
    assert config.get_string("app.name") == "sandbox"
    assert config.get_int("app.port") == 8080
    assert config.get_bool("app.debug") is True
    assert config.get_string_list("app.hosts") == ["a.example", "b.example"]
    assert config.get_duration("app.timeout") == timedelta(seconds=90)


def test_search_paths_are_tried_in_order(tmp_path, config_dir):
    empty = tmp_path / "empty"
    empty.mkdir()
    config = Configuration("myapp", "development", [empty, config_dir])
    config.initialize()
    assert config.get_string("database.host") == "localhost"


@pytest.mark.parametrize("environment", ["", "   "])
def test_missing_environment_name(config_dir, environment):
    with pytest.raises(ConfigurationError, match="environment name is missing"):
        Configuration("myapp", environment, [config_dir]).initialize()


def test_missing_file(config_dir):
    with pytest.raises(ConfigurationError, match="production.toml"):
        Configuration("myapp", "production", [config_dir]).initialize()


def test_unparsable_file(tmp_path):
    (tmp_path / "broken.toml").write_text("this is = = not toml")
    with pytest.raises(ConfigurationError):
        Configuration("myapp", "broken", [tmp_path]).initialize()


def test_environment_overrides_file(config_dir, monkeypatch):
    monkeypatch.setenv("MYAPP_DATABASE_HOST", "db.internal")
    monkeypatch.setenv("MYAPP_APP_PORT", "9090")
    config = Configuration("myapp", "development", [config_dir])
    config.initialize()

    assert config.get_string("database.host") == "db.internal"
    assert config.get_int("app.port") == 9090
    assert config.get_section("database") == {"host": "db.internal"}


def test_missing_keys_return_zero_values():
    config = Configuration.from_string("")
    assert config.get("nope") is None
    assert config.get_string("nope") == ""
    assert config.get_int("nope") == 0
    assert config.get_bool("nope") is False
    assert config.get_string_list("nope") == []
    assert config.get_duration("nope") == timedelta(0)
    assert config.get_section("nope") == {}


def test_conversion_errors():
    config = Configuration.from_string('word = "abc"\n[table]\nx = 1')
    with pytest.raises(ConfigurationError):
        config.get_int("word")
    with pytest.raises(ConfigurationError):
        config.get_bool("word")
    with pytest.raises(ConfigurationError):
        config.get_duration("word")
    with pytest.raises(ConfigurationError):
        config.get_section("word")


def test_get_bytes():
    config = Configuration.from_string(CONFIG)
    assert config.get_bytes("app.secret") == b"s3cr3t"
    assert config.get_bytes("app.secret", Encoding.UTF8) == b"s3cr3t"
    assert config.get_bytes("app.hex_secret", Encoding.HEX) == b"\xde\xad\xbe\xef"
    assert config.get_bytes("app.hex_secret", "hex") == b"\xde\xad\xbe\xef"
    with pytest.raises(ConfigurationError):
        config.get_bytes("app.secret", Encoding.HEX)
    with pytest.raises(ConfigurationError, match="unsupported encoding"):
        config.get_bytes("app.secret", "base32")


def test_from_reader():
    config = Configuration.from_reader(io.BytesIO(b'[a]\nb = "c"'))
    assert config.get_string("a.b") == "c"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("90s", timedelta(seconds=90)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("24h", timedelta(days=1)),
        ("250ms", timedelta(milliseconds=250)),
        ("1.5h", timedelta(minutes=90)),
        ("-2m", timedelta(minutes=-2)),
        ("30", timedelta(seconds=30)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "h", "10x", "1h 30m", "inf"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_new_cipher_from_hex_settings():
    cipher = new_cipher(Configuration.from_string(CONFIG))
    assert cipher.key_size == 32
    assert base64.b64encode(cipher.encrypt(b"a")).decode() == "YPID0ng/IBlB2BS1fyya+w=="


def test_new_cipher_from_utf8_settings():
    config = Configuration.from_string(
        '[cipher]\nkey = "0123456789abcdef"\niv = "fedcba9876543210"\nencoding = "utf-8"'
    )
    cipher = new_cipher(config)
    assert cipher.key_size == 16
    assert cipher.iv == b"fedcba9876543210"


def test_new_cipher_strict_padding():
    config = Configuration.from_string(CONFIG + "strict_padding = true\n")
    cipher = new_cipher(config)
    assert isinstance(cipher.padding, StrictPKCS7Padding)
    bad_padding = AES.new(KEY, AES.MODE_CBC, iv=IV).encrypt(b"a" * 14 + b"\x01\x02")
    with pytest.raises(InvalidPadding):
        cipher.decrypt(bad_padding)


def test_new_cipher_key_from_environment(monkeypatch):
    monkeypatch.setenv("MYAPP_CIPHER_KEY", "00" * 16)
    cipher = new_cipher(Configuration.from_string(CONFIG, app_name="myapp"))
    assert cipher.key_size == 16


def test_new_cipher_missing_section():
    with pytest.raises(ConfigurationError, match=r"invalid \[cipher\] settings"):
        new_cipher(Configuration.from_string(""))


def test_new_cipher_rejects_bad_iv():
    config = Configuration.from_string('[cipher]\nkey = "00000000000000000000000000000000"\niv = "00"')
    with pytest.raises(InvalidIVLength):
        new_cipher(config)


def test_log_settings():
    config = Configuration.from_string(
        '[log]\nbasename = "app.log"\nlevel = "debug"\nformat = "json"\n'
        'rotation_interval = "1h"\nrotation_counts = 3\noutput_stdout = true',
        app_name="settingstest",
    )
    settings = load_log_settings(config)
    assert settings.level == 10
    assert settings.format == "json"
    assert settings.rotation_interval == timedelta(hours=1)
    assert settings.rotation_counts == 3
    assert settings.output_stdout is True


@pytest.mark.parametrize(
    "extra",
    ['level = "loud"', 'format = "xml"', 'rotation_interval = "0s"'],
)
def test_log_settings_rejects(extra):
    config = Configuration.from_string(
        f'[log]\nbasename = "app.log"\n{extra}', app_name="settingstest"
    )
    with pytest.raises(ConfigurationError):
        load_log_settings(config)


def test_environment_override_without_app_name(monkeypatch):
    monkeypatch.setenv("DATABASE_HOST", "db.internal")
    config = Configuration.from_string(CONFIG)
    assert config.get_string("database.host") == "db.internal"
    assert config.get_section("database") == {"host": "db.internal"}


def test_environment_cannot_replace_a_table(monkeypatch):
    monkeypatch.setenv("DATABASE", "not a table")
    config = Configuration.from_string(CONFIG)
    assert config.get_section("database") == {"host": "localhost"}
