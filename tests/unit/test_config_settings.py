"""Tests for configuration and secrets management."""

import os
from pathlib import Path

import pytest

from alertchart.config.settings import (
    ConfigError,
    Settings,
    generate_example_env,
    get_settings,
    load_env_file,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    original_env = os.environ.copy()

    for var in [k for k in os.environ if k.startswith("ALERTCHART_")]:
        del os.environ[var]

    import alertchart.config.settings as settings_module

    settings_module._settings = None

    yield

    os.environ.clear()
    os.environ.update(original_env)
    settings_module._settings = None


def test_settings_creation():
    """Test creating settings object with defaults."""
    settings = Settings(api_url="https://api.magma.test")

    assert settings.api_url == "https://api.magma.test"
    assert settings.timeout == 30.0
    assert settings.default_timezone == "UTC"
    assert settings.client_cert is None


def test_settings_strips_trailing_slash():
    """Base URL is normalized."""
    assert Settings(api_url="https://api.magma.test/").api_url == "https://api.magma.test"


def test_settings_converts_string_paths():
    """String paths become Path objects."""
    settings = Settings(api_url="https://x", tls_cert="/etc/cert.pem", tls_key="/etc/key.pem", log_dir="logs")

    assert settings.tls_cert == Path("/etc/cert.pem")
    assert settings.log_dir == Path("logs")
    assert settings.client_cert == ("/etc/cert.pem", "/etc/key.pem")


def test_settings_requires_api_url():
    """Empty API URL raises a clear error."""
    with pytest.raises(ConfigError, match="ALERTCHART_API_URL"):
        Settings(api_url="")


def test_settings_cert_without_key():
    """Certificate and key must come together."""
    with pytest.raises(ConfigError, match="TLS"):
        Settings(api_url="https://x", tls_cert="/etc/cert.pem")


def test_settings_rejects_unknown_timezone():
    """Unknown timezone names are configuration errors."""
    with pytest.raises(ConfigError, match="timezone"):
        Settings(api_url="https://x", default_timezone="Mars/Olympus")


def test_settings_rejects_non_positive_timeout():
    """Timeout must be positive."""
    with pytest.raises(ConfigError):
        Settings(api_url="https://x", timeout=0)


def test_from_env(tmp_path: Path):
    """Settings load from environment variables."""
    os.environ["ALERTCHART_API_URL"] = "https://api.magma.test"
    os.environ["ALERTCHART_NETWORK_ID"] = "lte_net"
    os.environ["ALERTCHART_TIMEOUT"] = "12.5"
    os.environ["ALERTCHART_DEFAULT_TZ"] = "Europe/Brussels"
    os.environ["ALERTCHART_LOG_LEVEL"] = "debug"

    settings = Settings.from_env(tmp_path / "missing.env")

    assert settings.network_id == "lte_net"
    assert settings.timeout == 12.5
    assert settings.default_timezone == "Europe/Brussels"
    assert settings.log_level == "DEBUG"
    assert settings.log_dir is None


def test_from_env_missing_api_url(tmp_path: Path):
    """Missing API URL explains how to fix it."""
    with pytest.raises(ConfigError, match="Quick fix"):
        Settings.from_env(tmp_path / "missing.env")


def test_from_env_invalid_number(tmp_path: Path):
    """Unparseable numbers are configuration errors."""
    os.environ["ALERTCHART_API_URL"] = "https://x"
    os.environ["ALERTCHART_TIMEOUT"] = "soon"

    with pytest.raises(ConfigError, match="Invalid configuration"):
        Settings.from_env(tmp_path / "missing.env")


def test_load_env_file(tmp_path: Path):
    """Values from .env are loaded, quotes stripped, comments skipped."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "\n"
        "ALERTCHART_API_URL='https://api.magma.test'\n"
        'ALERTCHART_NETWORK_ID="lte_net"\n'
    )

    load_env_file(env_file)

    assert os.environ["ALERTCHART_API_URL"] == "https://api.magma.test"
    assert os.environ["ALERTCHART_NETWORK_ID"] == "lte_net"


def test_environment_overrides_env_file(tmp_path: Path):
    """Variables already set win over .env."""
    env_file = tmp_path / ".env"
    env_file.write_text("ALERTCHART_API_URL=https://from-file\n")
    os.environ["ALERTCHART_API_URL"] = "https://from-env"

    settings = Settings.from_env(env_file)

    assert settings.api_url == "https://from-env"


def test_load_and_get_settings(tmp_path: Path):
    """load_settings stores the instance returned by get_settings."""
    env_file = tmp_path / ".env"
    env_file.write_text("ALERTCHART_API_URL=https://api.magma.test\n")

    loaded = load_settings(env_file)

    assert get_settings() is loaded


def test_get_settings_before_load():
    """get_settings fails clearly before load_settings."""
    with pytest.raises(ConfigError, match="not loaded"):
        get_settings()


def test_generate_example_env(tmp_path: Path):
    """Example .env contains every setting and loads."""
    output = tmp_path / ".env"
    example = generate_example_env(output)

    assert output.read_text() == example
    for key in ("ALERTCHART_API_URL", "ALERTCHART_TIMEOUT", "ALERTCHART_LOG_LEVEL", "ALERTCHART_TLS_CERT"):
        assert key in example

    settings = Settings.from_env(output)
    assert settings.api_url == "https://api.magma.local"
