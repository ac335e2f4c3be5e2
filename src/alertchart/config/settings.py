"""Centralized configuration and secrets management.

Loads configuration from .env file and provides typed access to settings.

- A fresh checkout boots with a single .env
- Missing config produces clear errors
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pytz

__all__ = [
    "ConfigError",
    "Settings",
    "generate_example_env",
    "get_settings",
    "load_env_file",
    "load_settings",
]


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Centralized settings for alertchart.

    Attributes
    ----------
    api_url : str
        Orchestrator REST API base URL (required)
    network_id : str | None
        Default network to chart
    tls_cert : Path | None
        Client certificate for the orchestrator API
    tls_key : Path | None
        Private key matching ``tls_cert``
    ca_bundle : Path | None
        CA bundle used to verify the API server
    timeout : float
        Per-request timeout in seconds
    default_timezone : str
        Timezone assumed for naive CLI input
    log_level : str
        Logging level
    log_dir : Path | None
        Directory for JSONL log files (console only if unset)
    """

    api_url: str

    network_id: str | None = None

    # TLS
    tls_cert: Path | None = None
    tls_key: Path | None = None
    ca_bundle: Path | None = None

    timeout: float = 30.0
    default_timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None

    def __post_init__(self):
        """Validate settings after initialization."""
        for name in ("tls_cert", "tls_key", "ca_bundle", "log_dir"):
            value = getattr(self, name)
            if value and isinstance(value, str):
                setattr(self, name, Path(value))

        if not self.api_url:
            raise ConfigError(
                "ALERTCHART_API_URL is required. "
                "Set it in .env or environment (e.g., ALERTCHART_API_URL=https://api.magma.local)"
            )
        self.api_url = self.api_url.rstrip("/")

        if bool(self.tls_cert) != bool(self.tls_key):
            raise ConfigError("ALERTCHART_TLS_CERT and ALERTCHART_TLS_KEY must be set together.")

        if self.timeout <= 0:
            raise ConfigError(f"ALERTCHART_TIMEOUT must be positive, got {self.timeout}")

        if self.default_timezone not in pytz.all_timezones_set:
            raise ConfigError(f"ALERTCHART_DEFAULT_TZ is not a known timezone: {self.default_timezone}")

        self.log_level = self.log_level.upper()

    @property
    def client_cert(self) -> tuple[str, str] | None:
        """Certificate pair in the form httpx expects, if configured."""
        if self.tls_cert and self.tls_key:
            return (str(self.tls_cert), str(self.tls_key))
        return None

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, then from os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Returns
        -------
        Settings
            Loaded settings

        Raises
        ------
        ConfigError
            If required settings are missing or invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        api_url = os.environ.get("ALERTCHART_API_URL")
        if not api_url:
            raise ConfigError(
                "ALERTCHART_API_URL is required.\n\n"
                "Quick fix:\n"
                "  1. Create a .env file in the working directory\n"
                "  2. Set ALERTCHART_API_URL=https://<orchestrator-host> in .env\n"
                "  3. Run your command again\n\n"
                "Or set it in environment: export ALERTCHART_API_URL=https://<orchestrator-host>"
            )

        try:
            return cls(
                api_url=api_url,
                network_id=os.environ.get("ALERTCHART_NETWORK_ID") or None,
                tls_cert=_optional_path("ALERTCHART_TLS_CERT"),
                tls_key=_optional_path("ALERTCHART_TLS_KEY"),
                ca_bundle=_optional_path("ALERTCHART_CA_BUNDLE"),
                timeout=float(os.environ.get("ALERTCHART_TIMEOUT", "30.0")),
                default_timezone=os.environ.get("ALERTCHART_DEFAULT_TZ", "UTC"),
                log_level=os.environ.get("ALERTCHART_LOG_LEVEL", "INFO"),
                log_dir=_optional_path("ALERTCHART_LOG_DIR"),
            )
        except (ValueError, KeyError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def _optional_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value else None


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Variables already present in the environment are not overridden.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file) as f:
        for line in f:
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ.setdefault(key, value)


# Global settings instance
_settings: Settings | None = None


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from environment and remember them.

    Parameters
    ----------
    env_file
        Path to .env file

    Returns
    -------
    Settings
        Loaded settings

    Raises
    ------
    ConfigError
        If required settings missing (clear error message)
    """
    global _settings
    _settings = Settings.from_env(env_file)
    return _settings


def get_settings() -> Settings:
    """Get current settings.

    Raises
    ------
    ConfigError
        If settings not loaded
    """
    if _settings is None:
        raise ConfigError("Settings not loaded. Call load_settings() first or set ALERTCHART_API_URL.")
    return _settings


def generate_example_env(output_path: Path | None = None) -> str:
    """Generate example .env file with all settings.

    Parameters
    ----------
    output_path
        Optional path to write .env file

    Returns
    -------
    str
        Example .env contents
    """
    example = """# alertchart configuration
# Copy this to .env and adjust values

# ====================
# Orchestrator API
# ====================

# Base URL of the orchestrator REST API (required)
ALERTCHART_API_URL=https://api.magma.local

# Network to chart when --network-id is not given (optional)
# ALERTCHART_NETWORK_ID=my_network

# Client certificate and key (optional, must be set together)
# ALERTCHART_TLS_CERT=/etc/alertchart/admin_operator.pem
# ALERTCHART_TLS_KEY=/etc/alertchart/admin_operator.key.pem

# CA bundle to verify the API server (optional)
# ALERTCHART_CA_BUNDLE=/etc/alertchart/rootCA.pem

# Per-request timeout in seconds (optional, default: 30)
ALERTCHART_TIMEOUT=30

# Timezone for naive --start/--end values (optional, default: UTC)
ALERTCHART_DEFAULT_TZ=UTC

# ====================
# Logging
# ====================

# Log level (optional, default: INFO)
ALERTCHART_LOG_LEVEL=INFO

# JSONL log directory (optional, console only if not set)
# ALERTCHART_LOG_DIR=logs
"""

    if output_path:
        output_path.write_text(example)

    return example
