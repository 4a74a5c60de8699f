"""
hecomlink configuration.

Platform credentials, cache and focus behaviour, and server options.
Reads from ~/.hecomlink/config.toml with environment variable overrides.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

HECOMLINK_HOME = Path(os.getenv("HECOMLINK_HOME", Path.home() / ".hecomlink"))
CONFIG_PATH = HECOMLINK_HOME / "config.toml"

RefocusMode = Literal["append", "replace"]
REFOCUS_MODES: tuple[str, ...] = ("append", "replace")


# ---------------------------------------------------------------------------
# Platform connection
# ---------------------------------------------------------------------------

@dataclass
class PlatformConfig:
    """Credentials and transport settings for the Hecom open API."""

    api_host: str = ""
    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_host and self.client_id and self.client_secret and self.username)


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class HecomConfig:
    """Top-level hecomlink configuration."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8090
    log_level: str = "INFO"

    # Platform
    platform: PlatformConfig = field(default_factory=PlatformConfig)

    # Cache
    cache_expiration_minutes: float = 5

    # Capabilities
    min_label_length: int = 0       # get-objects hides objects with shorter labels
    refocus_mode: RefocusMode = "append"
    tool_timeout_seconds: float = 30.0

    @property
    def cache_expiration_seconds(self) -> float:
        return self.cache_expiration_minutes * 60


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _apply_toml(config: HecomConfig, data: dict[str, Any]) -> None:
    """Overlay TOML data onto a HecomConfig."""
    server = data.get("server", {})
    if "host" in server:
        config.host = server["host"]
    if "port" in server:
        config.port = int(server["port"])
    if "log_level" in server:
        config.log_level = str(server["log_level"]).upper()

    platform = data.get("platform", {})
    for key in ("api_host", "client_id", "client_secret", "username"):
        if key in platform:
            setattr(config.platform, key, str(platform[key]))
    if "timeout" in platform:
        config.platform.timeout = float(platform["timeout"])

    cache = data.get("cache", {})
    if "expiration_minutes" in cache:
        config.cache_expiration_minutes = float(cache["expiration_minutes"])

    tools = data.get("tools", {})
    if "min_label_length" in tools:
        config.min_label_length = int(tools["min_label_length"])
    if "refocus_mode" in tools:
        config.refocus_mode = _refocus_mode(tools["refocus_mode"])
    if "timeout_seconds" in tools:
        config.tool_timeout_seconds = float(tools["timeout_seconds"])


def _refocus_mode(value: str) -> RefocusMode:
    mode = value.strip().lower()
    if mode not in REFOCUS_MODES:
        raise ValueError(f"refocus_mode must be one of {REFOCUS_MODES}, got {value!r}")
    return mode  # type: ignore[return-value]


def _apply_env(config: HecomConfig) -> None:
    env_platform = {
        "HECOM_HOST": "api_host",
        "HECOM_CLIENT_ID": "client_id",
        "HECOM_CLIENT_SECRET": "client_secret",
        "HECOM_USERNAME": "username",
    }
    for var, attr in env_platform.items():
        if os.getenv(var):
            setattr(config.platform, attr, os.environ[var])

    if os.getenv("HECOM_CACHE_EXPIRATION_MINUTES"):
        config.cache_expiration_minutes = float(os.environ["HECOM_CACHE_EXPIRATION_MINUTES"])
    if os.getenv("HECOM_MIN_LABEL_LENGTH"):
        config.min_label_length = int(os.environ["HECOM_MIN_LABEL_LENGTH"])
    if os.getenv("HECOM_REFOCUS_MODE"):
        config.refocus_mode = _refocus_mode(os.environ["HECOM_REFOCUS_MODE"])

    if os.getenv("HECOMLINK_HOST"):
        config.host = os.environ["HECOMLINK_HOST"]
    if os.getenv("HECOMLINK_PORT"):
        config.port = int(os.environ["HECOMLINK_PORT"])
    if os.getenv("HECOMLINK_LOG_LEVEL"):
        config.log_level = os.environ["HECOMLINK_LOG_LEVEL"].upper()


def load_config(config_path: Path | None = None) -> HecomConfig:
    """
    Build config from defaults → TOML file → environment variables.

    Precedence (highest wins):
        1. Environment variables
        2. ~/.hecomlink/config.toml
        3. Built-in defaults
    """
    config = HecomConfig()

    path = config_path or CONFIG_PATH
    if path.exists():
        with open(path, "rb") as f:
            toml_data = tomllib.load(f)
        _apply_toml(config, toml_data)

    _apply_env(config)
    return config
