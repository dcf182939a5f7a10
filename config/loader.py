"""
Configuration loader.

Loads configuration from:
1. Default values (built-in)
2. TOML config file (vectorscope.toml or ~/.config/vectorscope/config.toml)
3. Environment variables (for secrets and the timeout)

Priority: env vars > config file > defaults
"""

import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import VectorScopeConfig

logger = logging.getLogger(__name__)

# Config file search paths (in priority order)
CONFIG_PATHS = [
    Path("vectorscope.toml"),
    Path(".vectorscope.toml"),
    Path.home() / ".config" / "vectorscope" / "config.toml",
]

ENV_PREFIX = "VECTORSCOPE_"


class ConfigError(Exception):
    """Configuration error with helpful message."""

    def __init__(self, message: str, source: str | None = None, field: str | None = None):
        self.source = source
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.source:
            parts.append(f"Source: {self.source}")
        if self.field:
            parts.append(f"Field: {self.field}")
        return " | ".join(parts)


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file if it exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML: {e}", source=str(path)) from e

    logger.info("Loaded config from: %s", path)
    return data


def _find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in CONFIG_PATHS:
        if path.exists():
            return path
    return None


def _load_env_api_keys() -> dict[str, str | None]:
    """Load API keys from environment variables."""
    return {
        "finnhub": os.environ.get(f"{ENV_PREFIX}FINNHUB_KEY"),
        "alpha_vantage": os.environ.get(f"{ENV_PREFIX}ALPHA_VANTAGE_KEY"),
        "anthropic": os.environ.get(f"{ENV_PREFIX}ANTHROPIC_KEY"),
    }


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    env_keys = {k: v for k, v in _load_env_api_keys().items() if v}
    if env_keys:
        overrides["api_keys"] = env_keys
        logger.debug("Loaded %d API key(s) from environment", len(env_keys))

    if timeout_env := os.environ.get(f"{ENV_PREFIX}TIMEOUT"):
        try:
            overrides["http"] = {"timeout_seconds": float(timeout_env)}
        except ValueError as e:
            raise ConfigError(
                f"Invalid timeout: {timeout_env!r}",
                source=f"{ENV_PREFIX}TIMEOUT",
                field="http.timeout_seconds",
            ) from e

    return overrides


def load_config(config_path: Path | str | None = None) -> VectorScopeConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Explicit path to config file (optional)

    Returns:
        Validated VectorScopeConfig

    Raises:
        ConfigError: If configuration is invalid
    """
    config_data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", source=str(path))
        config_data = _load_toml_file(path)
    else:
        found_path = _find_config_file()
        if found_path:
            config_data = _load_toml_file(found_path)

    config_data = _deep_merge(config_data, _env_overrides())

    try:
        return VectorScopeConfig(**config_data)
    except ValidationError as e:
        errors = e.errors()
        if errors:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", []))
            msg = first_error.get("msg", "Validation error")
            raise ConfigError(f"Invalid configuration: {msg}", field=field) from e
        raise ConfigError(f"Invalid configuration: {e}") from e


@lru_cache
def get_config() -> VectorScopeConfig:
    """
    Get singleton configuration instance.

    Uses LRU cache to ensure config is loaded only once.
    """
    return load_config()


def reload_config(config_path: Path | str | None = None) -> VectorScopeConfig:
    """
    Force reload configuration.

    Clears the cache and reloads from file/environment. An explicit path is
    loaded directly and not cached.
    """
    get_config.cache_clear()
    if config_path:
        return load_config(config_path)
    return get_config()
