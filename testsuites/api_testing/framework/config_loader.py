"""
================================================================================
Configuration Loader
================================================================================

Resolves suite configuration from three layers:

    1. Process environment (API_BASE_URL for api.base_url)
    2. The local .env file, loaded with python-dotenv; it never replaces a
       variable that is already set, so CI secrets win over the file the
       credential manager writes
    3. config/config.yaml

A key resolves to the first layer that has a non-empty value. An empty
entry such as `AUTH_TOKEN_EXPIRES_AT=` counts as unset.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger


PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"
DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"

TRUE_VALUES = ("true", "1", "yes", "on")


class ConfigurationError(Exception):
    """Raised when the YAML configuration cannot be parsed."""
    pass


def env_key(key: str) -> str:
    """
    Environment variable that overrides a dot-path key.

        >>> env_key("bearer_token.refresh_threshold_minutes")
        'BEARER_TOKEN_REFRESH_THRESHOLD_MINUTES'
    """
    return key.upper().replace(".", "_")


def coerce(value: str, reference: Any) -> Any:
    """
    Convert an environment string to the type of `reference`.

    Values that do not parse are returned as the original string.
    """
    if isinstance(reference, bool):
        return value.strip().lower() in TRUE_VALUES
    if isinstance(reference, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(reference, float):
        try:
            return float(value)
        except ValueError:
            return value
    return value


class ConfigLoader:
    """
    Process-wide configuration singleton.

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("auth.token_header", "Auth-token")
        'Auth-token'
        >>> config.get_first(["bearer_token.expires_at", "auth.token_expires_at"])
        '2030-01-01T00:00:00Z'   # whichever is configured first

    The environment is read on every `get`, so monkeypatched variables are
    visible without a reload. Call `reset()` between tests that need a
    different YAML or .env file.
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(
        cls,
        config_path: Optional[Path] = None,
        env_path: Optional[Path] = None,
    ) -> "ConfigLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_path: Optional[Path] = None,
        env_path: Optional[Path] = None,
    ) -> None:
        """
        Args:
            config_path: YAML file, DEFAULT_CONFIG_PATH when omitted
            env_path: dotenv file, DEFAULT_ENV_PATH when omitted

        Arguments passed after the first construction are ignored.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._env_path = Path(env_path or DEFAULT_ENV_PATH)
        self._data: Dict[str, Any] = {}
        self._load()
        self._initialized = True

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def env_path(self) -> Path:
        """Path of the .env file this loader reads."""
        return self._env_path

    def _load(self) -> None:
        if self._env_path.exists():
            load_dotenv(self._env_path, override=False)
            logger.debug(f"Loaded environment file: {self._env_path}")

        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._data = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self._config_path}: {e}"
            ) from e
        logger.debug(f"Loaded configuration from: {self._config_path}")

    def _from_yaml(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """
        Value of a dot-path key, or `default` when no layer sets it.

        Environment strings are coerced to the type of `default`.
        """
        raw = os.environ.get(env_key(key))
        if raw:
            return coerce(raw, default)

        value = self._from_yaml(key)
        if value is None or value == "":
            return default
        return value

    def get_first(self, keys: Iterable[str], default: Any = None) -> Any:
        """Value of the first key in `keys` that is set, in order."""
        for key in keys:
            value = self.get(key)
            if value not in (None, ""):
                return coerce(value, default) if isinstance(value, str) else value
        return default

    def get_aliased(self, key: str, aliases: Iterable[str], default: Any = None) -> Any:
        """
        Like `get`, but older environment names also override the key.

            >>> config.get_aliased("auth.use_bearer_token", ["use_bearer_token"], False)
            True   # USE_BEARER_TOKEN=true, AUTH_USE_BEARER_TOKEN unset

        The environment variable of `key` wins over those of `aliases`, and
        any environment variable wins over the YAML file.
        """
        for name in (key, *aliases):
            raw = os.environ.get(env_key(name))
            if raw:
                return coerce(raw, default)
        return self.get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        """Raw YAML section, without environment overrides."""
        value = self._data.get(section)
        return dict(value) if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Re-read the .env and YAML files."""
        self._load()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next ConfigLoader() reloads from disk."""
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENV_PATH",
    "PROJECT_ROOT",
    "coerce",
    "env_key",
]
