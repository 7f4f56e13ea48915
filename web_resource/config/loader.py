"""
Configuration loader for web_resource.

Configuration is merged from an optional JSON file and ``WEB_RESOURCE_*``
environment variables, environment taking precedence.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .models import GlobalConfig


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    env_prefix = "WEB_RESOURCE_"

    env_mappings: Dict[str, Tuple[str, str]] = {
        # Logging
        "LOG_LEVEL": ("logging", "level"),
        "LOG_FORMAT": ("logging", "format"),
        "LOG_STRUCTURED": ("logging", "enable_structured"),
        # Fetching
        "TIMEOUT": ("fetch", "total_timeout"),
        "CONNECT_TIMEOUT": ("fetch", "connect_timeout"),
        "MAX_RESPONSE_SIZE": ("fetch", "max_response_size"),
        "VERIFY_SSL": ("fetch", "verify_ssl"),
        "USER_AGENT": ("fetch", "user_agent"),
        # Resources
        "TTL": ("resource", "ttl_seconds"),
        "DEFAULT_THUMBNAIL": ("resource", "default_thumbnail"),
        # Cache
        "CACHE_BACKEND": ("cache", "backend"),
        "CACHE_MAX_SIZE": ("cache", "max_size"),
        "REDIS_URL": ("cache", "redis_url"),
        "REDIS_KEY_PREFIX": ("cache", "key_prefix"),
    }

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            environ: Environment mapping to read (defaults to ``os.environ``)
        """
        self.environ = os.environ if environ is None else environ

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Build the configuration.

        Args:
            config_file: Optional JSON file; environment variables override it

        Returns:
            Validated GlobalConfig
        """
        data = self._load_from_file(Path(config_file)) if config_file else {}
        return GlobalConfig.model_validate(self._deep_merge(data, self._load_from_environment()))

    def _load_from_file(self, config_path: Path) -> Dict[str, Any]:
        if config_path.suffix.lower() != ".json":
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
        try:
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        return loaded

    def _load_from_environment(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for suffix, (section, option) in self.env_mappings.items():
            raw = self.environ.get(self.env_prefix + suffix)
            if raw is not None:
                overrides.setdefault(section, {})[option] = self._convert_env_value(raw)
        return overrides

    @staticmethod
    def _convert_env_value(value: str) -> Any:
        """Interpret booleans and numbers; everything else stays a string."""
        flag = value.strip().lower()
        if flag in {"true", "yes", "on"}:
            return True
        if flag in {"false", "no", "off"}:
            return False
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue
        return value

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``override`` into a copy of ``base``, recursing into nested sections."""
        merged = dict(base)
        for key, value in override.items():
            nested = merged.get(key)
            if isinstance(nested, dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(nested, value)
            else:
                merged[key] = value
        return merged


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration from the default sources."""
    return ConfigLoader().load_config(config_file)
