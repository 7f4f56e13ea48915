"""
Tests for configuration models and the configuration loader.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from web_resource.cache.backends import CacheBackendType
from web_resource.config.loader import ConfigLoader
from web_resource.config.models import GlobalConfig, LogLevel, ResourceSettings


class TestModels:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        config = GlobalConfig()

        assert config.resource.ttl_seconds == 7200
        assert config.resource.namespace_prefix == "link_"
        assert config.resource.default_thumbnail is None
        assert config.cache.backend == CacheBackendType.MEMORY
        assert config.logging.level == LogLevel.INFO
        assert config.fetch.verify_ssl is True

    def test_empty_namespace_prefix_rejected(self):
        with pytest.raises(ValidationError):
            ResourceSettings(namespace_prefix="")

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            ResourceSettings(ttl_seconds=0)


class TestConfigLoader:
    """Test ConfigLoader."""

    def test_environment_overrides(self):
        loader = ConfigLoader(
            environ={
                "WEB_RESOURCE_TTL": "60",
                "WEB_RESOURCE_LOG_LEVEL": "DEBUG",
                "WEB_RESOURCE_LOG_STRUCTURED": "true",
                "WEB_RESOURCE_TIMEOUT": "2.5",
                "WEB_RESOURCE_VERIFY_SSL": "no",
                "WEB_RESOURCE_CACHE_BACKEND": "redis",
                "WEB_RESOURCE_REDIS_URL": "redis://cache.internal:6379/2",
                "UNRELATED": "ignored",
            }
        )

        config = loader.load_config()

        assert config.resource.ttl_seconds == 60
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.enable_structured is True
        assert config.fetch.total_timeout == 2.5
        assert config.fetch.verify_ssl is False
        assert config.cache.backend == CacheBackendType.REDIS
        assert config.cache.redis_url == "redis://cache.internal:6379/2"

    def test_file_then_environment(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "resource": {"ttl_seconds": 300, "namespace_prefix": "res_"},
                    "cache": {"max_size": 50},
                }
            )
        )
        loader = ConfigLoader(environ={"WEB_RESOURCE_TTL": "90"})

        config = loader.load_config(config_file)

        assert config.resource.ttl_seconds == 90
        assert config.resource.namespace_prefix == "res_"
        assert config.cache.max_size == 50

    def test_unsupported_file_format(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("resource: {}")

        with pytest.raises(ValueError):
            ConfigLoader(environ={}).load_config(config_file)

    def test_invalid_json(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with pytest.raises(ValueError):
            ConfigLoader(environ={}).load_config(config_file)

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            ConfigLoader(environ={"WEB_RESOURCE_TTL": "-1"}).load_config()

    def test_deep_merge(self):
        loader = ConfigLoader(environ={})
        merged = loader._deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}})

        assert merged == {"a": {"b": 3, "c": 2}, "d": 1}
