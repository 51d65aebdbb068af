"""Unit tests for configuration management."""

import json
import os
from unittest.mock import patch

import pytest

from feedbuilder.cache import DynamoDBCache, MemoryCache
from feedbuilder.config import ChannelConfig, Config


class TestConfigUnit:
    """Unit tests for Config class."""

    def test_defaults_when_no_env_vars(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

        assert config.language == "en"
        assert config.url == ""
        assert config.timezone == "UTC"
        assert config.cache_table == ""
        assert config.cache_ttl == 0
        assert config.items_file == "items.json"
        assert config.aws_region == "us-east-1"
        assert config.log_level == "INFO"

    def test_values_from_env_vars(self):
        env = {
            "FEED_LANGUAGE": "it",
            "FEED_URL": "https://example.com",
            "FEED_TIMEZONE": "Europe/Rome",
            "FEED_CACHE_TABLE": "feed-cache",
            "FEED_CACHE_TTL": "300",
            "AWS_DEFAULT_REGION": "eu-south-1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config()

        assert config.language == "it"
        assert config.url == "https://example.com"
        assert config.timezone == "Europe/Rome"
        assert config.cache_table == "feed-cache"
        assert config.cache_ttl == 300
        assert config.aws_region == "eu-south-1"

    def test_current_region_takes_precedence(self):
        env = {"CURRENT_AWS_REGION": "eu-west-1", "AWS_DEFAULT_REGION": "us-west-2"}
        with patch.dict(os.environ, env, clear=True):
            assert Config().aws_region == "eu-west-1"

    def test_get_lookups(self):
        with patch.dict(os.environ, {"FEED_URL": "https://example.com"}, clear=True):
            config = Config()

        assert config.get("language") == "en"
        assert config.get("application.language") == "en"
        assert config.get("url") == "https://example.com"
        assert config.get("application.url") == "https://example.com"
        assert config.get("cache_ttl") == "0"
        assert config.get("nonexistent") == ""
        assert config.get("nonexistent", "fallback") == "fallback"
        assert config.get("_load_items_file", "fallback") == "fallback"

    def test_get_cache_defaults_to_memory(self):
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(Config().get_cache(), MemoryCache)

    def test_get_cache_uses_dynamodb_table(self):
        with (
            patch.dict(os.environ, {"FEED_CACHE_TABLE": "feed-cache"}, clear=True),
            patch("boto3.resource"),
        ):
            cache = Config().get_cache()

        assert isinstance(cache, DynamoDBCache)
        assert cache.table_name == "feed-cache"


class TestItemsFileUnit:
    """Unit tests for loading channel metadata and items."""

    def _config_for(self, path) -> Config:
        with patch.dict(os.environ, {"FEED_ITEMS_FILE": str(path)}, clear=True):
            return Config()

    def test_channel_and_items(self, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text(
            json.dumps(
                {
                    "channel": {"title": "Blog", "logo": "https://x/logo.png"},
                    "items": [{"title": "Hello"}],
                }
            ),
            encoding="utf-8",
        )
        config = self._config_for(items_file)

        assert config.get_channel_config() == ChannelConfig(
            title="Blog",
            description="My feed description",
            logo="https://x/logo.png",
            icon="",
        )
        assert config.get_items() == [{"title": "Hello"}]

    def test_missing_channel_uses_defaults(self, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text(json.dumps({"items": []}), encoding="utf-8")

        assert self._config_for(items_file).get_channel_config() == ChannelConfig()

    def test_missing_file(self, tmp_path):
        config = self._config_for(tmp_path / "nope.json")

        with pytest.raises(FileNotFoundError):
            config.get_items()

    def test_invalid_json(self, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            self._config_for(items_file).get_items()

    def test_items_must_be_a_list(self, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text(json.dumps({"items": {"title": "x"}}), encoding="utf-8")

        with pytest.raises(ValueError, match="must be a list"):
            self._config_for(items_file).get_items()
